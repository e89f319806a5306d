"""
Strict field access for document node parsers.

Node ``from_dict`` classmethods wrap their raw JSON object in a FieldReader,
which rejects unknown fields up front and type-checks every access. Errors
carry the dotted path of the offending value.
"""

from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    TypeVar,
    cast,
)

from ..errors import MissingFieldError, ShapeMismatchError, UnknownFieldError
from .indexed import IndexedVec

T = TypeVar("T")

_MISSING = object()


def join_path(path: str, name: str) -> str:
    """Append a field name to a dotted path."""
    return f"{path}.{name}" if path else name


def expect_object(raw: Any, path: str) -> Dict[str, Any]:
    """Return raw as a dict or raise ShapeMismatchError."""
    if not isinstance(raw, dict):
        raise ShapeMismatchError(f"expected object, got {type(raw).__name__}", path)
    return cast(Dict[str, Any], raw)


class FieldReader:
    """Typed, strict view over one JSON object.

    Args:
        raw: Decoded JSON value expected to be an object
        path: Location of the object
        allowed: Every field name the schema knows. ``None`` disables the
            unknown-field check (used by nodes that keep leftovers verbatim).
    """

    def __init__(self, raw: Any, path: str, allowed: Optional[Iterable[str]]):
        self.data = expect_object(raw, path)
        self.path = path
        self._allowed = frozenset(allowed) if allowed is not None else None

        if self._allowed is not None:
            for name in self.data:
                if name not in self._allowed:
                    raise UnknownFieldError(
                        f"unknown field '{name}'", join_path(path, name)
                    )

    def child_path(self, name: str) -> str:
        return join_path(self.path, name)

    def has(self, name: str) -> bool:
        return name in self.data

    def extras(self, known: Iterable[str]) -> Dict[str, Any]:
        """Fields whose names are not in known, in document order."""
        known_names = frozenset(known)
        return {k: v for k, v in self.data.items() if k not in known_names}

    def _get(self, name: str, required: bool) -> Any:
        value = self.data.get(name, _MISSING)
        if value is _MISSING and required:
            raise MissingFieldError(f"missing required field '{name}'", self.child_path(name))
        return value

    # === SCALARS ===

    def text(self, name: str, default: Any = _MISSING) -> Any:
        value = self._get(name, default is _MISSING)
        if value is _MISSING:
            return default
        if not isinstance(value, str):
            raise ShapeMismatchError(
                f"expected text, got {type(value).__name__}", self.child_path(name)
            )
        return value

    def boolean(self, name: str, default: Any = _MISSING) -> Any:
        value = self._get(name, default is _MISSING)
        if value is _MISSING:
            return default
        if not isinstance(value, bool):
            raise ShapeMismatchError(
                f"expected boolean, got {type(value).__name__}", self.child_path(name)
            )
        return value

    def integer(self, name: str, default: Any = _MISSING) -> Any:
        value = self._get(name, default is _MISSING)
        if value is _MISSING:
            return default
        if isinstance(value, bool) or not isinstance(value, int):
            raise ShapeMismatchError(
                f"expected integer, got {type(value).__name__}", self.child_path(name)
            )
        return value

    def number(self, name: str, default: Any = _MISSING) -> Any:
        value = self._get(name, default is _MISSING)
        if value is _MISSING:
            return default
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ShapeMismatchError(
                f"expected number, got {type(value).__name__}", self.child_path(name)
            )
        return float(value)

    def raw(self, name: str, default: Any = _MISSING) -> Any:
        """Unchecked access for values kept verbatim."""
        value = self._get(name, default is _MISSING)
        return default if value is _MISSING else value

    # === NESTED NODES ===

    def node(self, name: str, parse: Callable[[Any, str], T]) -> T:
        """Parse a required nested node with ``parse(raw, path)``."""
        return parse(self._get(name, True), self.child_path(name))

    def optional_node(self, name: str, parse: Callable[[Any, str], T]) -> Optional[T]:
        """Parse a nested node if present; absent fields give None."""
        value = self._get(name, False)
        if value is _MISSING:
            return None
        return parse(value, self.child_path(name))

    def array(self, name: str, parse: Callable[[Any, str], T]) -> List[T]:
        """Parse an optional plain JSON array of nodes (absent -> empty)."""
        value = self._get(name, False)
        if value is _MISSING:
            return []
        path = self.child_path(name)
        if not isinstance(value, list):
            raise ShapeMismatchError(f"expected array, got {type(value).__name__}", path)
        return [parse(item, f"{path}[{i}]") for i, item in enumerate(cast(List[Any], value))]

    def indexed(self, name: str, parse: Callable[[Any, str], T]) -> IndexedVec[T]:
        """Parse an optional IndexedVec field (absent -> empty container)."""
        value = self._get(name, False)
        if value is _MISSING:
            return IndexedVec()
        return IndexedVec.from_dict(value, parse, self.child_path(name))


def put_if(target: Dict[str, Any], name: str, value: Any, condition: bool) -> None:
    """Set target[name] only when condition holds (skip-if-default helper)."""
    if condition:
        target[name] = value


def dump_indexed(
    target: Dict[str, Any],
    name: str,
    vec: IndexedVec[T],
    dump_item: Callable[[T], Any],
) -> None:
    """Emit an IndexedVec field, omitting it entirely when empty."""
    if vec:
        target[name] = vec.to_dict(dump_item)


def dump_number(value: float) -> Any:
    """Emit integral floats as ints to keep serialized documents short."""
    if value.is_integer():
        return int(value)
    return value
