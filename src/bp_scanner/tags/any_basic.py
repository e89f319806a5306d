"""
Dynamically typed values for free-form author metadata.

Entity tag tables hold arbitrary JSON-like data attached by players and mods.
AnyBasic is a closed tagged union over the five shapes the game allows:
text, boolean, number, table and array.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, TypeAlias, cast

from ..errors import ShapeMismatchError


class AnyBasicKind(Enum):
    """Variants of AnyBasic, in parse precedence order."""

    STRING = "string"
    BOOL = "bool"
    NUMBER = "number"
    TABLE = "table"
    ARRAY = "array"


@dataclass(frozen=True)
class AnyBasic:
    """Immutable dynamic value.

    Tables are stored as read-only mappings (equality ignores key order,
    display keeps insertion order) and arrays as tuples, so values are
    hashable and nothing handed out by the accessors can be mutated. Use the
    ``parse`` classmethod or the per-kind constructors instead of building
    instances directly.
    """

    kind: AnyBasicKind
    value: Any

    # === CONSTRUCTORS ===

    @classmethod
    def string(cls, value: str) -> "AnyBasic":
        return cls(AnyBasicKind.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> "AnyBasic":
        return cls(AnyBasicKind.BOOL, value)

    @classmethod
    def number(cls, value: float) -> "AnyBasic":
        return cls(AnyBasicKind.NUMBER, float(value))

    @classmethod
    def table(cls, entries: Mapping[str, "AnyBasic"]) -> "AnyBasic":
        return cls(AnyBasicKind.TABLE, MappingProxyType(dict(entries)))

    @classmethod
    def array(cls, items: "list[AnyBasic] | Tuple[AnyBasic, ...]") -> "AnyBasic":
        return cls(AnyBasicKind.ARRAY, tuple(items))

    @classmethod
    def parse(cls, raw: Any, path: str = "") -> "AnyBasic":
        """Parse an untyped JSON value by shape.

        Shapes are tried in the order text, boolean, number, table, array and
        the first match wins. A quoted ``"42"`` is therefore text and never a
        number, and ``true`` is a boolean even though Python treats it as an
        int.

        Args:
            raw: Decoded JSON value
            path: Location of the value, used in error messages

        Returns:
            Parsed AnyBasic

        Raises:
            ShapeMismatchError: If the value (or a nested value) has no
                matching shape, e.g. ``null`` or a table with non-text keys
        """
        if isinstance(raw, str):
            return cls.string(raw)
        if isinstance(raw, bool):
            return cls.boolean(raw)
        if isinstance(raw, (int, float)):
            return cls.number(raw)
        if isinstance(raw, dict):
            entries: Dict[str, AnyBasic] = {}
            for key, item in cast(dict[Any, Any], raw).items():
                if not isinstance(key, str):
                    raise ShapeMismatchError(f"table key must be text, got {key!r}", path)
                entries[key] = cls.parse(item, f"{path}.{key}" if path else key)
            return cls.table(entries)
        if isinstance(raw, (list, tuple)):
            return cls.array(
                [
                    cls.parse(item, f"{path}[{i}]")
                    for i, item in enumerate(cast(list[Any], raw))
                ]
            )
        raise ShapeMismatchError(
            f"expected text, boolean, number, table or array, got {type(raw).__name__}",
            path,
        )

    # === ACCESSORS ===

    def as_string(self) -> Optional[str]:
        return self.value if self.kind is AnyBasicKind.STRING else None

    def as_bool(self) -> Optional[bool]:
        return self.value if self.kind is AnyBasicKind.BOOL else None

    def as_number(self) -> Optional[float]:
        return self.value if self.kind is AnyBasicKind.NUMBER else None

    def as_table(self) -> Optional[Mapping[str, "AnyBasic"]]:
        return self.value if self.kind is AnyBasicKind.TABLE else None

    def as_array(self) -> Optional[Tuple["AnyBasic", ...]]:
        return self.value if self.kind is AnyBasicKind.ARRAY else None

    # === CONVERSION ===

    def to_json(self) -> Any:
        """Convert back to a plain JSON-compatible value."""
        if self.kind is AnyBasicKind.TABLE:
            return {key: item.to_json() for key, item in self.value.items()}
        if self.kind is AnyBasicKind.ARRAY:
            return [item.to_json() for item in self.value]
        return self.value

    def __str__(self) -> str:
        if self.kind is AnyBasicKind.STRING:
            return self.value
        if self.kind is AnyBasicKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is AnyBasicKind.NUMBER:
            return format_number(self.value)
        if self.kind is AnyBasicKind.TABLE:
            inner = ", ".join(f"{key}: {item}" for key, item in self.value.items())
            return f"{{{inner}}}"
        return f"[{', '.join(str(item) for item in self.value)}]"

    def __repr__(self) -> str:
        return f"AnyBasic.{self.kind.name.lower()}({self.to_json()!r})"

    def __hash__(self) -> int:
        if self.kind is AnyBasicKind.TABLE:
            return hash((self.kind, frozenset(self.value.items())))
        return hash((self.kind, self.value))


def format_number(value: float) -> str:
    """Render a float in plain decimal notation.

    Integral values drop the fractional part (``1.0`` -> ``1``) and no
    exponent notation is used (``1e-07`` -> ``0.0000001``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


TagTable: TypeAlias = Dict[str, AnyBasic]
"""Free-form tag table attached to an entity."""


def parse_tag_table(raw: Any, path: str = "tags") -> TagTable:
    """Parse an entity tag table (text keys, AnyBasic values)."""
    parsed = AnyBasic.parse(raw, path)
    table = parsed.as_table()
    if table is None:
        raise ShapeMismatchError(f"expected table, got {parsed.kind.value}", path)
    return dict(table)


def dump_tag_table(tags: Mapping[str, AnyBasic]) -> dict[str, Any]:
    """Convert a tag table back to plain JSON data."""
    return {key: value.to_json() for key, value in tags.items()}
