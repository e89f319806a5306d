"""
Sparsely keyed ordered container.

Blueprint documents store list-shaped collections (icons, filters, mapper
entries, the documents inside a book, ...) with an explicit positive index per
element. Indices need not be contiguous and the gaps are significant: the game
uses them to place things in specific slots. IndexedVec keeps the indices
intact through a parse/serialize round trip.
"""

import bisect
import re
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
    cast,
)

from ..errors import DuplicateKeyError, InvalidKeyError, ShapeMismatchError
from .ids import GetIDs, UsedIDs

T = TypeVar("T")

INDEX_KEY = "index"
"""Field carrying the key in the legacy list representation."""

_KEY_PATTERN = re.compile(r"[1-9][0-9]*")


class IndexedVec(GetIDs, Generic[T]):
    """Ordered mapping from positive integer key to value.

    Iteration is always in ascending key order. Appending without a key uses
    ``max(key) + 1`` (or 1 for an empty container); a gap left by a removed
    element is never filled by ``append``.

    Example:
        >>> icons = IndexedVec[str]()
        >>> icons.insert_at(3, "a")
        >>> icons.append("b")
        4
        >>> list(icons.items())
        [(3, 'a'), (4, 'b')]
    """

    def __init__(self, entries: Optional[Dict[int, T]] = None):
        self._keys: List[int] = []
        self._values: Dict[int, T] = {}
        for key, value in (entries or {}).items():
            self.insert_at(key, value)

    # === MUTATION ===

    def insert_at(self, key: int, value: T) -> None:
        """Insert a value under an explicit key.

        Raises:
            InvalidKeyError: If key is not a positive integer
            DuplicateKeyError: If key is already present
        """
        if isinstance(key, bool) or not isinstance(key, int) or key < 1:
            raise InvalidKeyError(f"key must be a positive integer, got {key!r}")
        if key in self._values:
            raise DuplicateKeyError(f"key {key} already present")
        bisect.insort(self._keys, key)
        self._values[key] = value

    def append(self, value: T) -> int:
        """Append a value after the current largest key.

        Returns:
            The key assigned to the value
        """
        key = self.next_key
        self._keys.append(key)
        self._values[key] = value
        return key

    def pop(self, key: int) -> T:
        """Remove and return the value stored under key.

        Raises:
            KeyError: If key is not present
        """
        value = self._values.pop(key)
        self._keys.remove(key)
        return value

    @property
    def next_key(self) -> int:
        """Key that the next ``append`` will use."""
        return self._keys[-1] + 1 if self._keys else 1

    # === ACCESS ===

    def items(self) -> Iterator[Tuple[int, T]]:
        """Iterate over (key, value) pairs in ascending key order."""
        for key in list(self._keys):
            yield key, self._values[key]

    def keys(self) -> List[int]:
        return list(self._keys)

    def values(self) -> List[T]:
        return [self._values[key] for key in self._keys]

    def get(self, key: int, default: Optional[T] = None) -> Optional[T]:
        return self._values.get(key, default)

    def __getitem__(self, key: int) -> T:
        return self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[T]:
        for _, value in self.items():
            yield value

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexedVec):
            return NotImplemented
        other_vec = cast("IndexedVec[Any]", other)
        return self._keys == other_vec._keys and all(
            self._values[key] == other_vec._values[key] for key in self._keys
        )

    def __repr__(self) -> str:
        inner = ", ".join(f"{key}: {value!r}" for key, value in self.items())
        return f"IndexedVec({{{inner}}})"

    # === REFERENCES ===

    def get_ids(self) -> UsedIDs:
        """Union of the reference sets of all contained values."""
        ids = UsedIDs()
        for value in self:
            if isinstance(value, GetIDs):
                ids.merge(value.get_ids())
        return ids

    # === SERIALIZATION ===

    @classmethod
    def from_dict(
        cls,
        raw: Any,
        parse_item: Callable[[Any, str], T],
        path: str = "",
    ) -> "IndexedVec[T]":
        """Parse the keyed object representation.

        Keys must be canonical positive decimal text ("1", "7", never "07",
        "+7" or "0"). The legacy list representation, where each element is an
        object with its key in an ``"index"`` field, is accepted as well.

        Args:
            raw: Decoded JSON value
            parse_item: Callable turning (raw element, element path) into T
            path: Location of the container, used in error messages

        Raises:
            InvalidKeyError: If a key is not a positive integer
            DuplicateKeyError: If the list form repeats an index
            ShapeMismatchError: If raw is neither an object nor a list
        """
        result: IndexedVec[T] = cls()

        if isinstance(raw, dict):
            for key_text, item in cast(dict[Any, Any], raw).items():
                item_path = f"{path}[{key_text!r}]" if isinstance(key_text, str) else path
                if not isinstance(key_text, str) or not _KEY_PATTERN.fullmatch(key_text):
                    raise InvalidKeyError(
                        f"key must be a positive integer, got {key_text!r}", item_path
                    )
                result.insert_at(int(key_text), parse_item(item, item_path))
            return result

        if isinstance(raw, list):
            for position, item in enumerate(cast(list[Any], raw)):
                item_path = f"{path}[{position}]"
                if not isinstance(item, dict) or INDEX_KEY not in item:
                    raise ShapeMismatchError(
                        f"list element must be an object with an '{INDEX_KEY}' field",
                        item_path,
                    )
                element = dict(cast(dict[str, Any], item))
                key = element.pop(INDEX_KEY)
                if isinstance(key, bool) or not isinstance(key, int) or key < 1:
                    raise InvalidKeyError(
                        f"key must be a positive integer, got {key!r}", item_path
                    )
                try:
                    result.insert_at(key, parse_item(element, item_path))
                except DuplicateKeyError as e:
                    raise DuplicateKeyError(e.message, item_path) from e
            return result

        raise ShapeMismatchError(
            f"expected keyed object, got {type(raw).__name__}", path
        )

    def to_dict(self, dump_item: Callable[[T], Any]) -> Dict[str, Any]:
        """Serialize to the keyed object form, keys ascending as decimal text."""
        return {str(key): dump_item(value) for key, value in self.items()}
