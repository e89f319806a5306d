"""
Mod versions, version requirements and dependency lists.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from ..errors import InvalidVersionError

_VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")

# [kind ]name[ comparator version], as used by info.json "dependencies"
_DEPENDENCY_PATTERN = re.compile(
    r"(?:(!|\?|\(\?\)|~)\s)?(\S+)(?:\s(>=?|<=?|=)\s(\d+\.\d+\.\d+))?"
)


@dataclass(frozen=True, order=True)
class Version:
    """Three part mod version, ordered numerically."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str, path: str = "") -> "Version":
        """Parse ``X.Y.Z``.

        Raises:
            InvalidVersionError: If text is not three dot separated numbers
        """
        match = _VERSION_PATTERN.fullmatch(text) if isinstance(text, str) else None
        if match is None:
            raise InvalidVersionError(f"invalid version {text!r}, expected X.Y.Z", path)
        return cls(*(int(part) for part in match.groups()))

    @classmethod
    def from_packed(cls, packed: int) -> "Version":
        """Decode the 64-bit game version stored in documents.

        The four 16-bit groups are major, minor, patch and build; the build
        number is dropped.
        """
        return cls(packed >> 48, (packed >> 32) & 0xFFFF, (packed >> 16) & 0xFFFF)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class VersionComparator(Enum):
    LOWER = "<"
    LOWER_OR_EQUAL = "<="
    EQUAL = "="
    HIGHER_OR_EQUAL = ">="
    HIGHER = ">"


_COMPARE = {
    VersionComparator.LOWER: lambda a, b: a < b,
    VersionComparator.LOWER_OR_EQUAL: lambda a, b: a <= b,
    VersionComparator.EQUAL: lambda a, b: a == b,
    VersionComparator.HIGHER_OR_EQUAL: lambda a, b: a >= b,
    VersionComparator.HIGHER: lambda a, b: a > b,
}


@dataclass(frozen=True)
class DependencyVersion:
    """Version requirement; no comparator means any version is accepted."""

    comparator: Optional[VersionComparator] = None
    version: Optional[Version] = None

    def __post_init__(self):
        if (self.comparator is None) != (self.version is None):
            raise ValueError("comparator and version must be given together")

    @classmethod
    def any(cls) -> "DependencyVersion":
        return cls()

    @classmethod
    def exact(cls, version: Version) -> "DependencyVersion":
        return cls(VersionComparator.EQUAL, version)

    @classmethod
    def at_least(cls, version: Version) -> "DependencyVersion":
        return cls(VersionComparator.HIGHER_OR_EQUAL, version)

    @property
    def is_any(self) -> bool:
        return self.comparator is None

    def matches(self, version: Version) -> bool:
        if self.comparator is None or self.version is None:
            return True
        return _COMPARE[self.comparator](version, self.version)

    @property
    def text(self) -> str:
        """Requirement without leading space, ``*`` for any version."""
        if self.comparator is None:
            return "*"
        return f"{self.comparator.value} {self.version}"

    def __str__(self) -> str:
        if self.comparator is None:
            return ""
        return f" {self.comparator.value} {self.version}"


class DependencyKind(Enum):
    INCOMPATIBLE = "!"
    OPTIONAL = "?"
    HIDDEN_OPTIONAL = "(?)"
    LAZY = "~"
    REQUIRED = ""


@dataclass(frozen=True)
class Dependency:
    """One entry of a mod's ``dependencies`` list, e.g. ``"? space-exploration >= 0.6.0"``."""

    name: str
    kind: DependencyKind = DependencyKind.REQUIRED
    version: DependencyVersion = DependencyVersion()

    @classmethod
    def parse(cls, text: str) -> "Dependency":
        """Parse a dependency string.

        Raises:
            ValueError: If text is not a dependency string
        """
        match = _DEPENDENCY_PATTERN.fullmatch(text.strip())
        if match is None:
            raise ValueError(f"Invalid dependency: {text!r}")

        prefix, name, comparator, version = match.groups()
        requirement = DependencyVersion()
        if comparator is not None:
            requirement = DependencyVersion(VersionComparator(comparator), Version.parse(version))

        return cls(
            name=name,
            kind=DependencyKind(prefix or ""),
            version=requirement,
        )

    def __str__(self) -> str:
        prefix = f"{self.kind.value} " if self.kind.value else ""
        return f"{prefix}{self.name}{self.version}"


RequirementPairs = Union[
    "DependencyList",
    Mapping[str, DependencyVersion],
    Iterable[Tuple[str, DependencyVersion]],
]


class DependencyList:
    """Package name to version requirement.

    The first requirement registered for a name is kept; later additions for
    the same name are ignored. Equality ignores insertion order.
    """

    def __init__(self, entries: Optional[RequirementPairs] = None):
        self._entries: Dict[str, DependencyVersion] = {}
        if entries is not None:
            self.extend(entries)

    def add(self, name: str, requirement: DependencyVersion) -> bool:
        """Register a requirement unless name already has one.

        Returns:
            True if the requirement was added
        """
        if name in self._entries:
            return False
        self._entries[name] = requirement
        return True

    def extend(self, entries: RequirementPairs) -> None:
        if isinstance(entries, DependencyList):
            pairs: Iterable[Tuple[str, DependencyVersion]] = entries.items()
        elif isinstance(entries, Mapping):
            pairs = entries.items()
        else:
            pairs = entries
        for name, requirement in pairs:
            self.add(name, requirement)

    def get(self, name: str) -> Optional[DependencyVersion]:
        return self._entries.get(name)

    def items(self) -> Iterator[Tuple[str, DependencyVersion]]:
        return iter(list(self._entries.items()))

    def names(self) -> list[str]:
        return sorted(self._entries)

    def __getitem__(self, name: str) -> DependencyVersion:
        return self._entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyList):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"DependencyList({self.to_dict()!r})"

    def to_dict(self) -> Dict[str, str]:
        """JSON-friendly view sorted by package name, e.g. ``{"Krastorio2": ">= 1.3.23"}``."""
        return {name: self._entries[name].text for name in sorted(self._entries)}
