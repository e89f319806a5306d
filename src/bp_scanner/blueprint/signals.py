"""
Small value nodes shared across the document tree: positions, colors,
signals and icons.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import ShapeMismatchError
from .fields import FieldReader, dump_number
from .ids import GetIDs, ReferenceCategory, UsedIDs


@dataclass
class Position:
    """Map position in tiles."""

    x: float
    y: float

    @classmethod
    def from_dict(cls, raw: Any, path: str = "position") -> "Position":
        reader = FieldReader(raw, path, ("x", "y"))
        return cls(x=reader.number("x"), y=reader.number("y"))

    def to_dict(self) -> Dict[str, Any]:
        return {"x": dump_number(self.x), "y": dump_number(self.y)}


@dataclass
class Color:
    r: float
    g: float
    b: float
    a: float

    @classmethod
    def from_dict(cls, raw: Any, path: str = "color") -> "Color":
        reader = FieldReader(raw, path, ("r", "g", "b", "a"))
        return cls(
            r=reader.number("r"),
            g=reader.number("g"),
            b=reader.number("b"),
            a=reader.number("a"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}


class SignalIDType(Enum):
    """Kinds of signal; the value is the wire ``type`` string."""

    ITEM = "item"
    FLUID = "fluid"
    VIRTUAL = "virtual"
    ENTITY = "entity"
    RECIPE = "recipe"
    SPACE_LOCATION = "space-location"
    ASTEROID_CHUNK = "asteroid-chunk"
    QUALITY = "quality"


SIGNAL_TYPE_TO_CATEGORY: dict[SignalIDType, ReferenceCategory] = {
    SignalIDType.ITEM: ReferenceCategory.ITEM,
    SignalIDType.FLUID: ReferenceCategory.FLUID,
    SignalIDType.VIRTUAL: ReferenceCategory.VIRTUAL_SIGNAL,
    SignalIDType.ENTITY: ReferenceCategory.ENTITY,
    SignalIDType.RECIPE: ReferenceCategory.RECIPE,
    SignalIDType.SPACE_LOCATION: ReferenceCategory.SPACE_LOCATION,
    SignalIDType.ASTEROID_CHUNK: ReferenceCategory.ASTEROID_CHUNK,
    SignalIDType.QUALITY: ReferenceCategory.QUALITY,
}


@dataclass
class SignalID(GetIDs):
    """Reference to a circuit signal.

    A missing ``type`` means item, as in the game's own export format.
    Quality signals never carry a quality of their own.
    """

    type: SignalIDType = SignalIDType.ITEM
    name: Optional[str] = None
    quality: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "signal") -> "SignalID":
        reader = FieldReader(raw, path, ("type", "name", "quality"))
        type_text = reader.text("type", SignalIDType.ITEM.value)
        try:
            kind = SignalIDType(type_text)
        except ValueError:
            raise ShapeMismatchError(
                f"unknown signal type '{type_text}'", reader.child_path("type")
            ) from None

        quality = reader.text("quality", None)
        if kind is SignalIDType.QUALITY and quality is not None:
            raise ShapeMismatchError(
                "quality signals cannot carry a quality", reader.child_path("quality")
            )
        return cls(type=kind, name=reader.text("name", None), quality=quality)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.type is not SignalIDType.ITEM:
            data["type"] = self.type.value
        if self.name is not None:
            data["name"] = self.name
        if self.quality is not None:
            data["quality"] = self.quality
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        if self.name is not None:
            ids.add(SIGNAL_TYPE_TO_CATEGORY[self.type], self.name)
        if self.quality is not None:
            ids.add(ReferenceCategory.QUALITY, self.quality)
        return ids


def parse_signal(raw: Any, path: str) -> SignalID:
    return SignalID.from_dict(raw, path)


@dataclass
class Icon(GetIDs):
    """Document icon; the slot number is the IndexedVec key."""

    signal: SignalID

    @classmethod
    def from_dict(cls, raw: Any, path: str = "icon") -> "Icon":
        reader = FieldReader(raw, path, ("signal",))
        return cls(signal=reader.node("signal", parse_signal))

    def to_dict(self) -> Dict[str, Any]:
        return {"signal": self.signal.to_dict()}

    def get_ids(self) -> UsedIDs:
        return self.signal.get_ids()


@dataclass
class NameString:
    """Bare ``{"name": ...}`` wrapper; the category depends on the owner."""

    name: str

    @classmethod
    def from_dict(cls, raw: Any, path: str = "") -> "NameString":
        reader = FieldReader(raw, path, ("name",))
        return cls(name=reader.text("name"))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}

    def __str__(self) -> str:
        return self.name


def parse_name_string(raw: Any, path: str) -> NameString:
    return NameString.from_dict(raw, path)
