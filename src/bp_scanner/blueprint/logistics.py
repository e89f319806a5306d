"""
Logistic request sections (requester chests, vehicles, cargo pads, ...).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import ShapeMismatchError
from .fields import FieldReader, dump_indexed, dump_number, put_if
from .ids import GetIDs, ReferenceCategory, UsedIDs
from .indexed import IndexedVec
from .signals import SIGNAL_TYPE_TO_CATEGORY, SignalIDType


@dataclass
class LogisticFilter(GetIDs):
    """One requested signal inside a logistic section.

    ``import_from`` names the space location the request is fulfilled from.
    """

    count: int
    type: Optional[str] = None
    name: Optional[str] = None
    quality: Optional[str] = None
    comparator: Optional[str] = None
    max_count: Optional[int] = None
    minimum_delivery_count: Optional[int] = None
    import_from: Optional[str] = None

    FIELDS = (
        "count",
        "type",
        "name",
        "quality",
        "comparator",
        "max_count",
        "minimum_delivery_count",
        "import_from",
    )

    @classmethod
    def from_dict(cls, raw: Any, path: str = "filter") -> "LogisticFilter":
        reader = FieldReader(raw, path, cls.FIELDS)
        kind = reader.text("type", None)
        if kind is not None and kind not in {t.value for t in SignalIDType}:
            raise ShapeMismatchError(f"unknown signal type '{kind}'", reader.child_path("type"))
        return cls(
            count=reader.integer("count"),
            type=kind,
            name=reader.text("name", None),
            quality=reader.text("quality", None),
            comparator=reader.text("comparator", None),
            max_count=reader.integer("max_count", None),
            minimum_delivery_count=reader.integer("minimum_delivery_count", None),
            import_from=reader.text("import_from", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in self.FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        if self.name is not None:
            kind = SignalIDType(self.type) if self.type else SignalIDType.ITEM
            ids.add(SIGNAL_TYPE_TO_CATEGORY[kind], self.name)
        if self.quality is not None:
            ids.add(ReferenceCategory.QUALITY, self.quality)
        if self.import_from is not None:
            ids.add(ReferenceCategory.SPACE_LOCATION, self.import_from)
        return ids


def parse_logistic_filter(raw: Any, path: str) -> LogisticFilter:
    return LogisticFilter.from_dict(raw, path)


@dataclass
class LogisticSection(GetIDs):
    filters: IndexedVec[LogisticFilter] = field(default_factory=lambda: IndexedVec())
    group: Optional[str] = None
    active: bool = True
    multiplier: float = 1.0

    @classmethod
    def from_dict(cls, raw: Any, path: str = "section") -> "LogisticSection":
        reader = FieldReader(raw, path, ("filters", "group", "active", "multiplier"))
        return cls(
            filters=reader.indexed("filters", parse_logistic_filter),
            group=reader.text("group", None),
            active=reader.boolean("active", True),
            multiplier=reader.number("multiplier", 1.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "active", self.active, not self.active)
        dump_indexed(data, "filters", self.filters, LogisticFilter.to_dict)
        put_if(data, "group", self.group, self.group is not None)
        put_if(data, "multiplier", dump_number(self.multiplier), self.multiplier != 1.0)
        return data

    def get_ids(self) -> UsedIDs:
        return self.filters.get_ids()


def parse_logistic_section(raw: Any, path: str) -> LogisticSection:
    return LogisticSection.from_dict(raw, path)


@dataclass
class LogisticSections(GetIDs):
    """Request filter block of an entity (``request_filters``)."""

    sections: IndexedVec[LogisticSection] = field(default_factory=lambda: IndexedVec())
    trash_not_requested: bool = False
    request_from_buffers: bool = False

    @classmethod
    def from_dict(cls, raw: Any, path: str = "request_filters") -> "LogisticSections":
        reader = FieldReader(
            raw, path, ("sections", "trash_not_requested", "request_from_buffers")
        )
        return cls(
            sections=reader.indexed("sections", parse_logistic_section),
            trash_not_requested=reader.boolean("trash_not_requested", False),
            request_from_buffers=reader.boolean("request_from_buffers", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "sections": self.sections.to_dict(LogisticSection.to_dict),
        }
        put_if(data, "trash_not_requested", True, self.trash_not_requested)
        put_if(data, "request_from_buffers", True, self.request_from_buffers)
        return data

    def get_ids(self) -> UsedIDs:
        return self.sections.get_ids()
