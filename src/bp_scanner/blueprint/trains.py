"""
Train and space platform schedules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..errors import ShapeMismatchError
from .fields import FieldReader, put_if
from .ids import GetIDs, ReferenceCategory, UsedIDs, collect_ids
from .signals import SignalID, parse_signal


class CompareType(Enum):
    """How a wait condition combines with the one before it."""

    AND = "and"
    OR = "or"


class WaitConditionType(Enum):
    FULL = "full"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"
    FUEL_FULL = "fuel_full"
    AT_STATION = "at_station"
    NOT_AT_STATION = "not_at_station"
    ROBOTS_INACTIVE = "robots_inactive"
    PASSENGER_PRESENT = "passenger_present"
    PASSENGER_NOT_PRESENT = "passenger_not_present"
    ALL_REQUESTS_SATISFIED = "all_requests_satisfied"
    ANY_REQUEST_ZERO = "any_request_zero"
    ANY_REQUEST_NOT_SATISFIED = "any_request_not_satisfied"
    ANY_PLANET_IMPORT_ZERO = "any_planet_import_zero"
    DESTINATION_FULL_OR_NO_PATH = "destination_full_or_no_path"
    TIME = "time"
    INACTIVITY = "inactivity"
    DAMAGE_TAKEN = "damage_taken"
    CIRCUIT = "circuit"
    ITEM_COUNT = "item_count"
    FLUID_COUNT = "fluid_count"
    FUEL_ITEM_COUNT_ALL = "fuel_item_count_all"
    FUEL_ITEM_COUNT_ANY = "fuel_item_count_any"
    REQUEST_SATISFIED = "request_satisfied"
    REQUEST_NOT_SATISFIED = "request_not_satisfied"
    SPECIFIC_DESTINATION_FULL = "specific_destination_full"
    SPECIFIC_DESTINATION_NOT_FULL = "specific_destination_not_full"


# Older exports spell this one with a dash.
_WAIT_TYPE_ALIASES = {"not-empty": WaitConditionType.NOT_EMPTY}

REQUEST_CONDITION_TYPES = frozenset(
    {WaitConditionType.REQUEST_SATISFIED, WaitConditionType.REQUEST_NOT_SATISFIED}
)

DEFAULT_COMPARATOR = "<"


@dataclass
class CircuitCondition(GetIDs):
    """Compare a signal against another signal or a constant."""

    comparator: str = DEFAULT_COMPARATOR
    first_signal: Optional[SignalID] = None
    second_signal: Optional[SignalID] = None
    constant: Optional[int] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "condition") -> "CircuitCondition":
        reader = FieldReader(
            raw, path, ("comparator", "first_signal", "second_signal", "constant")
        )
        return cls(
            comparator=reader.text("comparator", DEFAULT_COMPARATOR),
            first_signal=reader.optional_node("first_signal", parse_signal),
            second_signal=reader.optional_node("second_signal", parse_signal),
            constant=reader.integer("constant", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "comparator", self.comparator, self.comparator != DEFAULT_COMPARATOR)
        if self.first_signal is not None:
            data["first_signal"] = self.first_signal.to_dict()
        if self.second_signal is not None:
            data["second_signal"] = self.second_signal.to_dict()
        put_if(data, "constant", self.constant, self.constant is not None)
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.first_signal, self.second_signal)


@dataclass
class RequestCondition(GetIDs):
    """Item request used by the request (not) satisfied wait conditions."""

    name: str
    quality: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "condition") -> "RequestCondition":
        reader = FieldReader(raw, path, ("name", "quality"))
        return cls(name=reader.text("name"), quality=reader.text("quality", None))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        put_if(data, "quality", self.quality, self.quality is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        ids.add(ReferenceCategory.ITEM, self.name)
        if self.quality is not None:
            ids.add(ReferenceCategory.QUALITY, self.quality)
        return ids


@dataclass
class WaitCondition(GetIDs):
    """One condition of a schedule record or interrupt.

    Which of the optional fields are meaningful depends on ``type``. The
    ``condition`` field holds a RequestCondition for the request types and a
    CircuitCondition otherwise.
    """

    type: WaitConditionType
    compare_type: CompareType = CompareType.OR
    condition: Union[CircuitCondition, RequestCondition, None] = None
    station: Optional[str] = None
    ticks: Optional[int] = None
    damage: Optional[int] = None
    planet: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "wait_condition") -> "WaitCondition":
        reader = FieldReader(
            raw,
            path,
            ("type", "compare_type", "condition", "station", "ticks", "damage", "planet"),
        )
        kind = _parse_enum(WaitConditionType, reader, "type", _WAIT_TYPE_ALIASES)
        compare_type = _parse_enum(CompareType, reader, "compare_type", {}, CompareType.OR)

        if kind in REQUEST_CONDITION_TYPES:
            condition = reader.optional_node("condition", RequestCondition.from_dict)
        else:
            condition = reader.optional_node("condition", CircuitCondition.from_dict)

        planet = None
        if reader.has("planet"):
            planet_reader = FieldReader(reader.raw("planet"), reader.child_path("planet"), ("name",))
            planet = planet_reader.text("name")

        return cls(
            type=kind,
            compare_type=compare_type,
            condition=condition,
            station=reader.text("station", None),
            ticks=reader.integer("ticks", None),
            damage=reader.integer("damage", None),
            planet=planet,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type.value,
            "compare_type": self.compare_type.value,
        }
        if self.condition is not None:
            data["condition"] = self.condition.to_dict()
        put_if(data, "station", self.station, self.station is not None)
        put_if(data, "ticks", self.ticks, self.ticks is not None)
        put_if(data, "damage", self.damage, self.damage is not None)
        put_if(data, "planet", {"name": self.planet}, self.planet is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = collect_ids(self.condition)
        if self.planet is not None:
            ids.add(ReferenceCategory.SPACE_LOCATION, self.planet)
        return ids


@dataclass
class ScheduleRecord(GetIDs):
    station: str
    wait_conditions: List[WaitCondition] = field(default_factory=lambda: [])
    temporary: bool = False
    allows_unloading: bool = True

    @classmethod
    def from_dict(cls, raw: Any, path: str = "record") -> "ScheduleRecord":
        reader = FieldReader(
            raw, path, ("station", "wait_conditions", "temporary", "allows_unloading")
        )
        return cls(
            station=reader.text("station"),
            wait_conditions=reader.array("wait_conditions", WaitCondition.from_dict),
            temporary=reader.boolean("temporary", False),
            allows_unloading=reader.boolean("allows_unloading", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"station": self.station}
        put_if(
            data,
            "wait_conditions",
            [c.to_dict() for c in self.wait_conditions],
            bool(self.wait_conditions),
        )
        put_if(data, "temporary", True, self.temporary)
        put_if(data, "allows_unloading", False, not self.allows_unloading)
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.wait_conditions)


@dataclass
class ScheduleInterrupt(GetIDs):
    name: str
    conditions: List[WaitCondition] = field(default_factory=lambda: [])
    targets: List[ScheduleRecord] = field(default_factory=lambda: [])
    inside_interrupt: bool = False

    @classmethod
    def from_dict(cls, raw: Any, path: str = "interrupt") -> "ScheduleInterrupt":
        reader = FieldReader(raw, path, ("name", "conditions", "targets", "inside_interrupt"))
        return cls(
            name=reader.text("name"),
            conditions=reader.array("conditions", WaitCondition.from_dict),
            targets=reader.array("targets", ScheduleRecord.from_dict),
            inside_interrupt=reader.boolean("inside_interrupt", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        put_if(data, "conditions", [c.to_dict() for c in self.conditions], bool(self.conditions))
        put_if(data, "targets", [t.to_dict() for t in self.targets], bool(self.targets))
        put_if(data, "inside_interrupt", True, self.inside_interrupt)
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.conditions, self.targets)


@dataclass
class ScheduleData(GetIDs):
    records: List[ScheduleRecord] = field(default_factory=lambda: [])
    interrupts: List[ScheduleInterrupt] = field(default_factory=lambda: [])
    group: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "schedule") -> "ScheduleData":
        reader = FieldReader(raw, path, ("records", "interrupts", "group"))
        return cls(
            records=reader.array("records", ScheduleRecord.from_dict),
            interrupts=reader.array("interrupts", ScheduleInterrupt.from_dict),
            group=reader.text("group", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "records", [r.to_dict() for r in self.records], bool(self.records))
        put_if(data, "group", self.group, self.group is not None)
        put_if(data, "interrupts", [i.to_dict() for i in self.interrupts], bool(self.interrupts))
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.records, self.interrupts)


@dataclass
class Schedule(GetIDs):
    """Schedule shared by a set of locomotives (entity numbers)."""

    schedule: ScheduleData
    locomotives: List[int] = field(default_factory=lambda: [])

    @classmethod
    def from_dict(cls, raw: Any, path: str = "schedules") -> "Schedule":
        reader = FieldReader(raw, path, ("locomotives", "schedule"))
        locomotives = reader.raw("locomotives", [])
        if not isinstance(locomotives, list) or not all(
            isinstance(n, int) and not isinstance(n, bool) for n in locomotives
        ):
            raise ShapeMismatchError(
                "expected array of entity numbers", reader.child_path("locomotives")
            )
        return cls(
            schedule=reader.node("schedule", ScheduleData.from_dict),
            locomotives=list(locomotives),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"locomotives": list(self.locomotives), "schedule": self.schedule.to_dict()}

    def get_ids(self) -> UsedIDs:
        return self.schedule.get_ids()


def _parse_enum(enum_cls, reader: FieldReader, name: str, aliases: Dict[str, Any], default=None):
    """Read a text field as an Enum member, raising ShapeMismatchError on unknown values."""
    if default is None:
        text = reader.text(name)
    else:
        text = reader.text(name, None)
        if text is None:
            return default
    if text in aliases:
        return aliases[text]
    try:
        return enum_cls(text)
    except ValueError:
        raise ShapeMismatchError(
            f"unknown {name} '{text}'", reader.child_path(name)
        ) from None
