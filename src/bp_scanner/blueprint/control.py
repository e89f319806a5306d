"""
Circuit network settings of entities (``control_behavior``).

The game writes one control behavior shape per entity type. They share a
small vocabulary of reference carrying fields: output and input signals,
circuit conditions, constant combinator sections and combinator parameters.
ControlBehavior models that vocabulary by field name and keeps every other
setting (read modes, toggles, ...) verbatim in ``extra_data``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .fields import FieldReader, put_if
from .ids import GetIDs, ReferenceCategory, UsedIDs, collect_ids
from .logistics import LogisticSections
from .parameters import QualityCondition
from .signals import NameString, SignalID, parse_signal
from .trains import CircuitCondition

SIGNAL_FIELDS = (
    "output_signal",
    "recipe_finished_signal",
    "working_signal",
    "stack_control_input_signal",
    "red_signal",
    "green_signal",
    "blue_signal",
    "rgb_signal",
    "red_output_signal",
    "orange_output_signal",
    "green_output_signal",
    "blue_output_signal",
    "temperature_signal",
    "available_logistic_output_signal",
    "total_logistic_output_signal",
    "available_construction_output_signal",
    "total_construction_output_signal",
    "roboport_count_output_signal",
    "damage_taken_signal",
    "speed_signal",
    "train_stopped_signal",
    "trains_limit_signal",
    "trains_count_signal",
    "priority_signal",
    "index_signal",
    "count_signal",
    "quality_source_signal",
    "quality_destination_signal",
)

CONDITION_FIELDS = (
    "circuit_condition",
    "logistic_condition",
    "ignore_unlisted_targets_condition",
    "input_left_condition",
    "input_right_condition",
    "output_left_condition",
    "output_right_condition",
)


# === COMBINATORS ===


@dataclass
class ArithmeticParameters(GetIDs):
    """``arithmetic_conditions``; network selections are kept verbatim."""

    operation: Optional[str] = None
    first_signal: Optional[SignalID] = None
    second_signal: Optional[SignalID] = None
    output_signal: Optional[SignalID] = None
    first_constant: Optional[int] = None
    second_constant: Optional[int] = None
    first_signal_networks: Optional[Dict[str, Any]] = None
    second_signal_networks: Optional[Dict[str, Any]] = None

    FIELDS = (
        "operation",
        "first_signal",
        "second_signal",
        "output_signal",
        "first_constant",
        "second_constant",
        "first_signal_networks",
        "second_signal_networks",
    )

    @classmethod
    def from_dict(cls, raw: Any, path: str = "arithmetic_conditions") -> "ArithmeticParameters":
        reader = FieldReader(raw, path, cls.FIELDS)
        return cls(
            operation=reader.text("operation", None),
            first_signal=reader.optional_node("first_signal", parse_signal),
            second_signal=reader.optional_node("second_signal", parse_signal),
            output_signal=reader.optional_node("output_signal", parse_signal),
            first_constant=reader.integer("first_constant", None),
            second_constant=reader.integer("second_constant", None),
            first_signal_networks=reader.raw("first_signal_networks", None),
            second_signal_networks=reader.raw("second_signal_networks", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "operation", self.operation, self.operation is not None)
        for name in ("first_signal", "second_signal", "output_signal"):
            signal = getattr(self, name)
            if signal is not None:
                data[name] = signal.to_dict()
        for name in (
            "first_constant",
            "second_constant",
            "first_signal_networks",
            "second_signal_networks",
        ):
            value = getattr(self, name)
            put_if(data, name, value, value is not None)
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.first_signal, self.second_signal, self.output_signal)


@dataclass
class DeciderCondition(GetIDs):
    first_signal: Optional[SignalID] = None
    second_signal: Optional[SignalID] = None
    constant: Optional[int] = None
    comparator: Optional[str] = None
    compare_type: Optional[str] = None
    first_signal_networks: Optional[Dict[str, Any]] = None
    second_signal_networks: Optional[Dict[str, Any]] = None

    FIELDS = (
        "first_signal",
        "second_signal",
        "constant",
        "comparator",
        "compare_type",
        "first_signal_networks",
        "second_signal_networks",
    )

    @classmethod
    def from_dict(cls, raw: Any, path: str = "condition") -> "DeciderCondition":
        reader = FieldReader(raw, path, cls.FIELDS)
        return cls(
            first_signal=reader.optional_node("first_signal", parse_signal),
            second_signal=reader.optional_node("second_signal", parse_signal),
            constant=reader.integer("constant", None),
            comparator=reader.text("comparator", None),
            compare_type=reader.text("compare_type", None),
            first_signal_networks=reader.raw("first_signal_networks", None),
            second_signal_networks=reader.raw("second_signal_networks", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.first_signal is not None:
            data["first_signal"] = self.first_signal.to_dict()
        if self.second_signal is not None:
            data["second_signal"] = self.second_signal.to_dict()
        for name in (
            "constant",
            "comparator",
            "compare_type",
            "first_signal_networks",
            "second_signal_networks",
        ):
            value = getattr(self, name)
            put_if(data, name, value, value is not None)
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.first_signal, self.second_signal)


@dataclass
class DeciderOutput(GetIDs):
    signal: Optional[SignalID] = None
    copy_count_from_input: Optional[bool] = None
    constant: Optional[int] = None
    networks: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "output") -> "DeciderOutput":
        reader = FieldReader(
            raw, path, ("signal", "copy_count_from_input", "constant", "networks")
        )
        return cls(
            signal=reader.optional_node("signal", parse_signal),
            copy_count_from_input=reader.boolean("copy_count_from_input", None),
            constant=reader.integer("constant", None),
            networks=reader.raw("networks", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.signal is not None:
            data["signal"] = self.signal.to_dict()
        for name in ("copy_count_from_input", "constant", "networks"):
            value = getattr(self, name)
            put_if(data, name, value, value is not None)
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.signal)


@dataclass
class DeciderParameters(GetIDs):
    """``decider_conditions`` of a decider combinator."""

    conditions: List[DeciderCondition] = field(default_factory=lambda: [])
    outputs: List[DeciderOutput] = field(default_factory=lambda: [])

    @classmethod
    def from_dict(cls, raw: Any, path: str = "decider_conditions") -> "DeciderParameters":
        reader = FieldReader(raw, path, ("conditions", "outputs"))
        return cls(
            conditions=reader.array("conditions", DeciderCondition.from_dict),
            outputs=reader.array("outputs", DeciderOutput.from_dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conditions": [condition.to_dict() for condition in self.conditions],
            "outputs": [output.to_dict() for output in self.outputs],
        }

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.conditions, self.outputs)


# === DISPLAY PANELS ===


@dataclass
class PanelMessage(GetIDs):
    """One message of a display panel; shown while its condition holds."""

    text: Optional[str] = None
    icon: Optional[SignalID] = None
    condition: Optional[CircuitCondition] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "message") -> "PanelMessage":
        reader = FieldReader(raw, path, ("text", "icon", "condition"))
        return cls(
            text=reader.text("text", None),
            icon=reader.optional_node("icon", parse_signal),
            condition=reader.optional_node("condition", CircuitCondition.from_dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "text", self.text, self.text is not None)
        if self.icon is not None:
            data["icon"] = self.icon.to_dict()
        if self.condition is not None:
            data["condition"] = self.condition.to_dict()
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.icon, self.condition)


# === CONTROL BEHAVIOR ===


@dataclass
class ControlBehavior(GetIDs):
    """Circuit and logistic network settings of one entity.

    Attributes:
        signals: Signal fields by wire name (``output_signal``, ...)
        conditions: Circuit conditions by wire name (``circuit_condition``, ...)
        sections: Constant combinator output sections
        decider_conditions: Decider combinator parameters
        arithmetic_conditions: Arithmetic combinator parameters
        quality_filter: Selector combinator quality filter
        quality_source_static: Selector combinator fixed source quality
        parameters: Display panel messages
        extra_data: Remaining settings, verbatim
    """

    signals: Dict[str, SignalID] = field(default_factory=lambda: {})
    conditions: Dict[str, CircuitCondition] = field(default_factory=lambda: {})
    sections: Optional[LogisticSections] = None
    decider_conditions: Optional[DeciderParameters] = None
    arithmetic_conditions: Optional[ArithmeticParameters] = None
    quality_filter: Optional[QualityCondition] = None
    quality_source_static: Optional[NameString] = None
    parameters: List[PanelMessage] = field(default_factory=lambda: [])
    extra_data: Dict[str, Any] = field(default_factory=lambda: {})

    NODE_FIELDS = (
        "sections",
        "decider_conditions",
        "arithmetic_conditions",
        "quality_filter",
        "quality_source_static",
        "parameters",
    )

    @classmethod
    def from_dict(cls, raw: Any, path: str = "control_behavior") -> "ControlBehavior":
        reader = FieldReader(raw, path, None)
        signals = {}
        for name in SIGNAL_FIELDS:
            signal = reader.optional_node(name, parse_signal)
            if signal is not None:
                signals[name] = signal
        conditions = {}
        for name in CONDITION_FIELDS:
            condition = reader.optional_node(name, CircuitCondition.from_dict)
            if condition is not None:
                conditions[name] = condition

        return cls(
            signals=signals,
            conditions=conditions,
            sections=reader.optional_node("sections", LogisticSections.from_dict),
            decider_conditions=reader.optional_node(
                "decider_conditions", DeciderParameters.from_dict
            ),
            arithmetic_conditions=reader.optional_node(
                "arithmetic_conditions", ArithmeticParameters.from_dict
            ),
            quality_filter=reader.optional_node("quality_filter", QualityCondition.from_dict),
            quality_source_static=reader.optional_node(
                "quality_source_static", NameString.from_dict
            ),
            parameters=reader.array("parameters", PanelMessage.from_dict),
            extra_data=reader.extras(SIGNAL_FIELDS + CONDITION_FIELDS + cls.NODE_FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name, signal in self.signals.items():
            data[name] = signal.to_dict()
        for name, condition in self.conditions.items():
            data[name] = condition.to_dict()
        for name in ("sections", "decider_conditions", "arithmetic_conditions", "quality_filter"):
            node = getattr(self, name)
            if node is not None:
                data[name] = node.to_dict()
        if self.quality_source_static is not None:
            data["quality_source_static"] = self.quality_source_static.to_dict()
        put_if(
            data,
            "parameters",
            [message.to_dict() for message in self.parameters],
            bool(self.parameters),
        )
        data.update(self.extra_data)
        return data

    def get_ids(self) -> UsedIDs:
        ids = collect_ids(
            self.signals.values(),
            self.conditions.values(),
            self.sections,
            self.decider_conditions,
            self.arithmetic_conditions,
            self.quality_filter,
            self.parameters,
        )
        if self.quality_source_static is not None:
            ids.add(ReferenceCategory.QUALITY, self.quality_source_static.name)
        return ids
