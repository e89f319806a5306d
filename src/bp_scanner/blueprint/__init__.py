"""
Blueprint document model.

Every node parses from decoded JSON with ``from_dict``, serializes back with
``to_dict`` and reports the game objects it references with ``get_ids``.
"""

from .control import (
    ArithmeticParameters,
    ControlBehavior,
    DeciderCondition,
    DeciderOutput,
    DeciderParameters,
    PanelMessage,
)
from .document import (
    Blueprint,
    Book,
    DeconPlanner,
    Document,
    DocumentKind,
    UpgradePlanner,
    document_to_dict,
    parse_document,
)
from .entity import (
    BlueprintEquipment,
    Entity,
    InfinityInventoryFilter,
    InfinityInventorySettings,
    InfinityPipeFilter,
    InsertPlan,
    InventoryWithFilters,
    ItemFilter,
    MiningDrillFilter,
    SpeakerAlertParameters,
    SpeakerParameters,
    Tile,
)
from .ids import GetIDs, ReferenceCategory, UsedIDs, collect_ids
from .indexed import IndexedVec
from .logistics import LogisticFilter, LogisticSection, LogisticSections
from .parameters import ParameterData, ParameterKind, QualityCondition
from .planners import (
    DeconSettings,
    FilterMode,
    MappedKind,
    MappedValue,
    MappingEntry,
    TileSelectionMode,
    UpgradeSettings,
)
from .signals import Color, Icon, NameString, Position, SignalID, SignalIDType
from .trains import (
    CircuitCondition,
    CompareType,
    RequestCondition,
    Schedule,
    ScheduleData,
    ScheduleInterrupt,
    ScheduleRecord,
    WaitCondition,
    WaitConditionType,
)

__all__ = [
    "ArithmeticParameters",
    "Blueprint",
    "BlueprintEquipment",
    "Book",
    "CircuitCondition",
    "Color",
    "CompareType",
    "ControlBehavior",
    "DeciderCondition",
    "DeciderOutput",
    "DeciderParameters",
    "DeconPlanner",
    "DeconSettings",
    "Document",
    "DocumentKind",
    "Entity",
    "FilterMode",
    "GetIDs",
    "Icon",
    "IndexedVec",
    "InfinityInventoryFilter",
    "InfinityInventorySettings",
    "InfinityPipeFilter",
    "InsertPlan",
    "InventoryWithFilters",
    "ItemFilter",
    "LogisticFilter",
    "LogisticSection",
    "LogisticSections",
    "MappedKind",
    "MappedValue",
    "MappingEntry",
    "MiningDrillFilter",
    "NameString",
    "PanelMessage",
    "ParameterData",
    "ParameterKind",
    "Position",
    "QualityCondition",
    "ReferenceCategory",
    "RequestCondition",
    "Schedule",
    "ScheduleData",
    "ScheduleInterrupt",
    "ScheduleRecord",
    "SignalID",
    "SignalIDType",
    "SpeakerAlertParameters",
    "SpeakerParameters",
    "Tile",
    "TileSelectionMode",
    "UpgradePlanner",
    "UpgradeSettings",
    "UsedIDs",
    "WaitCondition",
    "WaitConditionType",
    "collect_ids",
    "document_to_dict",
    "parse_document",
]
