"""
Top-level documents: blueprints, blueprint books and planners.

A document's external form is a single-key object naming its kind::

    {"blueprint": {...}}
    {"blueprint_book": {"blueprints": {"1": {"blueprint": {...}}}, ...}}

Books own an IndexedVec of documents, which may themselves be books.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Set, Tuple

from ..errors import ShapeMismatchError, UnknownFieldError
from ..mods.versions import Version
from .entity import Entity, Tile
from .fields import FieldReader, dump_indexed, expect_object, join_path, put_if
from .ids import GetIDs, UsedIDs, collect_ids
from .indexed import IndexedVec
from .parameters import ParameterData
from .planners import DeconSettings, UpgradeSettings
from .signals import Color, Icon, Position
from .trains import Schedule

logger = logging.getLogger(__name__)


class DocumentKind(Enum):
    """Document kinds; the value is the wrapper key of the external form."""

    BLUEPRINT = "blueprint"
    BOOK = "blueprint_book"
    UPGRADE_PLANNER = "upgrade_planner"
    DECON_PLANNER = "deconstruction_planner"


COMMON_FIELDS = ("item", "version", "label", "label_color", "description", "icons")


def parse_icon(raw: Any, path: str) -> Icon:
    return Icon.from_dict(raw, path)


@dataclass
class Document(GetIDs):
    """Fields shared by every document kind.

    ``version`` is the packed 64-bit game version the document was exported
    with; see version_string().
    """

    item: str
    version: int
    label: str = ""
    label_color: Optional[Color] = None
    description: str = ""
    icons: IndexedVec[Icon] = field(default_factory=lambda: IndexedVec())

    KIND: ClassVar[DocumentKind]
    FIELDS: ClassVar[Tuple[str, ...]] = ()

    # === PARSING ===

    @classmethod
    def from_dict(cls, raw: Any, path: str = "") -> "Document":
        reader = FieldReader(raw, path, COMMON_FIELDS + cls.FIELDS)
        return cls(**cls._read_common(reader), **cls._read_fields(reader))

    @staticmethod
    def _read_common(reader: FieldReader) -> Dict[str, Any]:
        return {
            "item": reader.text("item"),
            "version": reader.integer("version"),
            "label": reader.text("label", ""),
            "label_color": reader.optional_node("label_color", Color.from_dict),
            "description": reader.text("description", ""),
            "icons": reader.indexed("icons", parse_icon),
        }

    @classmethod
    def _read_fields(cls, reader: FieldReader) -> Dict[str, Any]:
        """Kind-specific constructor arguments."""
        return {}

    # === SERIALIZATION ===

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the document body (without the kind wrapper)."""
        data: Dict[str, Any] = {"item": self.item}
        put_if(data, "label", self.label, bool(self.label))
        if self.label_color is not None:
            data["label_color"] = self.label_color.to_dict()
        put_if(data, "description", self.description, bool(self.description))
        dump_indexed(data, "icons", self.icons, Icon.to_dict)
        self._dump_fields(data)
        data["version"] = self.version
        return data

    def _dump_fields(self, data: Dict[str, Any]) -> None:
        pass

    # === QUERIES ===

    @property
    def kind(self) -> DocumentKind:
        return self.KIND

    def version_string(self) -> str:
        """Game version as ``major.minor.patch``."""
        return str(Version.from_packed(self.version))

    # === REFERENCES ===

    def get_ids(self) -> UsedIDs:
        return self.walk_ids(set())

    def walk_ids(self, ancestors: Set[int]) -> UsedIDs:
        """Collect references, skipping documents already on the current path.

        Args:
            ancestors: ids of the documents between the traversal root and self
        """
        marker = id(self)
        if marker in ancestors:
            logger.warning(
                f"Document '{self.label or self.item}' contains itself, skipping"
            )
            return UsedIDs()

        ancestors.add(marker)
        try:
            ids = self.icons.get_ids()
            ids.merge(self._content_ids(ancestors))
        finally:
            ancestors.remove(marker)
        return ids

    def _content_ids(self, ancestors: Set[int]) -> UsedIDs:
        return UsedIDs()


@dataclass
class Blueprint(Document):
    entities: List[Entity] = field(default_factory=lambda: [])
    tiles: List[Tile] = field(default_factory=lambda: [])
    schedules: List[Schedule] = field(default_factory=lambda: [])
    parameters: List[ParameterData] = field(default_factory=lambda: [])
    wires: List[List[int]] = field(default_factory=lambda: [])
    stock_connections: List[Dict[str, Any]] = field(default_factory=lambda: [])
    snap_to_grid: Optional[Position] = None
    absolute_snapping: bool = False
    position_relative_to_grid: Optional[Position] = None

    KIND = DocumentKind.BLUEPRINT
    FIELDS = (
        "entities",
        "tiles",
        "schedules",
        "parameters",
        "wires",
        "stock_connections",
        "snap-to-grid",
        "absolute-snapping",
        "position-relative-to-grid",
    )

    @classmethod
    def _read_fields(cls, reader: FieldReader) -> Dict[str, Any]:
        return {
            "entities": reader.array("entities", Entity.from_dict),
            "tiles": reader.array("tiles", Tile.from_dict),
            "schedules": reader.array("schedules", Schedule.from_dict),
            "parameters": reader.array("parameters", ParameterData.from_dict),
            "wires": reader.array("wires", _parse_wire),
            "stock_connections": reader.array("stock_connections", expect_object),
            "snap_to_grid": reader.optional_node("snap-to-grid", Position.from_dict),
            "absolute_snapping": reader.boolean("absolute-snapping", False),
            "position_relative_to_grid": reader.optional_node(
                "position-relative-to-grid", Position.from_dict
            ),
        }

    def _dump_fields(self, data: Dict[str, Any]) -> None:
        if self.snap_to_grid is not None:
            data["snap-to-grid"] = self.snap_to_grid.to_dict()
        put_if(data, "absolute-snapping", True, self.absolute_snapping)
        if self.position_relative_to_grid is not None:
            data["position-relative-to-grid"] = self.position_relative_to_grid.to_dict()
        put_if(data, "entities", [e.to_dict() for e in self.entities], bool(self.entities))
        put_if(data, "tiles", [t.to_dict() for t in self.tiles], bool(self.tiles))
        put_if(data, "schedules", [s.to_dict() for s in self.schedules], bool(self.schedules))
        put_if(
            data,
            "stock_connections",
            [dict(c) for c in self.stock_connections],
            bool(self.stock_connections),
        )
        put_if(data, "wires", [list(w) for w in self.wires], bool(self.wires))
        put_if(
            data,
            "parameters",
            [p.to_dict() for p in self.parameters],
            bool(self.parameters),
        )

    def _content_ids(self, ancestors: Set[int]) -> UsedIDs:
        return collect_ids(self.entities, self.tiles, self.schedules, self.parameters)


@dataclass
class Book(Document):
    """A blueprint book.

    ``active_index`` is the key of the selected document in ``documents``.
    """

    documents: IndexedVec[Document] = field(default_factory=lambda: IndexedVec())
    active_index: int = 0

    KIND = DocumentKind.BOOK
    FIELDS = ("blueprints", "active_index")

    @classmethod
    def _read_fields(cls, reader: FieldReader) -> Dict[str, Any]:
        return {
            "documents": reader.indexed("blueprints", parse_document),
            "active_index": reader.integer("active_index"),
        }

    def _dump_fields(self, data: Dict[str, Any]) -> None:
        dump_indexed(data, "blueprints", self.documents, document_to_dict)
        data["active_index"] = self.active_index

    def add_document(self, document: Document) -> int:
        """Append a document after the highest used slot.

        Returns:
            The slot key the document was stored under
        """
        return self.documents.append(document)

    def active_blueprint(self) -> Optional[Blueprint]:
        """The blueprint selected by active_index, descending into nested books.

        Returns:
            The selected Blueprint, or None if the selection is empty, a
            planner, or leads back into a book already visited
        """
        visited: Set[int] = set()
        current: Optional[Document] = self
        while isinstance(current, Book):
            if id(current) in visited:
                logger.warning(f"Book '{current.label}' selects itself, no active blueprint")
                return None
            visited.add(id(current))
            current = current.documents.get(current.active_index)
        return current if isinstance(current, Blueprint) else None

    def _content_ids(self, ancestors: Set[int]) -> UsedIDs:
        ids = UsedIDs()
        for document in self.documents:
            ids.merge(document.walk_ids(ancestors))
        return ids


@dataclass
class UpgradePlanner(Document):
    settings: UpgradeSettings = field(default_factory=UpgradeSettings)

    KIND = DocumentKind.UPGRADE_PLANNER
    FIELDS = UpgradeSettings.FIELDS

    @classmethod
    def _read_fields(cls, reader: FieldReader) -> Dict[str, Any]:
        return {"settings": UpgradeSettings.read(reader)}

    def _dump_fields(self, data: Dict[str, Any]) -> None:
        self.settings.dump(data)

    def _content_ids(self, ancestors: Set[int]) -> UsedIDs:
        return self.settings.get_ids()


@dataclass
class DeconPlanner(Document):
    settings: DeconSettings = field(default_factory=DeconSettings)

    KIND = DocumentKind.DECON_PLANNER
    FIELDS = DeconSettings.FIELDS

    @classmethod
    def _read_fields(cls, reader: FieldReader) -> Dict[str, Any]:
        return {"settings": DeconSettings.read(reader)}

    def _dump_fields(self, data: Dict[str, Any]) -> None:
        self.settings.dump(data)

    def _content_ids(self, ancestors: Set[int]) -> UsedIDs:
        return self.settings.get_ids()


DOCUMENT_TYPES: Dict[DocumentKind, type] = {
    DocumentKind.BLUEPRINT: Blueprint,
    DocumentKind.BOOK: Book,
    DocumentKind.UPGRADE_PLANNER: UpgradePlanner,
    DocumentKind.DECON_PLANNER: DeconPlanner,
}


def _parse_wire(raw: Any, path: str) -> List[int]:
    """Wire connections are ``[source_entity, source_connector, target_entity, target_connector]``."""
    if (
        not isinstance(raw, list)
        or len(raw) != 4
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in raw)
    ):
        raise ShapeMismatchError("expected array of four integers", path)
    return list(raw)


def parse_document(raw: Any, path: str = "") -> Document:
    """Parse the wrapped external form of any document kind.

    Args:
        raw: Decoded JSON value, e.g. ``{"blueprint": {...}}``
        path: Location of the value, used in error messages

    Returns:
        The parsed Blueprint, Book, UpgradePlanner or DeconPlanner

    Raises:
        UnknownFieldError: If the wrapper key is not a document kind
        ShapeMismatchError: If the wrapper does not hold exactly one document
    """
    data = expect_object(raw, path)
    if len(data) != 1:
        raise ShapeMismatchError(
            f"expected exactly one document kind, got {sorted(data)}", path
        )

    key, body = next(iter(data.items()))
    try:
        kind = DocumentKind(key)
    except ValueError:
        raise UnknownFieldError(f"unknown document kind '{key}'", join_path(path, key)) from None

    return DOCUMENT_TYPES[kind].from_dict(body, join_path(path, key))


def document_to_dict(document: Document) -> Dict[str, Any]:
    """Serialize a document into its wrapped external form."""
    return {document.kind.value: document.to_dict()}
