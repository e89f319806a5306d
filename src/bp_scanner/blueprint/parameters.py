"""
Parametrised blueprint placeholders.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import ShapeMismatchError
from .fields import FieldReader, put_if
from .ids import GetIDs, ReferenceCategory, UsedIDs


@dataclass
class QualityCondition(GetIDs):
    quality: Optional[str] = None
    comparator: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "quality-condition") -> "QualityCondition":
        reader = FieldReader(raw, path, ("quality", "comparator"))
        return cls(
            quality=reader.text("quality", None),
            comparator=reader.text("comparator", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "quality", self.quality, self.quality is not None)
        put_if(data, "comparator", self.comparator, self.comparator is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        if self.quality is not None:
            ids.add(ReferenceCategory.QUALITY, self.quality)
        return ids


class ParameterKind(Enum):
    ID = "id"
    NUMBER = "number"


_ID_FIELDS = ("type", "not-parametrised", "name", "id", "quality-condition", "ingredient-of")
_NUMBER_FIELDS = ("type", "not-parametrised", "name", "number", "variable", "formula")


@dataclass
class ParameterData(GetIDs):
    """A placeholder of a parametrised blueprint.

    ID parameters stand in for a game object (``id``) which is recorded as an
    OTHER reference; ``ingredient-of`` names a recipe. Number parameters carry
    a textual number and an optional formula, and reference nothing.
    """

    kind: ParameterKind
    name: Optional[str] = None
    not_parametrised: Optional[bool] = None
    id: Optional[str] = None
    quality_condition: Optional[QualityCondition] = None
    ingredient_of: Optional[str] = None
    number: Optional[str] = None
    variable: Optional[str] = None
    formula: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "parameters") -> "ParameterData":
        type_reader = FieldReader(raw, path, None)
        type_text = type_reader.text("type")
        try:
            kind = ParameterKind(type_text)
        except ValueError:
            raise ShapeMismatchError(
                f"unknown parameter type '{type_text}'", type_reader.child_path("type")
            ) from None

        if kind is ParameterKind.ID:
            reader = FieldReader(raw, path, _ID_FIELDS)
            return cls(
                kind=kind,
                name=reader.text("name", None),
                not_parametrised=reader.boolean("not-parametrised", None),
                id=reader.text("id"),
                quality_condition=reader.optional_node(
                    "quality-condition", QualityCondition.from_dict
                ),
                ingredient_of=reader.text("ingredient-of", None),
            )

        reader = FieldReader(raw, path, _NUMBER_FIELDS)
        return cls(
            kind=kind,
            name=reader.text("name", None),
            not_parametrised=reader.boolean("not-parametrised", None),
            number=reader.text("number"),
            variable=reader.text("variable", None),
            formula=reader.text("formula", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind.value}
        put_if(data, "not-parametrised", self.not_parametrised, self.not_parametrised is not None)
        put_if(data, "name", self.name, self.name is not None)
        if self.kind is ParameterKind.ID:
            data["id"] = self.id
            if self.quality_condition is not None:
                data["quality-condition"] = self.quality_condition.to_dict()
            put_if(data, "ingredient-of", self.ingredient_of, self.ingredient_of is not None)
        else:
            data["number"] = self.number
            put_if(data, "variable", self.variable, self.variable is not None)
            put_if(data, "formula", self.formula, self.formula is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        if self.kind is not ParameterKind.ID:
            return ids
        if self.id is not None:
            ids.add(ReferenceCategory.OTHER, self.id)
        if self.ingredient_of is not None:
            ids.add(ReferenceCategory.RECIPE, self.ingredient_of)
        if self.quality_condition is not None:
            ids.merge(self.quality_condition.get_ids())
        return ids
