from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import ValidationError


class _Unset(enum.Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset.UNSET
"""Marks a patch field that was not supplied by the caller."""

RECIPE_FIELDS = (
    "title",
    "description",
    "ingredients",
    "instructions",
    "prep_time",
    "cook_time",
    "servings",
    "category",
    "tags",
    "difficulty",
    "rating",
    "notes",
)
READ_ONLY_FIELDS = ("id", "owner_id", "created_at", "updated_at")


@dataclass
class Ingredient:
    """A single ingredient line; ``item`` is what the line is about."""

    item: str
    amount: str = ""
    unit: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> "Ingredient":
        if isinstance(value, Ingredient):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError("Each ingredient must be an object with an 'item'.")

        item = value.get("item", "")
        amount = value.get("amount")
        unit = value.get("unit")

        if not isinstance(item, str):
            raise ValidationError("Ingredient 'item' must be a string.")
        if amount is None:
            amount = ""
        if not isinstance(amount, str):
            raise ValidationError("Ingredient 'amount' must be a string.")
        if unit is not None and not isinstance(unit, str):
            raise ValidationError("Ingredient 'unit' must be a string.")

        return cls(item=item, amount=amount, unit=unit)

    def to_dict(self) -> Dict[str, str]:
        data = {"item": self.item, "amount": self.amount}
        if self.unit is not None:
            data["unit"] = self.unit
        return data


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    title: str
    owner_id: str
    created_at: int
    updated_at: int
    ingredients: List[Ingredient] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    description: Optional[str] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    difficulty: Optional[str] = None
    rating: Optional[int] = None
    notes: Optional[str] = None

    @property
    def total_time(self) -> int:
        return (self.prep_time or 0) + (self.cook_time or 0)

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Recipe":
        """Build a recipe from a stored document, tolerating missing fields."""

        ingredients = data.get("ingredients")
        if isinstance(ingredients, list):
            parsed_ingredients = [Ingredient.from_value(value) for value in ingredients]
        else:
            parsed_ingredients = []

        instructions = data.get("instructions")
        if not isinstance(instructions, list):
            instructions = []

        tags = data.get("tags")
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            owner_id=data.get("owner_id", ""),
            created_at=int(data.get("created_at") or 0),
            updated_at=int(data.get("updated_at") or 0),
            ingredients=parsed_ingredients,
            instructions=list(instructions),
            description=data.get("description"),
            prep_time=data.get("prep_time"),
            cook_time=data.get("cook_time"),
            servings=data.get("servings"),
            category=data.get("category"),
            tags=list(tags) if isinstance(tags, list) else None,
            difficulty=data.get("difficulty"),
            rating=data.get("rating"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "ingredients": [ingredient.to_dict() for ingredient in self.ingredients],
            "instructions": list(self.instructions),
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "total_time": self.total_time,
            "servings": self.servings,
            "category": self.category,
            "tags": list(self.tags) if self.tags is not None else None,
            "difficulty": self.difficulty,
            "rating": self.rating,
            "notes": self.notes,
            "owner_id": self.owner_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def _parse_field(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name == "ingredients":
        if not isinstance(value, list):
            raise ValidationError("'ingredients' must be a list.")
        return [Ingredient.from_value(entry) for entry in value]
    if name in ("instructions", "tags"):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValidationError(f"'{name}' must be a list of strings.")
        return list(value)
    return value


def _parse_mapping(data: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError("Recipe payload must be a JSON object.")

    read_only = sorted(key for key in data if key in READ_ONLY_FIELDS)
    if read_only:
        raise ValidationError(f"Fields cannot be set by the caller: {', '.join(read_only)}.")

    unknown = sorted(key for key in data if key not in RECIPE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown recipe fields: {', '.join(unknown)}.")

    return {key: _parse_field(key, value) for key, value in data.items()}


@dataclass
class RecipeDraft:
    """The caller-supplied content of a recipe that is about to be created."""

    title: str
    ingredients: List[Ingredient] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    description: Optional[str] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    difficulty: Optional[str] = None
    rating: Optional[int] = None
    notes: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RecipeDraft":
        values = _parse_mapping(data)
        if values.get("title") is None:
            values["title"] = ""
        for name in ("ingredients", "instructions"):
            if values.get(name) is None:
                values[name] = []
        return cls(**values)


PatchValue = Union[_Unset, Any]


@dataclass
class RecipePatch:
    """A partial update. Each field is either ``UNSET`` or the new value.

    ``None`` is a real value: it clears an optional field. It is rejected for
    ``title``, ``ingredients`` and ``instructions`` during validation.
    """

    title: PatchValue = UNSET
    description: PatchValue = UNSET
    ingredients: PatchValue = UNSET
    instructions: PatchValue = UNSET
    prep_time: PatchValue = UNSET
    cook_time: PatchValue = UNSET
    servings: PatchValue = UNSET
    category: PatchValue = UNSET
    tags: PatchValue = UNSET
    difficulty: PatchValue = UNSET
    rating: PatchValue = UNSET
    notes: PatchValue = UNSET

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RecipePatch":
        return cls(**_parse_mapping(data))

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.changes()


__all__ = [
    "Ingredient",
    "RECIPE_FIELDS",
    "Recipe",
    "RecipeDraft",
    "RecipePatch",
    "UNSET",
]
