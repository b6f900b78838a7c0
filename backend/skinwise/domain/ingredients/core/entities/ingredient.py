"""Ingredient label entities.

Two report shapes share the ingredient name: the standalone report
(general benefit/irritation flags) and the suitability report (flags
relative to a diagnosed condition).
"""

from dataclasses import dataclass
from typing import Tuple

from skinwise.domain.shared.errors import ValidationError


def _require_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Ingredient name cannot be empty")
    return name


@dataclass(frozen=True)
class Ingredient:
    """
    One ingredient read from a product label.

    ``is_beneficial`` and ``is_irritant`` are independent; both may be
    True (e.g. retinol) or both False.
    """

    name: str
    short_description: str
    is_beneficial: bool = False
    is_irritant: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _require_name(self.name))


@dataclass(frozen=True)
class IngredientReport:
    """Standalone ingredient analysis."""

    ingredients: Tuple[Ingredient, ...]
    summary: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "ingredients", tuple(self.ingredients))

    def beneficial(self) -> Tuple[Ingredient, ...]:
        return tuple(i for i in self.ingredients if i.is_beneficial)

    def irritants(self) -> Tuple[Ingredient, ...]:
        return tuple(i for i in self.ingredients if i.is_irritant)


@dataclass(frozen=True)
class IngredientAnalysis:
    """One ingredient judged against a diagnosed condition."""

    name: str
    is_helpful: bool
    is_harmful: bool
    reason: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _require_name(self.name))


@dataclass(frozen=True)
class SuitabilityReport:
    """
    Product suitability for a diagnosed condition.

    ``is_good_match`` is the model's overall verdict and is kept as given,
    even when individual ingredients are flagged harmful.
    """

    is_good_match: bool
    summary: str
    ingredient_analyses: Tuple[IngredientAnalysis, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ingredient_analyses", tuple(self.ingredient_analyses))

    def harmful(self) -> Tuple[IngredientAnalysis, ...]:
        return tuple(a for a in self.ingredient_analyses if a.is_harmful)
