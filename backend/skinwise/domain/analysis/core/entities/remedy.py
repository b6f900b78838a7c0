"""Remedy entities: individual suggestions, daily routine and the bundle."""

from dataclasses import dataclass, field
from typing import Tuple

from skinwise.domain.shared.errors import ValidationError


@dataclass(frozen=True)
class RemedyItem:
    """
    Single titled suggestion (remedy or lifestyle tip).

    Example:
        RemedyItem(
            title="Gentle cleanser",
            description="Wash twice daily with a non-comedogenic cleanser.",
        )
    """

    title: str
    description: str

    def __post_init__(self) -> None:
        if not (self.title or "").strip():
            raise ValidationError("Remedy title cannot be empty")
        object.__setattr__(self, "title", self.title.strip())
        object.__setattr__(self, "description", (self.description or "").strip())


@dataclass(frozen=True)
class DailyRoutine:
    """Morning and evening steps. Both lists always exist, possibly empty."""

    am: Tuple[str, ...] = ()
    pm: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "am", tuple(step.strip() for step in self.am if step.strip()))
        object.__setattr__(self, "pm", tuple(step.strip() for step in self.pm if step.strip()))


@dataclass(frozen=True)
class RemedyBundle:
    """
    Remedies, routine and lifestyle tips for one condition.

    Produced in a single gateway call; the orchestrator treats a bundle
    without any remedies as a failed generation.
    """

    remedies: Tuple[RemedyItem, ...] = ()
    routine: DailyRoutine = field(default_factory=DailyRoutine)
    lifestyle: Tuple[RemedyItem, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "remedies", tuple(self.remedies))
        object.__setattr__(self, "lifestyle", tuple(self.lifestyle))

    def is_empty(self) -> bool:
        """True when there is no remedy to show."""
        return len(self.remedies) == 0
