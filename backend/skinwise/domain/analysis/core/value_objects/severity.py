"""Severity value object."""

from enum import Enum

from skinwise.domain.shared.errors import ValidationError

_ORDER = {"Mild": 0, "Moderate": 1, "Severe": 2}


class Severity(str, Enum):
    """Ordered severity grade: Mild < Moderate < Severe.

    Examples:
        >>> Severity.parse(" moderate ")
        <Severity.MODERATE: 'Moderate'>
        >>> Severity.MILD < Severity.SEVERE
        True
    """

    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"

    @staticmethod
    def parse(raw: str) -> "Severity":
        """Case-insensitive lookup.

        Raises:
            ValidationError: If raw is not one of the three grades
        """
        normalized = (raw or "").strip().capitalize()
        try:
            return Severity(normalized)
        except ValueError as e:
            raise ValidationError(f"Unknown severity: {raw!r}") from e

    @property
    def rank(self) -> int:
        return _ORDER[self.value]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank
