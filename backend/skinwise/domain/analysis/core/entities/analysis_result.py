"""AnalysisResult aggregate."""

from dataclasses import dataclass
from typing import Optional

from skinwise.domain.analysis.core.entities.classification import ClassificationResult
from skinwise.domain.analysis.core.entities.remedy import RemedyBundle
from skinwise.domain.analysis.core.value_objects.severity import Severity
from skinwise.domain.shared.errors import ValidationError


@dataclass(frozen=True)
class AnalysisResult:
    """
    Aggregate of one completed skin analysis.

    Built only after classification, severity and remedies all succeeded
    and the usage debit was persisted. Immutable once built.

    Attributes:
        classification: Predicted condition
        severity: Severity grade for that condition
        remedies: Remedies, routine and lifestyle tips
        remaining_trials: Post-debit trial count, None for unlimited users
    """

    classification: ClassificationResult
    severity: Severity
    remedies: RemedyBundle
    remaining_trials: Optional[int]

    def __post_init__(self) -> None:
        if self.remaining_trials is not None and self.remaining_trials < 0:
            raise ValidationError(
                f"remaining_trials cannot be negative, got {self.remaining_trials}"
            )

    @property
    def label(self) -> str:
        return self.classification.label
