"""EntitlementState entity."""

from dataclasses import dataclass, replace
from typing import Optional

from skinwise.domain.shared.errors import ValidationError


@dataclass(frozen=True)
class EntitlementState:
    """
    Usage metering for one user.

    ``trial_count`` None means unlimited. Owner identities get unlimited
    paid access; everybody else starts with a fixed number of free
    analyses.

    Invariants:
    - trial_count is never negative
    - unlimited implies has_paid

    Examples:
        >>> EntitlementState.trial(3).trial_count
        3
        >>> EntitlementState.owner().is_unlimited
        True
    """

    trial_count: Optional[int]
    has_paid: bool = False

    def __post_init__(self) -> None:
        if self.trial_count is not None and self.trial_count < 0:
            raise ValidationError(f"trial_count cannot be negative, got {self.trial_count}")
        if self.trial_count is None and not self.has_paid:
            raise ValidationError("Unlimited trials require paid access")

    @staticmethod
    def trial(count: int) -> "EntitlementState":
        return EntitlementState(trial_count=count, has_paid=False)

    @staticmethod
    def owner() -> "EntitlementState":
        return EntitlementState(trial_count=None, has_paid=True)

    @property
    def is_unlimited(self) -> bool:
        return self.trial_count is None

    def with_trial_count(self, trial_count: Optional[int]) -> "EntitlementState":
        return replace(self, trial_count=trial_count)
