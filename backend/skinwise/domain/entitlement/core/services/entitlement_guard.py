"""Entitlement guard.

Pure policy: whether an analysis may start, and what the state looks like
after a successful one. Persistence of the debit is the repository's job
(see ``IEntitlementRepository.try_debit``).
"""

from typing import Optional

from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState


class EntitlementGuard:
    """
    Stateless usage policy.

    Example:
        >>> guard = EntitlementGuard()
        >>> state = EntitlementState.trial(1)
        >>> guard.can_proceed(state)
        True
        >>> guard.debit(state).trial_count
        0
    """

    def can_proceed(self, state: EntitlementState) -> bool:
        return state.has_paid or (state.trial_count or 0) > 0

    def debit(self, state: EntitlementState) -> EntitlementState:
        """
        State after one successful analysis.

        Paid users are unchanged; unpaid users lose one trial, floored at 0.
        """
        if state.has_paid:
            return state
        return state.with_trial_count(max((state.trial_count or 0) - 1, 0))

    def remaining_after_debit(self, state: EntitlementState) -> Optional[int]:
        """Trial count to report once the debit is applied (None if unlimited)."""
        return self.debit(state).trial_count
