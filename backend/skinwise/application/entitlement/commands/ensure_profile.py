"""Ensure profile command."""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet

from skinwise.config import DEFAULT_TRIAL_COUNT
from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.shared.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass
class EnsureProfileCommand:
    """Command to create the metering profile on first authenticated use.

    Owner identities get unlimited paid access; everybody else starts with
    ``default_trial_count`` free analyses. Idempotent: an existing profile
    is returned untouched.

    Examples:
        >>> command = EnsureProfileCommand(repository)
        >>> state = await command.execute(UserId("auth0|123"))
        >>> state.trial_count
        3
    """

    repository: IEntitlementRepository
    default_trial_count: int = DEFAULT_TRIAL_COUNT
    owner_user_ids: FrozenSet[str] = field(default_factory=frozenset)

    async def execute(self, user_id: UserId) -> EntitlementState:
        """Execute ensure profile command.

        Args:
            user_id: Authenticated user identity

        Returns:
            Existing or newly created EntitlementState
        """
        existing = await self.repository.get(user_id)
        if existing is not None:
            return existing

        if str(user_id) in self.owner_user_ids:
            initial = EntitlementState.owner()
        else:
            initial = EntitlementState.trial(self.default_trial_count)

        state = await self.repository.create(user_id, initial)
        logger.info(
            "Profile created",
            extra={
                "user_id": str(user_id),
                "trial_count": state.trial_count,
                "has_paid": state.has_paid,
            },
        )
        return state
