"""Get entitlement query."""

from dataclasses import dataclass

from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.shared.errors import ProfileNotFoundError
from skinwise.domain.shared.value_objects.user_id import UserId


@dataclass
class GetEntitlementQuery:
    """Query the current metering state of a user.

    Examples:
        >>> query = GetEntitlementQuery(repository)
        >>> state = await query.execute(UserId("auth0|123"))
    """

    repository: IEntitlementRepository

    async def execute(self, user_id: UserId) -> EntitlementState:
        """Execute query.

        Raises:
            ProfileNotFoundError: If the user has no profile
        """
        state = await self.repository.get(user_id)
        if state is None:
            raise ProfileNotFoundError(str(user_id))
        return state
