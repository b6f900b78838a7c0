"""GraphQL queries."""

from typing import Optional

import strawberry
from strawberry.types import Info

from skinwise.api.graphql.types import EntitlementType
from skinwise.domain.shared.errors import ProfileNotFoundError
from skinwise.domain.shared.value_objects.user_id import UserId


@strawberry.type
class Query:
    """Read operations.

    Examples:
        query {
          entitlement(userId: "auth0|123") { trialCount hasPaid }
        }
    """

    @strawberry.field
    async def entitlement(self, info: Info, user_id: str) -> Optional[EntitlementType]:
        """Current metering state, or null when the user has no profile."""
        query = info.context.services.get_entitlement
        try:
            state = await query.execute(UserId(user_id))
        except ProfileNotFoundError:
            return None
        return EntitlementType.from_domain(state)
