"""Read-only entitlement check shared by the orchestrators."""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.entitlement.core.services.entitlement_guard import EntitlementGuard
from skinwise.domain.shared.errors import DomainError
from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure
from skinwise.domain.shared.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitlementCheck:
    """User cleared to proceed, with the state the guard approved."""

    user_id: UserId
    state: EntitlementState


async def check_entitlement(
    repository: IEntitlementRepository,
    guard: EntitlementGuard,
    user_id: Optional[str],
) -> Union[EntitlementCheck, Failure]:
    """
    Load the profile and apply the guard. Never writes.

    A store that cannot be read (or returns a malformed record) yields
    PROFILE_UNAVAILABLE; a missing profile yields PROFILE_NOT_FOUND.

    Returns:
        EntitlementCheck when the user may proceed, otherwise a Failure
    """
    try:
        uid = UserId(user_id or "")
    except ValueError:
        return Failure(AnalysisErrorKind.PROFILE_NOT_FOUND, "missing user id")

    try:
        state = await repository.get(uid)
    except DomainError as e:
        logger.error(
            "Profile lookup failed",
            extra={"user_id": str(uid), "error": str(e)},
        )
        return Failure(AnalysisErrorKind.PROFILE_UNAVAILABLE, str(e))
    except Exception as e:
        logger.error(
            "Profile lookup raised unexpectedly",
            extra={"user_id": str(uid), "error": str(e)},
            exc_info=True,
        )
        return Failure(AnalysisErrorKind.PROFILE_UNAVAILABLE, str(e))

    if state is None:
        return Failure(AnalysisErrorKind.PROFILE_NOT_FOUND, f"no profile for {uid}")

    if not guard.can_proceed(state):
        logger.info("Entitlement exhausted", extra={"user_id": str(uid)})
        return Failure(AnalysisErrorKind.ENTITLEMENT_EXHAUSTED)

    return EntitlementCheck(user_id=uid, state=state)
