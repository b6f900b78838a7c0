"""Entitlement repository port (interface)."""

from abc import ABC, abstractmethod
from typing import Optional

from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.shared.value_objects.user_id import UserId


class IEntitlementRepository(ABC):
    """Repository interface for per-user metering profiles.

    Implementations must make ``try_debit`` atomic: two concurrent calls
    for a user with one trial left must not both succeed.
    """

    @abstractmethod
    async def get(self, user_id: UserId) -> Optional[EntitlementState]:
        """Find the profile for a user.

        Returns:
            EntitlementState if found, None otherwise

        Raises:
            DatabaseError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def create(self, user_id: UserId, state: EntitlementState) -> EntitlementState:
        """Create the profile if it does not exist yet.

        Returns:
            The stored state (the existing one when already present)
        """
        pass

    @abstractmethod
    async def try_debit(self, user_id: UserId) -> Optional[EntitlementState]:
        """Atomically consume one trial.

        Paid users are returned unchanged. Unpaid users are decremented only
        if ``trial_count > 0`` at the moment of the write.

        Returns:
            State after the debit, or None when no trial was left (or the
            profile is gone)

        Raises:
            DatabaseError: If the write fails
        """
        pass

    @abstractmethod
    async def update(self, user_id: UserId, state: EntitlementState) -> None:
        """Overwrite the profile (administrative upgrade or reset)."""
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> bool:
        """Delete the profile.

        Returns:
            True if a profile was deleted
        """
        pass
