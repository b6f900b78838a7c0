"""In-memory implementation of IEntitlementRepository for testing."""

import asyncio
from typing import Dict, Optional

from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.entitlement.core.services.entitlement_guard import EntitlementGuard
from skinwise.domain.shared.value_objects.user_id import UserId


class InMemoryEntitlementRepository(IEntitlementRepository):
    """
    In-memory implementation of entitlement repository.

    Uses a dictionary to store profiles in memory. Suitable for testing
    and development. Data is lost when the application stops.

    States are immutable, so no copying is needed. Writes go through an
    asyncio.Lock so ``try_debit`` is atomic within one event loop.
    """

    def __init__(self) -> None:
        """Initialize empty repository."""
        self._states: Dict[str, EntitlementState] = {}
        self._lock = asyncio.Lock()
        self._guard = EntitlementGuard()
        self.write_count = 0

    async def get(self, user_id: UserId) -> Optional[EntitlementState]:
        return self._states.get(str(user_id))

    async def create(self, user_id: UserId, state: EntitlementState) -> EntitlementState:
        async with self._lock:
            existing = self._states.get(str(user_id))
            if existing is not None:
                return existing
            self._states[str(user_id)] = state
            self.write_count += 1
            return state

    async def try_debit(self, user_id: UserId) -> Optional[EntitlementState]:
        async with self._lock:
            state = self._states.get(str(user_id))
            if state is None:
                return None
            if state.has_paid:
                return state
            if not self._guard.can_proceed(state):
                return None
            debited = self._guard.debit(state)
            self._states[str(user_id)] = debited
            self.write_count += 1
            return debited

    async def update(self, user_id: UserId, state: EntitlementState) -> None:
        async with self._lock:
            self._states[str(user_id)] = state
            self.write_count += 1

    async def delete(self, user_id: UserId) -> bool:
        async with self._lock:
            return self._states.pop(str(user_id), None) is not None

    def clear(self) -> None:
        """
        Clear all profiles from memory.

        Useful for test cleanup.
        """
        self._states.clear()
        self.write_count = 0

    def count(self) -> int:
        """Get total number of profiles in memory."""
        return len(self._states)
