"""MongoDB implementation of IEntitlementRepository."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.shared.errors import DatabaseError, ValidationError
from skinwise.domain.shared.value_objects.user_id import UserId

from .base import MongoBaseRepository


class MongoEntitlementRepository(
    MongoBaseRepository[EntitlementState],
    IEntitlementRepository,
):
    """MongoDB implementation of entitlement repository.

    One document per user, keyed by ``user_id``. ``trial_count`` is null for
    unlimited users. The debit is a single conditional
    ``find_one_and_update`` so concurrent requests cannot overdraw.
    """

    @property
    def collection_name(self) -> str:
        """MongoDB collection name."""
        return "entitlements"

    def to_document(self, entity: EntitlementState) -> Dict[str, Any]:
        return {
            "trial_count": entity.trial_count,
            "has_paid": entity.has_paid,
        }

    def from_document(self, doc: Dict[str, Any]) -> EntitlementState:
        if "has_paid" not in doc or "trial_count" not in doc:
            raise DatabaseError(f"Invalid entitlement document: {doc.get('user_id')}")
        try:
            return EntitlementState(
                trial_count=doc["trial_count"],
                has_paid=bool(doc["has_paid"]),
            )
        except ValidationError as e:
            raise DatabaseError(
                f"Invalid entitlement document: {doc.get('user_id')}: {e}"
            ) from e

    async def get(self, user_id: UserId) -> Optional[EntitlementState]:
        doc = await self._find_one({"user_id": str(user_id)})
        return self.from_document(doc) if doc else None

    async def create(self, user_id: UserId, state: EntitlementState) -> EntitlementState:
        now = datetime.now(timezone.utc)
        await self._update_one(
            {"user_id": str(user_id)},
            {
                "$setOnInsert": {
                    "user_id": str(user_id),
                    **self.to_document(state),
                    "created_at": now,
                    "updated_at": now,
                }
            },
            upsert=True,
        )
        stored = await self.get(user_id)
        return stored if stored is not None else state

    async def try_debit(self, user_id: UserId) -> Optional[EntitlementState]:
        doc = await self._find_one_and_update(
            {"user_id": str(user_id), "has_paid": False, "trial_count": {"$gt": 0}},
            {
                "$inc": {"trial_count": -1},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
        if doc:
            return self.from_document(doc)

        # Nothing debited: either paid (unchanged) or exhausted/missing
        current = await self.get(user_id)
        if current is not None and current.has_paid:
            return current
        return None

    async def update(self, user_id: UserId, state: EntitlementState) -> None:
        await self._update_one(
            {"user_id": str(user_id)},
            {
                "$set": {
                    "user_id": str(user_id),
                    **self.to_document(state),
                    "updated_at": datetime.now(timezone.utc),
                }
            },
            upsert=True,
        )

    async def delete(self, user_id: UserId) -> bool:
        return await self._delete_one({"user_id": str(user_id)}) > 0
