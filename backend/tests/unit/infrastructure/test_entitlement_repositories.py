"""Unit tests for the entitlement repositories (in-memory and MongoDB).

The MongoDB repository is tested against a mocked Motor collection; the
atomic debit is expressed as one conditional find_one_and_update.
"""

import asyncio
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.shared.errors import DatabaseError
from skinwise.domain.shared.value_objects.user_id import UserId
from skinwise.infrastructure.persistence.in_memory.entitlement_repository import (
    InMemoryEntitlementRepository,
)
from skinwise.infrastructure.persistence.mongodb.entitlement_repository import (
    MongoEntitlementRepository,
)

USER = UserId("auth0|user-123")


class TestInMemoryEntitlementRepository:
    @pytest.mark.asyncio
    async def test_create_and_get(self, repository):
        await repository.create(USER, EntitlementState.trial(3))

        assert await repository.get(USER) == EntitlementState.trial(3)
        assert await repository.get(UserId("other")) is None

    @pytest.mark.asyncio
    async def test_create_is_idempotent(self, repository):
        await repository.create(USER, EntitlementState.trial(3))
        second = await repository.create(USER, EntitlementState.owner())

        assert second == EntitlementState.trial(3)
        assert repository.count() == 1

    @pytest.mark.asyncio
    async def test_try_debit(self, repository):
        await repository.create(USER, EntitlementState.trial(2))

        assert (await repository.try_debit(USER)).trial_count == 1
        assert (await repository.try_debit(USER)).trial_count == 0
        assert await repository.try_debit(USER) is None
        assert (await repository.get(USER)).trial_count == 0

    @pytest.mark.asyncio
    async def test_try_debit_missing(self, repository):
        assert await repository.try_debit(USER) is None

    @pytest.mark.asyncio
    async def test_try_debit_paid_unchanged(self, repository):
        paid = EntitlementState(trial_count=0, has_paid=True)
        await repository.create(USER, paid)
        writes_before = repository.write_count

        assert await repository.try_debit(USER) == paid
        assert repository.write_count == writes_before

    @pytest.mark.asyncio
    async def test_concurrent_debits_never_overdraw(self, repository):
        await repository.create(USER, EntitlementState.trial(3))

        results = await asyncio.gather(*(repository.try_debit(USER) for _ in range(10)))

        assert sum(1 for r in results if r is not None) == 3
        assert (await repository.get(USER)).trial_count == 0

    @pytest.mark.asyncio
    async def test_update_and_delete(self, repository):
        await repository.update(USER, EntitlementState.trial(7))
        assert (await repository.get(USER)).trial_count == 7

        assert await repository.delete(USER) is True
        assert await repository.delete(USER) is False

    @pytest.mark.asyncio
    async def test_clear(self, repository):
        await repository.create(USER, EntitlementState.trial(1))

        repository.clear()

        assert repository.count() == 0
        assert repository.write_count == 0


@pytest.fixture
def mock_collection() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mongo_repository(mock_collection: AsyncMock) -> MongoEntitlementRepository:
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return MongoEntitlementRepository(database=db)


def _doc(trial_count: Any, has_paid: bool = False) -> Dict[str, Any]:
    return {"user_id": str(USER), "trial_count": trial_count, "has_paid": has_paid}


class TestMongoEntitlementRepository:
    def test_collection_name(self, mongo_repository):
        assert mongo_repository.collection_name == "entitlements"

    def test_document_mapping(self, mongo_repository):
        state = mongo_repository.from_document(_doc(None, has_paid=True))

        assert state.is_unlimited
        assert mongo_repository.to_document(EntitlementState.trial(2)) == {
            "trial_count": 2,
            "has_paid": False,
        }

    def test_invalid_document(self, mongo_repository):
        with pytest.raises(DatabaseError, match="Invalid entitlement document"):
            mongo_repository.from_document({"user_id": "x"})

    def test_inconsistent_document(self, mongo_repository):
        with pytest.raises(DatabaseError):
            mongo_repository.from_document(_doc(-2))

    @pytest.mark.asyncio
    async def test_get_malformed_document(self, mongo_repository, mock_collection):
        mock_collection.find_one.return_value = {"user_id": str(USER), "trial_count": 1}

        with pytest.raises(DatabaseError):
            await mongo_repository.get(USER)

    @pytest.mark.asyncio
    async def test_get(self, mongo_repository, mock_collection):
        mock_collection.find_one.return_value = _doc(3)

        state = await mongo_repository.get(USER)

        assert state == EntitlementState.trial(3)
        mock_collection.find_one.assert_awaited_once_with({"user_id": str(USER)})

    @pytest.mark.asyncio
    async def test_get_missing(self, mongo_repository, mock_collection):
        mock_collection.find_one.return_value = None

        assert await mongo_repository.get(USER) is None

    @pytest.mark.asyncio
    async def test_create_uses_set_on_insert(self, mongo_repository, mock_collection):
        mock_collection.find_one.return_value = _doc(3)

        state = await mongo_repository.create(USER, EntitlementState.trial(3))

        assert state.trial_count == 3
        filter_dict, update = mock_collection.update_one.call_args.args
        assert filter_dict == {"user_id": str(USER)}
        assert "$setOnInsert" in update
        assert mock_collection.update_one.call_args.kwargs["upsert"] is True

    @pytest.mark.asyncio
    async def test_try_debit_is_conditional(self, mongo_repository, mock_collection):
        mock_collection.find_one_and_update.return_value = _doc(1)

        state = await mongo_repository.try_debit(USER)

        assert state.trial_count == 1
        filter_dict, update = mock_collection.find_one_and_update.call_args.args
        assert filter_dict == {
            "user_id": str(USER),
            "has_paid": False,
            "trial_count": {"$gt": 0},
        }
        assert update["$inc"] == {"trial_count": -1}
        assert (
            mock_collection.find_one_and_update.call_args.kwargs["return_document"]
            == ReturnDocument.AFTER
        )

    @pytest.mark.asyncio
    async def test_try_debit_exhausted(self, mongo_repository, mock_collection):
        mock_collection.find_one_and_update.return_value = None
        mock_collection.find_one.return_value = _doc(0)

        assert await mongo_repository.try_debit(USER) is None

    @pytest.mark.asyncio
    async def test_try_debit_paid(self, mongo_repository, mock_collection):
        mock_collection.find_one_and_update.return_value = None
        mock_collection.find_one.return_value = _doc(0, has_paid=True)

        state = await mongo_repository.try_debit(USER)

        assert state == EntitlementState(trial_count=0, has_paid=True)

    @pytest.mark.asyncio
    async def test_delete(self, mongo_repository, mock_collection):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=1)

        assert await mongo_repository.delete(USER) is True

    @pytest.mark.asyncio
    async def test_pymongo_error_mapped(self, mongo_repository, mock_collection):
        mock_collection.find_one_and_update.side_effect = PyMongoError("network")

        with pytest.raises(DatabaseError):
            await mongo_repository.try_debit(USER)

    @pytest.mark.asyncio
    async def test_close_without_owned_client(self, mongo_repository):
        await mongo_repository.close()

    def test_requires_database_or_uri(self):
        with pytest.raises(ValueError, match="MONGODB_URI"):
            MongoEntitlementRepository()
