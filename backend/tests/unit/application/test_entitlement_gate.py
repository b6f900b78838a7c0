"""Unit tests for check_entitlement."""

from unittest.mock import AsyncMock

import pytest

from skinwise.application.shared.entitlement_gate import EntitlementCheck, check_entitlement
from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.entitlement.core.services.entitlement_guard import EntitlementGuard
from skinwise.domain.shared.errors import DatabaseError
from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure
from skinwise.domain.shared.value_objects.user_id import UserId

USER = "auth0|user-123"


@pytest.fixture
def guard() -> EntitlementGuard:
    return EntitlementGuard()


class TestCheckEntitlement:
    @pytest.mark.asyncio
    async def test_allowed_user(self, repository, guard):
        await repository.create(UserId(USER), EntitlementState.trial(1))

        result = await check_entitlement(repository, guard, USER)

        assert result == EntitlementCheck(
            user_id=UserId(USER), state=EntitlementState.trial(1)
        )

    @pytest.mark.asyncio
    async def test_blank_user_id(self, repository, guard):
        result = await check_entitlement(repository, guard, "  ")

        assert isinstance(result, Failure)
        assert result.kind is AnalysisErrorKind.PROFILE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_exhausted(self, repository, guard):
        await repository.create(UserId(USER), EntitlementState.trial(0))

        result = await check_entitlement(repository, guard, USER)

        assert result == Failure(AnalysisErrorKind.ENTITLEMENT_EXHAUSTED)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [DatabaseError("connection reset"), ValueError("bad document"), KeyError("has_paid")],
    )
    async def test_store_errors_are_unavailable(self, guard, error):
        repository = AsyncMock()
        repository.get.side_effect = error

        result = await check_entitlement(repository, guard, USER)

        assert isinstance(result, Failure)
        assert result.kind is AnalysisErrorKind.PROFILE_UNAVAILABLE
        repository.create.assert_not_awaited()
        repository.try_debit.assert_not_awaited()
