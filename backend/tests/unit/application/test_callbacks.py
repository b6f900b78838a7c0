"""Unit tests for run_with_callbacks."""

from unittest.mock import AsyncMock, MagicMock, call

import pytest

from skinwise.application.presentation.callbacks import AnalysisCallbacks, run_with_callbacks
from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure, Success


@pytest.fixture
def hooks():
    manager = MagicMock()
    return manager, AnalysisCallbacks(
        on_start=manager.on_start,
        on_success=manager.on_success,
        on_error=manager.on_error,
    )


class TestRunWithCallbacks:
    @pytest.mark.asyncio
    async def test_success_order(self, hooks):
        manager, callbacks = hooks
        operation = AsyncMock(return_value=Success("result"))

        outcome = await run_with_callbacks(operation, callbacks, preview="data:image/png;base64,AA==")

        assert outcome.ok
        assert manager.mock_calls == [
            call.on_start(),
            call.on_success("result", "data:image/png;base64,AA=="),
        ]

    @pytest.mark.asyncio
    async def test_failure_reports_user_message(self, hooks):
        manager, callbacks = hooks
        operation = AsyncMock(return_value=Failure(AnalysisErrorKind.ENTITLEMENT_EXHAUSTED))

        outcome = await run_with_callbacks(operation, callbacks)

        assert not outcome.ok
        assert manager.mock_calls == [
            call.on_start(),
            call.on_error("No trials remaining. Please upgrade to continue."),
        ]

    @pytest.mark.asyncio
    async def test_exception_becomes_generic_failure(self, hooks):
        manager, callbacks = hooks
        operation = AsyncMock(side_effect=RuntimeError("boom"))

        outcome = await run_with_callbacks(operation, callbacks)

        assert outcome.kind is AnalysisErrorKind.UNEXPECTED_ERROR
        assert outcome.detail == "boom"
        manager.on_success.assert_not_called()
        manager.on_error.assert_called_once_with(
            "An unexpected error occurred. Please try again."
        )

    @pytest.mark.asyncio
    async def test_exception_uses_caller_fallback_kind(self, hooks):
        manager, callbacks = hooks
        operation = AsyncMock(side_effect=RuntimeError("label unreadable"))

        outcome = await run_with_callbacks(
            operation, callbacks, fallback_kind=AnalysisErrorKind.INGREDIENT_READ_FAILED
        )

        assert outcome.kind is AnalysisErrorKind.INGREDIENT_READ_FAILED
        manager.on_error.assert_called_once_with(
            "Could not read the ingredients. Please try again with a clearer image."
        )

    @pytest.mark.asyncio
    async def test_missing_hooks_are_skipped(self):
        outcome = await run_with_callbacks(AsyncMock(return_value=Success(1)), AnalysisCallbacks())

        assert outcome == Success(1)
