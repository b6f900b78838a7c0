"""Unit tests for FollowUpConversationManager and ConversationSession."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from skinwise.application.conversation.follow_up_manager import FollowUpConversationManager
from skinwise.application.conversation.session import ConversationSession
from skinwise.domain.conversation.core.entities.conversation import (
    ConversationHistory,
    ConversationTurn,
    Role,
)
from skinwise.domain.conversation.core.services.diagnosis_context import (
    DISCLAIMER,
    FALLBACK_REPLY,
    build_diagnosis_context,
)
from skinwise.domain.shared.errors import ConversationBusyError, ValidationError
from skinwise.infrastructure.ai.stub.stub_gateway import StubInferenceGateway


class TestFollowUpConversationManager:
    @pytest.mark.asyncio
    async def test_reply_with_disclaimer(self, stub_gateway, sample_result):
        manager = FollowUpConversationManager(stub_gateway)

        turn = await manager.submit_turn(ConversationHistory(), sample_result, "Is it contagious?")

        assert turn.role is Role.ASSISTANT
        assert turn.content.startswith("Regarding Acne:")
        assert turn.content.count(DISCLAIMER) == 1

    @pytest.mark.asyncio
    async def test_disclaimer_appended_when_missing(self, sample_result):
        gateway = StubInferenceGateway(include_disclaimer=False)
        manager = FollowUpConversationManager(gateway)

        turn = await manager.submit_turn(ConversationHistory(), sample_result, "Why?")

        assert turn.content.endswith(DISCLAIMER)

    @pytest.mark.asyncio
    async def test_gateway_receives_context_window_and_question(self, stub_gateway, sample_result):
        manager = FollowUpConversationManager(stub_gateway, max_turns=2)
        history = ConversationHistory(
            (
                ConversationTurn.user("q1"),
                ConversationTurn.assistant("a1"),
                ConversationTurn.user("q2"),
                ConversationTurn.assistant("a2"),
            )
        )

        await manager.submit_turn(history, sample_result, "  q3  ")

        context, window, question = stub_gateway.follow_up_requests[0]
        assert context == build_diagnosis_context(sample_result)
        assert [t.content for t in window] == ["q2", "a2"]
        assert question == "q3"

    @pytest.mark.asyncio
    async def test_history_not_mutated(self, stub_gateway, sample_result):
        history = ConversationHistory((ConversationTurn.user("q1"),))

        await FollowUpConversationManager(stub_gateway).submit_turn(history, sample_result, "q2")

        assert len(history) == 1

    @pytest.mark.asyncio
    async def test_string_context_used_verbatim(self, stub_gateway):
        manager = FollowUpConversationManager(stub_gateway)

        turn = await manager.submit_turn(
            ConversationHistory(), "Condition: Rosacea, Severity: Mild", "Triggers?"
        )

        assert turn.content.startswith("Regarding Rosacea:")

    @pytest.mark.asyncio
    async def test_gateway_failure_returns_fallback(self, sample_result):
        gateway = StubInferenceGateway(fail_on=["follow_up"])

        turn = await FollowUpConversationManager(gateway).submit_turn(
            ConversationHistory(), sample_result, "Is it contagious?"
        )

        assert turn.role is Role.ASSISTANT
        assert turn.content == FALLBACK_REPLY

    @pytest.mark.asyncio
    async def test_blank_reply_returns_fallback(self, sample_result):
        gateway = AsyncMock()
        gateway.follow_up.return_value = "   "

        turn = await FollowUpConversationManager(gateway).submit_turn(
            ConversationHistory(), sample_result, "Is it contagious?"
        )

        assert turn.content == FALLBACK_REPLY

    @pytest.mark.asyncio
    async def test_timeout_returns_fallback(self, sample_result):
        gateway = StubInferenceGateway(delay_s=1.0)
        manager = FollowUpConversationManager(gateway, timeout_s=0.05)

        turn = await manager.submit_turn(ConversationHistory(), sample_result, "Hi")

        assert turn.content == FALLBACK_REPLY

    @pytest.mark.asyncio
    async def test_blank_question_rejected(self, stub_gateway, sample_result):
        with pytest.raises(ValidationError):
            await FollowUpConversationManager(stub_gateway).submit_turn(
                ConversationHistory(), sample_result, "  "
            )
        assert stub_gateway.total_calls == 0

    def test_max_turns_must_be_positive(self, stub_gateway):
        with pytest.raises(ValueError):
            FollowUpConversationManager(stub_gateway, max_turns=0)


class TestConversationSession:
    @pytest.mark.asyncio
    async def test_ask_appends_two_turns(self, stub_gateway, sample_result):
        session = ConversationSession(FollowUpConversationManager(stub_gateway), sample_result)

        reply = await session.ask("How long will it take?")

        assert len(session.history) == 2
        assert session.turns[0] == ConversationTurn.user("How long will it take?")
        assert session.turns[1] == reply

    @pytest.mark.asyncio
    async def test_failing_gateway_still_records_fallback(self, sample_result):
        gateway = StubInferenceGateway(fail_on=["follow_up"])
        session = ConversationSession(FollowUpConversationManager(gateway), sample_result)
        before = len(session.history)

        reply = await session.ask("Is it contagious?")

        assert reply.content == FALLBACK_REPLY
        assert len(session.history) == before + 2
        assert session.turns[-1].role is Role.ASSISTANT

    @pytest.mark.asyncio
    async def test_history_passed_on_next_question(self, stub_gateway, sample_result):
        session = ConversationSession(FollowUpConversationManager(stub_gateway), sample_result)

        await session.ask("first")
        await session.ask("second")

        _, window, question = stub_gateway.follow_up_requests[1]
        assert [t.role for t in window] == [Role.USER, Role.ASSISTANT]
        assert window[0].content == "first"
        assert question == "second"
        assert len(session.history) == 4

    @pytest.mark.asyncio
    async def test_concurrent_ask_is_busy(self, sample_result):
        gateway = StubInferenceGateway(delay_s=0.05)
        session = ConversationSession(FollowUpConversationManager(gateway), sample_result)

        pending = asyncio.ensure_future(session.ask("first"))
        await asyncio.sleep(0)
        assert session.busy is True

        with pytest.raises(ConversationBusyError):
            await session.ask("second")

        await pending
        assert len(session.history) == 2
        assert session.busy is False

    @pytest.mark.asyncio
    async def test_blank_question_records_nothing(self, stub_gateway, sample_result):
        session = ConversationSession(FollowUpConversationManager(stub_gateway), sample_result)

        with pytest.raises(ValidationError):
            await session.ask("")

        assert len(session.history) == 0
        assert session.busy is False

    def test_context_built_from_result(self, stub_gateway, sample_result):
        session = ConversationSession(FollowUpConversationManager(stub_gateway), sample_result)

        assert session.context == build_diagnosis_context(sample_result)
        assert session.result is sample_result
