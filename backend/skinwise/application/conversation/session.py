"""Caller-side owner of one follow-up conversation."""

import asyncio
from typing import Tuple

from skinwise.application.conversation.follow_up_manager import FollowUpConversationManager
from skinwise.domain.analysis.core.entities.analysis_result import AnalysisResult
from skinwise.domain.conversation.core.entities.conversation import (
    ConversationHistory,
    ConversationTurn,
)
from skinwise.domain.conversation.core.services.diagnosis_context import (
    build_diagnosis_context,
)
from skinwise.domain.shared.errors import ConversationBusyError, ValidationError


class ConversationSession:
    """
    History bound to a single analysis result.

    Only one question may be outstanding at a time; a second ``ask``
    while the first is pending raises ConversationBusyError. Each
    completed ``ask`` appends exactly two turns (question, reply).

    Example:
        >>> session = ConversationSession(manager, result)
        >>> reply = await session.ask("How long until it clears?")
        >>> len(session.history)
        2
    """

    def __init__(self, manager: FollowUpConversationManager, result: AnalysisResult):
        self._manager = manager
        self._result = result
        self._context = build_diagnosis_context(result)
        self._history = ConversationHistory()
        self._lock = asyncio.Lock()

    @property
    def result(self) -> AnalysisResult:
        return self._result

    @property
    def context(self) -> str:
        return self._context

    @property
    def history(self) -> ConversationHistory:
        return self._history

    @property
    def turns(self) -> Tuple[ConversationTurn, ...]:
        return self._history.turns

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def ask(self, question: str) -> ConversationTurn:
        """
        Ask a question and record both turns.

        Raises:
            ConversationBusyError: If a previous question is still pending
            ValidationError: If the question is blank (nothing is recorded)
        """
        if self._lock.locked():
            raise ConversationBusyError("A follow-up question is already pending")

        async with self._lock:
            question = (question or "").strip()
            if not question:
                raise ValidationError("Question cannot be empty")

            reply = await self._manager.submit_turn(self._history, self._context, question)
            self._history.append(ConversationTurn.user(question))
            self._history.append(reply)
            return reply
