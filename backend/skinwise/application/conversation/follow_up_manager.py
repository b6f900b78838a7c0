"""Follow-up conversation manager.

Stateless: every call receives the caller-owned history and the diagnosis
context, and returns the assistant turn. The history is never mutated here.
"""

import logging
from typing import Union

from skinwise.application.shared.bounded_call import bounded
from skinwise.domain.analysis.core.entities.analysis_result import AnalysisResult
from skinwise.domain.conversation.core.entities.conversation import (
    ConversationHistory,
    ConversationTurn,
)
from skinwise.domain.conversation.core.services.diagnosis_context import (
    FALLBACK_REPLY,
    build_diagnosis_context,
    ensure_disclaimer,
)
from skinwise.domain.shared.errors import ValidationError
from skinwise.domain.shared.ports.inference_gateway import IInferenceGateway

logger = logging.getLogger(__name__)


class FollowUpConversationManager:
    """
    Answer follow-up questions scoped to one diagnosis.

    The gateway receives the diagnosis context, the most recent
    ``max_turns`` turns of history and the new question. Replies always
    end with the informational disclaimer; gateway failures produce the
    fallback reply instead of an exception.

    Example:
        >>> manager = FollowUpConversationManager(gateway)
        >>> turn = await manager.submit_turn(history, result, "Is it contagious?")
        >>> turn.role
        <Role.ASSISTANT: 'assistant'>
    """

    def __init__(
        self,
        gateway: IInferenceGateway,
        max_turns: int = 40,
        timeout_s: float = 60.0,
    ):
        if max_turns <= 0:
            raise ValueError(f"max_turns must be positive, got {max_turns}")
        self._gateway = gateway
        self._max_turns = max_turns
        self._timeout_s = timeout_s

    async def submit_turn(
        self,
        history: ConversationHistory,
        context: Union[AnalysisResult, str],
        user_text: str,
    ) -> ConversationTurn:
        """
        Produce the assistant reply for a new user question.

        Args:
            history: Prior turns of this conversation (not modified)
            context: The analysis result, or an already built context string
            user_text: New question

        Returns:
            Assistant ConversationTurn

        Raises:
            ValidationError: If user_text is blank
        """
        question = (user_text or "").strip()
        if not question:
            raise ValidationError("Question cannot be empty")

        if isinstance(context, AnalysisResult):
            context = build_diagnosis_context(context)

        window = history.window(self._max_turns)

        logger.info(
            "Submitting follow-up turn",
            extra={"history_turns": len(history), "window_turns": len(window)},
        )

        try:
            reply = await bounded(
                "follow_up",
                self._gateway.follow_up(context, window, question),
                self._timeout_s,
            )
            if not (reply or "").strip():
                raise ValidationError("Empty follow-up reply")
        except Exception as e:
            logger.error(
                "Follow-up failed, returning fallback reply",
                extra={"error": str(e)},
                exc_info=True,
            )
            return ConversationTurn.assistant(FALLBACK_REPLY)

        return ConversationTurn.assistant(ensure_disclaimer(reply))
