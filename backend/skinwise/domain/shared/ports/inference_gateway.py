"""Port (interface) for the inference gateway.

This port defines the contract that model providers (OpenAI structured
outputs, the deterministic stub) implement to be used by the
orchestrators. Every method returns a validated domain object or raises.
"""

from typing import Protocol, Sequence

from skinwise.domain.analysis.core.entities.classification import ClassificationResult
from skinwise.domain.analysis.core.entities.remedy import RemedyBundle
from skinwise.domain.analysis.core.value_objects.severity import Severity
from skinwise.domain.conversation.core.entities.conversation import ConversationTurn
from skinwise.domain.ingredients.core.entities.ingredient import (
    IngredientReport,
    SuitabilityReport,
)
from skinwise.domain.shared.value_objects.image_payload import ImagePayload


class IInferenceGateway(Protocol):
    """
    Interface for structured-output model providers.

    Errors:
        InferenceError: transport failure, retries exhausted, circuit open
        SchemaValidationError: response missing or violating the schema
    """

    async def classify(self, image: ImagePayload) -> ClassificationResult:
        """
        Predict the skin condition shown in a photo.

        Example:
            >>> result = await gateway.classify(image)
            >>> result.label
            'Acne'
        """
        ...

    async def assess_severity(self, image: ImagePayload, label: str) -> Severity:
        """Grade the severity of an already classified condition."""
        ...

    async def generate_remedies(self, label: str) -> RemedyBundle:
        """Remedies, daily routine and lifestyle tips for a condition."""
        ...

    async def analyze_ingredients(self, image: ImagePayload) -> IngredientReport:
        """Read an ingredient label and flag beneficial/irritant entries."""
        ...

    async def check_suitability(self, label: str, image: ImagePayload) -> SuitabilityReport:
        """Judge an ingredient label against a diagnosed condition."""
        ...

    async def follow_up(
        self,
        context: str,
        history: Sequence[ConversationTurn],
        question: str,
    ) -> str:
        """
        Answer a follow-up question about a diagnosis.

        Args:
            context: Diagnosis context (condition, severity, remedies)
            history: Prior turns, oldest first
            question: New user question

        Returns:
            Raw assistant reply text
        """
        ...
