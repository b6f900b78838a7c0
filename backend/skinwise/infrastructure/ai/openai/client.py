"""OpenAI inference gateway - implements IInferenceGateway port.

Key Features:
- Structured outputs (native Pydantic support)
- Circuit breaker per call group (5 transport failures -> 60s open)
- Retry logic (exponential backoff) on transport errors only
- Error mapping to InferenceError / SchemaValidationError
"""

# mypy: warn-unused-ignores=False

import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from circuitbreaker import CircuitBreakerError, circuit
from openai import APIError, AsyncOpenAI
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from skinwise.domain.analysis.core.entities.classification import ClassificationResult
from skinwise.domain.analysis.core.entities.remedy import (
    DailyRoutine,
    RemedyBundle,
    RemedyItem,
)
from skinwise.domain.analysis.core.value_objects.severity import Severity
from skinwise.domain.conversation.core.entities.conversation import ConversationTurn
from skinwise.domain.ingredients.core.entities.ingredient import (
    Ingredient,
    IngredientAnalysis,
    IngredientReport,
    SuitabilityReport,
)
from skinwise.domain.shared.errors import (
    InferenceError,
    SchemaValidationError,
    ValidationError,
)
from skinwise.domain.shared.value_objects.image_payload import ImagePayload
from skinwise.infrastructure.ai.openai.models import (
    ClassificationResponse,
    FollowUpResponse,
    IngredientResponse,
    RemedyResponse,
    SeverityResponse,
    SuitabilityResponse,
)
from skinwise.infrastructure.ai.prompts.skin_analysis import (
    CLASSIFICATION_SYSTEM_PROMPT,
    FOLLOW_UP_SYSTEM_PROMPT,
    INGREDIENTS_SYSTEM_PROMPT,
    REMEDIES_SYSTEM_PROMPT,
    SEVERITY_SYSTEM_PROMPT,
    SUITABILITY_SYSTEM_PROMPT,
    follow_up_context_text,
    remedies_user_text,
    severity_user_text,
    suitability_user_text,
)

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)

_TRANSIENT_ERRORS = (TimeoutError, ConnectionError, APIError)


class OpenAIInferenceGateway:
    """
    OpenAI client implementing IInferenceGateway port.

    Image operations go through the "openai_vision" circuit, text-only
    operations (remedies, follow-up) through "openai_text".

    Meant to be entered once at startup and closed at shutdown:

    Example:
        >>> async with OpenAIInferenceGateway(api_key="sk-...") as gateway:
        ...     result = await gateway.classify(image)
        ...     print(result.label)
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-2024-08-06",
        temperature: float = 0.1,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Model name (default: gpt-4o-2024-08-06 with structured outputs)
            temperature: Sampling temperature (0.1 for consistency)
        """
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model
        self._temperature = temperature

    async def __aenter__(self) -> "OpenAIInferenceGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    # ============================================================
    # IInferenceGateway
    # ============================================================

    async def classify(self, image: ImagePayload) -> ClassificationResult:
        """
        Classify the skin condition in a photo.

        Raises:
            InferenceError: On transport failures (after retries) or open circuit
            SchemaValidationError: On empty or invalid structured output
        """
        response = await self._call(
            "classify",
            self._vision_completion,
            messages=[self._image_message(image)],
            response_model=ClassificationResponse,
            system_prompt=CLASSIFICATION_SYSTEM_PROMPT,
        )
        return self._convert("classify", lambda: ClassificationResult(response.condition))

    async def assess_severity(self, image: ImagePayload, label: str) -> Severity:
        response = await self._call(
            "assess_severity",
            self._vision_completion,
            messages=[self._image_message(image, severity_user_text(label))],
            response_model=SeverityResponse,
            system_prompt=SEVERITY_SYSTEM_PROMPT,
        )
        return self._convert("assess_severity", lambda: Severity.parse(response.severity))

    async def generate_remedies(self, label: str) -> RemedyBundle:
        response = await self._call(
            "generate_remedies",
            self._text_completion,
            messages=[{"role": "user", "content": remedies_user_text(label)}],
            response_model=RemedyResponse,
            system_prompt=REMEDIES_SYSTEM_PROMPT,
        )
        return self._convert("generate_remedies", lambda: self._to_remedy_bundle(response))

    async def analyze_ingredients(self, image: ImagePayload) -> IngredientReport:
        response = await self._call(
            "analyze_ingredients",
            self._vision_completion,
            messages=[self._image_message(image)],
            response_model=IngredientResponse,
            system_prompt=INGREDIENTS_SYSTEM_PROMPT,
        )
        return self._convert(
            "analyze_ingredients",
            lambda: IngredientReport(
                ingredients=tuple(
                    Ingredient(
                        name=item.name,
                        short_description=item.short_description,
                        is_beneficial=item.is_beneficial,
                        is_irritant=item.is_irritant,
                    )
                    for item in response.ingredients
                ),
                summary=response.summary,
            ),
        )

    async def check_suitability(self, label: str, image: ImagePayload) -> SuitabilityReport:
        response = await self._call(
            "check_suitability",
            self._vision_completion,
            messages=[self._image_message(image, suitability_user_text(label))],
            response_model=SuitabilityResponse,
            system_prompt=SUITABILITY_SYSTEM_PROMPT,
        )
        return self._convert(
            "check_suitability",
            lambda: SuitabilityReport(
                is_good_match=response.is_good_match,
                summary=response.summary,
                ingredient_analyses=tuple(
                    IngredientAnalysis(
                        name=item.name,
                        is_helpful=item.is_helpful,
                        is_harmful=item.is_harmful,
                        reason=item.reason,
                    )
                    for item in response.ingredient_analyses
                ),
            ),
        )

    async def follow_up(
        self,
        context: str,
        history: Sequence[ConversationTurn],
        question: str,
    ) -> str:
        messages: List[Dict[str, Any]] = [
            {"role": "user", "content": follow_up_context_text(context)},
            *({"role": turn.role.value, "content": turn.content} for turn in history),
            {"role": "user", "content": question},
        ]
        response = await self._call(
            "follow_up",
            self._text_completion,
            messages=messages,
            response_model=FollowUpResponse,
            system_prompt=FOLLOW_UP_SYSTEM_PROMPT,
        )
        if not response.reply.strip():
            raise SchemaValidationError("follow_up", "empty reply")
        return response.reply

    # ============================================================
    # Call plumbing
    # ============================================================

    async def _call(
        self,
        operation: str,
        completion: Any,
        messages: List[Dict[str, Any]],
        response_model: Type[TModel],
        system_prompt: str,
    ) -> TModel:
        """Run a completion and map every failure to a domain error."""
        start_time = time.time()
        try:
            parsed = await completion(
                messages=messages,
                response_model=response_model,
                system_prompt=system_prompt,
            )
        except CircuitBreakerError as e:
            raise InferenceError(operation, "circuit open", e) from e
        except PydanticValidationError as e:
            raise SchemaValidationError(operation, f"invalid structured output: {e}", e) from e
        except _TRANSIENT_ERRORS as e:
            raise InferenceError(operation, f"OpenAI API failed: {e}", e) from e
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(operation, f"unexpected error: {e}", e) from e

        if parsed is None:
            raise SchemaValidationError(operation, "empty parsed response")

        logger.info(
            "OpenAI call complete",
            extra={
                "operation": operation,
                "processing_time_ms": int((time.time() - start_time) * 1000),
            },
        )
        return parsed

    @staticmethod
    def _convert(operation: str, build: Any) -> Any:
        """Build a domain object, turning invariant violations into schema errors."""
        try:
            return build()
        except ValidationError as e:
            raise SchemaValidationError(operation, str(e), e) from e

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=_TRANSIENT_ERRORS,
        name="openai_vision",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _vision_completion(
        self,
        messages: List[Dict[str, Any]],
        response_model: Type[TModel],
        system_prompt: str,
    ) -> Optional[TModel]:
        return await self._structured_completion(messages, response_model, system_prompt)

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=_TRANSIENT_ERRORS,
        name="openai_text",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _text_completion(
        self,
        messages: List[Dict[str, Any]],
        response_model: Type[TModel],
        system_prompt: str,
    ) -> Optional[TModel]:
        return await self._structured_completion(messages, response_model, system_prompt)

    async def _structured_completion(
        self,
        messages: List[Dict[str, Any]],
        response_model: Type[TModel],
        system_prompt: str,
    ) -> Optional[TModel]:
        """
        Execute OpenAI completion with structured output.

        Uses beta.chat.completions.parse() for native Pydantic support.

        Args:
            messages: User messages (with images for vision calls)
            response_model: Pydantic model for response schema
            system_prompt: System prompt

        Returns:
            Parsed Pydantic model instance, or None if the model returned nothing
        """
        full_messages = [
            {"role": "system", "content": system_prompt},
            *messages,
        ]

        logger.debug(
            "Calling OpenAI structured completion",
            extra={
                "model": self._model,
                "response_model": response_model.__name__,
                "message_count": len(full_messages),
            },
        )

        response = await self._client.beta.chat.completions.parse(
            model=self._model,
            messages=full_messages,  # type: ignore[arg-type]
            response_format=response_model,
            temperature=self._temperature,
        )

        usage = response.usage
        if usage is not None:
            logger.info(
                "OpenAI response received",
                extra={
                    "model": self._model,
                    "total_tokens": usage.total_tokens,
                    "prompt_tokens": usage.prompt_tokens,
                    "completion_tokens": usage.completion_tokens,
                },
            )

        if not response.choices:
            return None
        return response.choices[0].message.parsed

    # ============================================================
    # Mapping helpers
    # ============================================================

    @staticmethod
    def _image_message(image: ImagePayload, text: Optional[str] = None) -> Dict[str, Any]:
        """User message carrying the image as a data URI (plus optional text)."""
        content: List[Dict[str, Any]] = [
            {"type": "image_url", "image_url": {"url": image.to_data_uri()}},
        ]
        if text:
            content.append({"type": "text", "text": text})
        return {"role": "user", "content": content}

    @staticmethod
    def _to_remedy_bundle(response: RemedyResponse) -> RemedyBundle:
        """Convert Pydantic response to domain entity."""
        return RemedyBundle(
            remedies=tuple(
                RemedyItem(title=item.title, description=item.description)
                for item in response.remedies
            ),
            routine=DailyRoutine(am=tuple(response.routine.am), pm=tuple(response.routine.pm)),
            lifestyle=tuple(
                RemedyItem(title=item.title, description=item.description)
                for item in response.lifestyle
            ),
        )
