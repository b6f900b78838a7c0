"""GraphQL mutations.

Every mutation returns a payload; domain failures never surface as
GraphQL errors.
"""

import logging

import strawberry
from strawberry.types import Info

from skinwise.api.graphql.types import (
    AnalysisResultType,
    AnalyzeIngredientsInput,
    AnalyzeIngredientsPayload,
    AnalyzeSkinInput,
    AnalyzeSkinPayload,
    CheckSuitabilityInput,
    CheckSuitabilityPayload,
    ConversationTurnType,
    EntitlementType,
    FollowUpInput,
    FollowUpPayload,
    IngredientReportType,
    SuitabilityReportType,
    failure_fields,
)
from skinwise.domain.conversation.core.entities.conversation import (
    ConversationHistory,
    ConversationTurn,
)
from skinwise.domain.shared.errors import UnsupportedImageTypeError, ValidationError
from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure
from skinwise.domain.shared.value_objects.image_payload import ImagePayload
from skinwise.domain.shared.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


def _decode_image(data_uri: str) -> "ImagePayload | Failure":
    try:
        return ImagePayload.from_data_uri(data_uri)
    except UnsupportedImageTypeError as e:
        return Failure(AnalysisErrorKind.UNSUPPORTED_IMAGE_TYPE, str(e))
    except ValidationError as e:
        logger.info("Rejected image payload", extra={"error": str(e)})
        return Failure(AnalysisErrorKind.UNSUPPORTED_IMAGE_TYPE, str(e))


@strawberry.type
class Mutation:
    """Write operations.

    Examples:
        mutation {
          analyzeSkin(input: { userId: "auth0|123", image: "data:image/png;base64,..." }) {
            success
            errorKind
            message
            result { condition severity remainingTrials diagnosisContext }
          }
        }
    """

    @strawberry.mutation
    async def ensure_profile(self, info: Info, user_id: str) -> EntitlementType:
        """Create the metering profile on first use (idempotent)."""
        command = info.context.services.ensure_profile
        state = await command.execute(UserId(user_id))
        return EntitlementType.from_domain(state)

    @strawberry.mutation
    async def analyze_skin(self, info: Info, input: AnalyzeSkinInput) -> AnalyzeSkinPayload:
        """Classify a skin photo, assess severity and suggest remedies."""
        image = _decode_image(input.image)
        if isinstance(image, Failure):
            return AnalyzeSkinPayload(**failure_fields(image))

        outcome = await info.context.services.skin_analysis.analyze(input.user_id, image)
        if isinstance(outcome, Failure):
            return AnalyzeSkinPayload(**failure_fields(outcome))

        return AnalyzeSkinPayload(
            success=True,
            result=AnalysisResultType.from_domain(outcome.value),
            preview=image.to_data_uri(),
        )

    @strawberry.mutation
    async def analyze_ingredients(
        self, info: Info, input: AnalyzeIngredientsInput
    ) -> AnalyzeIngredientsPayload:
        """Read a product label and flag its ingredients."""
        image = _decode_image(input.image)
        if isinstance(image, Failure):
            return AnalyzeIngredientsPayload(**failure_fields(image))

        outcome = await info.context.services.ingredients.analyze_ingredients(
            image, user_id=input.user_id
        )
        if isinstance(outcome, Failure):
            return AnalyzeIngredientsPayload(**failure_fields(outcome))

        return AnalyzeIngredientsPayload(
            success=True,
            report=IngredientReportType.from_domain(outcome.value),
        )

    @strawberry.mutation
    async def check_suitability(
        self, info: Info, input: CheckSuitabilityInput
    ) -> CheckSuitabilityPayload:
        """Judge a product label against a diagnosed condition."""
        image = _decode_image(input.image)
        if isinstance(image, Failure):
            return CheckSuitabilityPayload(**failure_fields(image))

        outcome = await info.context.services.suitability.check_suitability(
            input.diagnosed_condition, image, user_id=input.user_id
        )
        if isinstance(outcome, Failure):
            return CheckSuitabilityPayload(**failure_fields(outcome))

        return CheckSuitabilityPayload(
            success=True,
            report=SuitabilityReportType.from_domain(outcome.value),
        )

    @strawberry.mutation
    async def follow_up(self, info: Info, input: FollowUpInput) -> FollowUpPayload:
        """Answer a follow-up question about a diagnosis."""
        try:
            history = ConversationHistory(
                tuple(ConversationTurn(turn.role, turn.content) for turn in input.history)
            )
            if not input.diagnosis_context.strip():
                raise ValidationError("Diagnosis context cannot be empty")
            reply = await info.context.services.follow_up.submit_turn(
                history, input.diagnosis_context, input.question
            )
        except (ValidationError, ValueError) as e:
            return FollowUpPayload(
                **failure_fields(Failure(AnalysisErrorKind.FOLLOW_UP_FAILED, str(e)))
            )

        return FollowUpPayload(success=True, reply=ConversationTurnType.from_domain(reply))
