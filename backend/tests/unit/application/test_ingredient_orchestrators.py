"""Unit tests for IngredientOrchestrator and SuitabilityOrchestrator."""

from unittest.mock import AsyncMock

import pytest

from skinwise.application.ingredients.orchestrators.ingredient_orchestrator import (
    IngredientOrchestrator,
)
from skinwise.application.ingredients.orchestrators.suitability_orchestrator import (
    SuitabilityOrchestrator,
)
from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.ingredients.core.entities.ingredient import (
    IngredientAnalysis,
    SuitabilityReport,
)
from skinwise.domain.shared.errors import DatabaseError
from skinwise.domain.shared.outcome import AnalysisErrorKind, Success
from skinwise.domain.shared.value_objects.image_payload import ImagePayload
from skinwise.domain.shared.value_objects.user_id import UserId
from skinwise.infrastructure.ai.stub.stub_gateway import StubInferenceGateway

USER = "auth0|user-123"
ROSACEA_LABEL = "Aqua, Glycerin, Alcohol Denat., Niacinamide"


class TestIngredientOrchestrator:
    @pytest.mark.asyncio
    async def test_analyze_ingredients_success(self, stub_gateway, label_image):
        orchestrator = IngredientOrchestrator(stub_gateway)

        outcome = await orchestrator.analyze_ingredients(
            label_image("Water, Glycerin, Fragrance, Niacinamide")
        )

        assert isinstance(outcome, Success)
        report = outcome.value
        assert [i.name for i in report.ingredients] == [
            "Water",
            "Glycerin",
            "Fragrance",
            "Niacinamide",
        ]
        assert [i.name for i in report.irritants()] == ["Fragrance"]
        assert "Niacinamide" in [i.name for i in report.beneficial()]
        assert report.summary

    @pytest.mark.asyncio
    async def test_unreadable_label(self, stub_gateway, label_image):
        outcome = await IngredientOrchestrator(stub_gateway).analyze_ingredients(
            label_image("12345 ,, 678")
        )

        assert outcome.kind is AnalysisErrorKind.INGREDIENT_READ_FAILED
        assert outcome.message == (
            "Could not read the ingredients. Please try again with a clearer image."
        )

    @pytest.mark.asyncio
    async def test_gateway_failure(self, label_image):
        gateway = StubInferenceGateway(fail_on=["analyze_ingredients"])

        outcome = await IngredientOrchestrator(gateway).analyze_ingredients(
            label_image("Water")
        )

        assert outcome.kind is AnalysisErrorKind.INGREDIENT_READ_FAILED

    @pytest.mark.asyncio
    async def test_image_too_large(self, stub_gateway):
        orchestrator = IngredientOrchestrator(stub_gateway, max_image_bytes=8)

        outcome = await orchestrator.analyze_ingredients(
            ImagePayload(data=b"Water, Glycerin", mime_type="image/png")
        )

        assert outcome.kind is AnalysisErrorKind.IMAGE_TOO_LARGE
        assert stub_gateway.total_calls == 0

    @pytest.mark.asyncio
    async def test_unmetered_ignores_profile(self, stub_gateway, label_image):
        """Unmetered checks do not need a profile at all."""
        outcome = await IngredientOrchestrator(stub_gateway).analyze_ingredients(
            label_image("Water"), user_id=None
        )

        assert outcome.ok

    @pytest.mark.asyncio
    async def test_metered_exhausted_user_blocked(self, stub_gateway, repository, label_image):
        await repository.create(UserId(USER), EntitlementState.trial(0))
        orchestrator = IngredientOrchestrator(stub_gateway, repository=repository, metered=True)

        outcome = await orchestrator.analyze_ingredients(label_image("Water"), user_id=USER)

        assert outcome.kind is AnalysisErrorKind.ENTITLEMENT_EXHAUSTED
        assert stub_gateway.total_calls == 0

    @pytest.mark.asyncio
    async def test_metered_never_debits(self, stub_gateway, repository, label_image):
        await repository.create(UserId(USER), EntitlementState.trial(2))
        orchestrator = IngredientOrchestrator(stub_gateway, repository=repository, metered=True)

        outcome = await orchestrator.analyze_ingredients(label_image("Water"), user_id=USER)

        assert outcome.ok
        assert (await repository.get(UserId(USER))).trial_count == 2

    @pytest.mark.asyncio
    async def test_metered_store_unavailable(self, stub_gateway, label_image):
        repository = AsyncMock()
        repository.get.side_effect = DatabaseError("connection reset")
        orchestrator = IngredientOrchestrator(stub_gateway, repository=repository, metered=True)

        outcome = await orchestrator.analyze_ingredients(label_image("Water"), user_id=USER)

        assert outcome.kind is AnalysisErrorKind.PROFILE_UNAVAILABLE
        assert stub_gateway.total_calls == 0

    def test_metered_requires_repository(self, stub_gateway):
        with pytest.raises(ValueError):
            IngredientOrchestrator(stub_gateway, metered=True)


class TestSuitabilityOrchestrator:
    @pytest.mark.asyncio
    async def test_alcohol_denat_harmful_for_rosacea(self, stub_gateway, label_image):
        orchestrator = SuitabilityOrchestrator(stub_gateway)

        outcome = await orchestrator.check_suitability("Rosacea", label_image(ROSACEA_LABEL))

        assert outcome.ok
        report = outcome.value
        analyses = {a.name: a for a in report.ingredient_analyses}
        assert analyses["Alcohol Denat."].is_harmful is True
        assert analyses["Alcohol Denat."].is_helpful is False
        assert analyses["Niacinamide"].is_helpful is True
        assert report.is_good_match is False

    @pytest.mark.asyncio
    async def test_good_match(self, stub_gateway, label_image):
        outcome = await SuitabilityOrchestrator(stub_gateway).check_suitability(
            "Eczema", label_image("Glycerin, Ceramide NP, Colloidal Oatmeal")
        )

        assert outcome.value.is_good_match is True
        assert outcome.value.harmful() == ()

    @pytest.mark.asyncio
    async def test_verdict_forwarded_as_given(self, label_image):
        """A good-match verdict stands even with a harmful ingredient flagged."""
        gateway = AsyncMock()
        gateway.check_suitability.return_value = SuitabilityReport(
            is_good_match=True,
            summary="Fine overall.",
            ingredient_analyses=(
                IngredientAnalysis("Fragrance", False, True, "Low concentration"),
            ),
        )

        outcome = await SuitabilityOrchestrator(gateway).check_suitability(
            "Acne", label_image("Fragrance")
        )

        assert outcome.value.is_good_match is True
        assert len(outcome.value.harmful()) == 1

    @pytest.mark.asyncio
    async def test_condition_is_forwarded(self, label_image):
        gateway = AsyncMock()
        gateway.check_suitability.return_value = SuitabilityReport(True, "ok", ())
        image = label_image("Water")

        await SuitabilityOrchestrator(gateway).check_suitability("  Acne ", image)

        gateway.check_suitability.assert_awaited_once_with("Acne", image)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("condition", ["", "   "])
    async def test_empty_condition(self, stub_gateway, label_image, condition):
        outcome = await SuitabilityOrchestrator(stub_gateway).check_suitability(
            condition, label_image("Water")
        )

        assert outcome.kind is AnalysisErrorKind.SUITABILITY_CHECK_FAILED
        assert stub_gateway.total_calls == 0

    @pytest.mark.asyncio
    async def test_gateway_failure(self, label_image):
        gateway = StubInferenceGateway(fail_on=["check_suitability"])

        outcome = await SuitabilityOrchestrator(gateway).check_suitability(
            "Acne", label_image("Water")
        )

        assert outcome.kind is AnalysisErrorKind.SUITABILITY_CHECK_FAILED

    @pytest.mark.asyncio
    async def test_metered_missing_profile(self, stub_gateway, repository, label_image):
        orchestrator = SuitabilityOrchestrator(stub_gateway, repository=repository, metered=True)

        outcome = await orchestrator.check_suitability(
            "Acne", label_image("Water"), user_id=USER
        )

        assert outcome.kind is AnalysisErrorKind.PROFILE_NOT_FOUND
        assert stub_gateway.total_calls == 0
