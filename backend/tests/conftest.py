"""Shared fixtures for SkinWise tests."""

import pytest

from skinwise.domain.analysis.core.entities.analysis_result import AnalysisResult
from skinwise.domain.analysis.core.entities.classification import ClassificationResult
from skinwise.domain.analysis.core.entities.remedy import (
    DailyRoutine,
    RemedyBundle,
    RemedyItem,
)
from skinwise.domain.analysis.core.value_objects.severity import Severity
from skinwise.domain.shared.value_objects.image_payload import ImagePayload
from skinwise.infrastructure.ai.stub.stub_gateway import StubInferenceGateway
from skinwise.infrastructure.persistence.in_memory.entitlement_repository import (
    InMemoryEntitlementRepository,
)

USER_ID = "auth0|user-123"


@pytest.fixture
def skin_image() -> ImagePayload:
    """Small PNG-typed payload (content is irrelevant to the stub)."""
    return ImagePayload(data=b"\x89PNG\r\n\x1a\nfake-skin-photo", mime_type="image/png")


@pytest.fixture
def label_image():
    """Factory for ingredient label images (stub reads the bytes as text)."""

    def _make(text: str) -> ImagePayload:
        return ImagePayload(data=text.encode("utf-8"), mime_type="image/jpeg")

    return _make


@pytest.fixture
def stub_gateway() -> StubInferenceGateway:
    return StubInferenceGateway()


@pytest.fixture
def repository() -> InMemoryEntitlementRepository:
    return InMemoryEntitlementRepository()


@pytest.fixture
def sample_result() -> AnalysisResult:
    return AnalysisResult(
        classification=ClassificationResult("Acne"),
        severity=Severity.MODERATE,
        remedies=RemedyBundle(
            remedies=(
                RemedyItem("Salicylic acid cleanser", "Use a 2% BHA cleanser once daily."),
                RemedyItem("Spot treatment", "Apply benzoyl peroxide to lesions."),
            ),
            routine=DailyRoutine(am=("Cleanse", "SPF 30"), pm=("Cleanse", "Moisturize")),
            lifestyle=(RemedyItem("Sleep", "Aim for 8 hours."),),
        ),
        remaining_trials=2,
    )
