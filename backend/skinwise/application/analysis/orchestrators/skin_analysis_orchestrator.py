"""Skin analysis orchestrator.

Coordinates entitlement, classification, the severity/remedy fan-out and
the usage debit for one uploaded skin photo.
"""

import asyncio
import logging
from typing import Optional, Tuple, Union

from skinwise.application.shared.bounded_call import bounded
from skinwise.application.shared.entitlement_gate import check_entitlement
from skinwise.domain.analysis.core.entities.analysis_result import AnalysisResult
from skinwise.domain.analysis.core.entities.classification import ClassificationResult
from skinwise.domain.analysis.core.entities.remedy import RemedyBundle
from skinwise.domain.analysis.core.value_objects.severity import Severity
from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.entitlement.core.services.entitlement_guard import EntitlementGuard
from skinwise.domain.shared.errors import ImageTooLargeError
from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure, Outcome, Success
from skinwise.domain.shared.ports.inference_gateway import IInferenceGateway
from skinwise.domain.shared.value_objects.image_payload import ImagePayload
from skinwise.domain.shared.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class SkinAnalysisOrchestrator:
    """
    Orchestrate the skin analysis workflow.

    Flow:
    1. Reject oversized images (no profile read, no inference)
    2. Load the profile and apply the entitlement guard
    3. Classify the image
    4. Assess severity and generate remedies concurrently (join barrier)
    5. Debit one trial atomically (unpaid users only)
    6. Build the AnalysisResult

    Nothing is debited unless every inference step succeeded, and no
    result is returned unless the debit was persisted.

    Example:
        >>> orchestrator = SkinAnalysisOrchestrator(gateway, repository)
        >>> outcome = await orchestrator.analyze("user123", image)
        >>> if outcome.ok:
        ...     print(outcome.value.classification.label)
        ... else:
        ...     print(outcome.message)
    """

    def __init__(
        self,
        gateway: IInferenceGateway,
        repository: IEntitlementRepository,
        guard: Optional[EntitlementGuard] = None,
        max_image_bytes: int = 16 * 1024 * 1024,
        timeout_s: float = 60.0,
    ):
        """
        Initialize orchestrator.

        Args:
            gateway: Inference gateway (classification, severity, remedies)
            repository: Metering profile store
            guard: Entitlement policy (default: EntitlementGuard())
            max_image_bytes: Largest accepted image
            timeout_s: Deadline for each gateway call
        """
        self._gateway = gateway
        self._repository = repository
        self._guard = guard or EntitlementGuard()
        self._max_image_bytes = max_image_bytes
        self._timeout_s = timeout_s

    async def analyze(self, user_id: str, image: ImagePayload) -> Outcome[AnalysisResult]:
        """
        Run a complete analysis.

        Args:
            user_id: Authenticated user identity
            image: Uploaded skin photo

        Returns:
            Success(AnalysisResult) or Failure(kind)
        """
        logger.info(
            "Orchestrating skin analysis",
            extra={
                "user_id": user_id,
                "mime_type": image.mime_type,
                "size_bytes": image.size_bytes,
            },
        )

        # 1. Size check
        try:
            image.ensure_within(self._max_image_bytes)
        except ImageTooLargeError as e:
            return Failure(AnalysisErrorKind.IMAGE_TOO_LARGE, str(e))

        # 2. Entitlement
        entitlement = await check_entitlement(self._repository, self._guard, user_id)
        if isinstance(entitlement, Failure):
            return entitlement

        # 3. Classification
        try:
            classification = await bounded(
                "classify", self._gateway.classify(image), self._timeout_s
            )
        except Exception as e:
            logger.warning(
                "Classification failed",
                extra={"user_id": user_id, "error": str(e)},
                exc_info=True,
            )
            return Failure(AnalysisErrorKind.CLASSIFICATION_FAILED, str(e))

        # 4. Fan-out
        fanned = await self._assess_and_suggest(image, classification)
        if isinstance(fanned, Failure):
            logger.warning(
                "Analysis fan-out failed",
                extra={"user_id": user_id, "kind": fanned.kind.value, "error": fanned.detail},
            )
            return fanned
        severity, remedies = fanned

        # 5. Debit
        debited = await self._debit(entitlement.user_id, entitlement.state)
        if isinstance(debited, Failure):
            return debited

        # 6. Aggregate
        result = AnalysisResult(
            classification=classification,
            severity=severity,
            remedies=remedies,
            remaining_trials=debited.trial_count,
        )

        logger.info(
            "Skin analysis completed",
            extra={
                "user_id": user_id,
                "label": classification.label,
                "severity": severity.value,
                "remedy_count": len(remedies.remedies),
                "remaining_trials": result.remaining_trials,
            },
        )
        return Success(result)

    async def _assess_and_suggest(
        self, image: ImagePayload, classification: ClassificationResult
    ) -> Union[Tuple[Severity, RemedyBundle], Failure]:
        """Run severity and remedies concurrently and wait for both."""
        label = classification.label
        severity_result, remedies_result = await asyncio.gather(
            bounded(
                "assess_severity",
                self._gateway.assess_severity(image, label),
                self._timeout_s,
            ),
            bounded(
                "generate_remedies",
                self._gateway.generate_remedies(label),
                self._timeout_s,
            ),
            return_exceptions=True,
        )

        for result in (severity_result, remedies_result):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result

        # Severity wins when both fail
        if isinstance(severity_result, Exception):
            return Failure(AnalysisErrorKind.SEVERITY_ASSESSMENT_FAILED, str(severity_result))
        if isinstance(remedies_result, Exception):
            return Failure(AnalysisErrorKind.REMEDY_GENERATION_FAILED, str(remedies_result))
        if remedies_result.is_empty():
            return Failure(AnalysisErrorKind.REMEDY_GENERATION_FAILED, "no remedies returned")

        return severity_result, remedies_result

    async def _debit(
        self, user_id: UserId, state: EntitlementState
    ) -> Union[EntitlementState, Failure]:
        """Persist the usage debit. Paid users are not written."""
        if state.has_paid:
            return self._guard.debit(state)

        try:
            debited = await self._repository.try_debit(user_id)
        except Exception as e:
            logger.error(
                "Usage debit failed",
                extra={"user_id": str(user_id), "error": str(e)},
                exc_info=True,
            )
            return Failure(AnalysisErrorKind.PROFILE_UPDATE_FAILED, str(e))

        if debited is None:
            # Another request consumed the last trial first
            logger.info("Usage debit lost race", extra={"user_id": str(user_id)})
            return Failure(AnalysisErrorKind.ENTITLEMENT_EXHAUSTED, "trial consumed concurrently")

        return debited
