"""Suitability orchestrator: ingredient label vs. a diagnosed condition."""

import logging
from typing import Optional

from skinwise.application.shared.bounded_call import bounded
from skinwise.application.shared.entitlement_gate import check_entitlement
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.entitlement.core.services.entitlement_guard import EntitlementGuard
from skinwise.domain.ingredients.core.entities.ingredient import SuitabilityReport
from skinwise.domain.shared.errors import ImageTooLargeError
from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure, Outcome, Success
from skinwise.domain.shared.ports.inference_gateway import IInferenceGateway
from skinwise.domain.shared.value_objects.image_payload import ImagePayload

logger = logging.getLogger(__name__)


class SuitabilityOrchestrator:
    """
    Check whether a product suits the user's diagnosed condition.

    The model's ``is_good_match`` verdict is forwarded as given. Metering
    behaves as in IngredientOrchestrator: optional gate, never a debit.

    Example:
        >>> outcome = await orchestrator.check_suitability("Rosacea", image)
        >>> outcome.value.is_good_match
        False
    """

    def __init__(
        self,
        gateway: IInferenceGateway,
        repository: Optional[IEntitlementRepository] = None,
        guard: Optional[EntitlementGuard] = None,
        metered: bool = False,
        max_image_bytes: int = 16 * 1024 * 1024,
        timeout_s: float = 60.0,
    ):
        if metered and repository is None:
            raise ValueError("A metered suitability orchestrator needs a repository")
        self._gateway = gateway
        self._repository = repository
        self._guard = guard or EntitlementGuard()
        self._metered = metered
        self._max_image_bytes = max_image_bytes
        self._timeout_s = timeout_s

    async def check_suitability(
        self,
        diagnosed_condition: str,
        image: ImagePayload,
        user_id: Optional[str] = None,
    ) -> Outcome[SuitabilityReport]:
        """
        Judge a product label against a condition.

        Args:
            diagnosed_condition: Condition label from a prior analysis
            image: Photo of the ingredient list
            user_id: Caller identity (required only when metered)

        Returns:
            Success(SuitabilityReport) or Failure(kind)
        """
        condition = (diagnosed_condition or "").strip()
        if not condition:
            return Failure(AnalysisErrorKind.SUITABILITY_CHECK_FAILED, "empty diagnosed condition")

        logger.info(
            "Orchestrating suitability check",
            extra={"user_id": user_id, "condition": condition, "size_bytes": image.size_bytes},
        )

        try:
            image.ensure_within(self._max_image_bytes)
        except ImageTooLargeError as e:
            return Failure(AnalysisErrorKind.IMAGE_TOO_LARGE, str(e))

        if self._metered and self._repository is not None:
            entitlement = await check_entitlement(self._repository, self._guard, user_id)
            if isinstance(entitlement, Failure):
                return entitlement

        try:
            report = await bounded(
                "check_suitability",
                self._gateway.check_suitability(condition, image),
                self._timeout_s,
            )
        except Exception as e:
            logger.warning(
                "Suitability check failed",
                extra={"user_id": user_id, "condition": condition, "error": str(e)},
                exc_info=True,
            )
            return Failure(AnalysisErrorKind.SUITABILITY_CHECK_FAILED, str(e))

        logger.info(
            "Suitability check completed",
            extra={
                "user_id": user_id,
                "condition": condition,
                "is_good_match": report.is_good_match,
                "harmful_count": len(report.harmful()),
            },
        )
        return Success(report)
