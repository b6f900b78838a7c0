"""Standalone ingredient analysis orchestrator."""

import logging
from typing import Optional

from skinwise.application.shared.bounded_call import bounded
from skinwise.application.shared.entitlement_gate import check_entitlement
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.entitlement.core.services.entitlement_guard import EntitlementGuard
from skinwise.domain.ingredients.core.entities.ingredient import IngredientReport
from skinwise.domain.shared.errors import ImageTooLargeError
from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure, Outcome, Success
from skinwise.domain.shared.ports.inference_gateway import IInferenceGateway
from skinwise.domain.shared.value_objects.image_payload import ImagePayload

logger = logging.getLogger(__name__)


class IngredientOrchestrator:
    """
    Read a product label and report on its ingredients.

    Single gateway call. When ``metered`` is True the caller must pass the
    entitlement guard, but no trial is ever consumed.

    Example:
        >>> orchestrator = IngredientOrchestrator(gateway)
        >>> outcome = await orchestrator.analyze_ingredients(image)
        >>> [i.name for i in outcome.value.ingredients]
        ['Water', 'Glycerin', 'Niacinamide']
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
            raise ValueError("A metered ingredient orchestrator needs a repository")
        self._gateway = gateway
        self._repository = repository
        self._guard = guard or EntitlementGuard()
        self._metered = metered
        self._max_image_bytes = max_image_bytes
        self._timeout_s = timeout_s

    async def analyze_ingredients(
        self, image: ImagePayload, user_id: Optional[str] = None
    ) -> Outcome[IngredientReport]:
        """
        Analyze an ingredient label photo.

        Args:
            image: Photo of the ingredient list
            user_id: Caller identity (required only when metered)

        Returns:
            Success(IngredientReport) or Failure(kind)
        """
        logger.info(
            "Orchestrating ingredient analysis",
            extra={"user_id": user_id, "size_bytes": image.size_bytes},
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
                "analyze_ingredients",
                self._gateway.analyze_ingredients(image),
                self._timeout_s,
            )
        except Exception as e:
            logger.warning(
                "Ingredient analysis failed",
                extra={"user_id": user_id, "error": str(e)},
                exc_info=True,
            )
            return Failure(AnalysisErrorKind.INGREDIENT_READ_FAILED, str(e))

        logger.info(
            "Ingredient analysis completed",
            extra={"user_id": user_id, "ingredient_count": len(report.ingredients)},
        )
        return Success(report)
