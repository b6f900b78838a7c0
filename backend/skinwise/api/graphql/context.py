"""GraphQL context and service wiring.

``Services`` is built once in the FastAPI lifespan, after the inference
gateway has been entered; a fresh GraphQLContext wraps it per request.
"""

from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Request
from strawberry.fastapi import BaseContext

from skinwise.application.analysis.orchestrators.skin_analysis_orchestrator import (
    SkinAnalysisOrchestrator,
)
from skinwise.application.conversation.follow_up_manager import FollowUpConversationManager
from skinwise.application.entitlement.commands.ensure_profile import EnsureProfileCommand
from skinwise.application.entitlement.queries.get_entitlement import GetEntitlementQuery
from skinwise.application.ingredients.orchestrators.ingredient_orchestrator import (
    IngredientOrchestrator,
)
from skinwise.application.ingredients.orchestrators.suitability_orchestrator import (
    SuitabilityOrchestrator,
)
from skinwise.config import Settings
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.domain.entitlement.core.services.entitlement_guard import EntitlementGuard
from skinwise.domain.shared.ports.inference_gateway import IInferenceGateway


@dataclass
class Services:
    """Application services shared by all requests."""

    settings: Settings
    repository: IEntitlementRepository
    skin_analysis: SkinAnalysisOrchestrator
    ingredients: IngredientOrchestrator
    suitability: SuitabilityOrchestrator
    follow_up: FollowUpConversationManager
    ensure_profile: EnsureProfileCommand
    get_entitlement: GetEntitlementQuery


def build_services(
    settings: Settings,
    gateway: IInferenceGateway,
    repository: IEntitlementRepository,
) -> Services:
    """Wire orchestrators around an initialized gateway and repository."""
    guard = EntitlementGuard()
    return Services(
        settings=settings,
        repository=repository,
        skin_analysis=SkinAnalysisOrchestrator(
            gateway=gateway,
            repository=repository,
            guard=guard,
            max_image_bytes=settings.max_image_bytes,
            timeout_s=settings.inference_timeout_s,
        ),
        ingredients=IngredientOrchestrator(
            gateway=gateway,
            repository=repository,
            guard=guard,
            metered=settings.ingredient_checks_metered,
            max_image_bytes=settings.max_image_bytes,
            timeout_s=settings.inference_timeout_s,
        ),
        suitability=SuitabilityOrchestrator(
            gateway=gateway,
            repository=repository,
            guard=guard,
            metered=settings.ingredient_checks_metered,
            max_image_bytes=settings.max_image_bytes,
            timeout_s=settings.inference_timeout_s,
        ),
        follow_up=FollowUpConversationManager(
            gateway=gateway,
            max_turns=settings.follow_up_max_turns,
            timeout_s=settings.inference_timeout_s,
        ),
        ensure_profile=EnsureProfileCommand(
            repository=repository,
            default_trial_count=settings.default_trial_count,
            owner_user_ids=settings.owner_user_ids,
        ),
        get_entitlement=GetEntitlementQuery(repository=repository),
    )


class GraphQLContext(BaseContext):
    """GraphQL context with all dependencies.

    Resolvers access dependencies using ``info.context.services`` or
    ``info.context.get("name")``.
    """

    def __init__(self, services: Services, request: Optional[Request] = None) -> None:
        super().__init__()
        self.services = services
        self.request = request

    def get(self, key: str) -> Any:
        """Get a service by name (e.g. "skin_analysis")."""
        return getattr(self.services, key, None)


async def get_graphql_context(request: Request) -> GraphQLContext:
    """Context getter for GraphQLRouter (services live on app.state)."""
    services: Optional[Services] = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized; application lifespan has not run")
    return GraphQLContext(services=services, request=request)
