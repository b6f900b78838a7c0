"""FastAPI application: lifespan-managed services and the GraphQL endpoint.

Run locally:
    uvicorn skinwise.app:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter

from skinwise import __version__
from skinwise.api.graphql.context import build_services, get_graphql_context
from skinwise.api.graphql.schema import create_schema
from skinwise.config import Settings, load_settings
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.infrastructure.ai.factory import create_inference_gateway
from skinwise.infrastructure.persistence.repository_factory import (
    create_entitlement_repository,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Any = None,
    repository: Optional[IEntitlementRepository] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration (default: load_settings())
        gateway: Inference gateway supporting ``async with``
            (default: chosen by INFERENCE_PROVIDER)
        repository: Profile store (default: chosen by PROFILE_REPOSITORY)

    Returns:
        FastAPI app; services are created when the lifespan starts
    """
    settings = settings or load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Enter the gateway once, wire services, release on shutdown."""
        api_key = settings.openai_api_key
        logger.info(
            "startup.config",
            extra={
                "inference_provider": settings.inference_provider,
                "profile_repository": settings.profile_repository,
                "openai_key_present": bool(api_key),
                "ingredient_checks_metered": settings.ingredient_checks_metered,
            },
        )

        client = gateway if gateway is not None else create_inference_gateway(settings)
        store = repository if repository is not None else create_entitlement_repository(settings)

        async with client as initialized_gateway:
            app.state.services = build_services(settings, initialized_gateway, store)
            logger.info(
                "lifespan.ready",
                extra={
                    "gateway": type(initialized_gateway).__name__,
                    "repository": type(store).__name__,
                },
            )
            try:
                yield
            finally:
                logger.info("lifespan.shutdown", extra={"status": "cleanup"})
                app.state.services = None
                close = getattr(store, "close", None)
                if close is not None:
                    await close()

    app = FastAPI(title="SkinWise Backend", version=__version__, lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/version")
    async def version() -> dict:
        return {"version": __version__}

    graphql_app: GraphQLRouter = GraphQLRouter(create_schema(), context_getter=get_graphql_context)
    app.include_router(graphql_app, prefix="/graphql")

    return app


app = create_app()
