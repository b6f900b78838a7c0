"""Repository Factory for Persistence Layer.

Settings-based repository selection with in-memory as default.
Strategy:
- .env (runtime): PROFILE_REPOSITORY=mongodb (production persistence)
- pytest: PROFILE_REPOSITORY=inmemory (fast, isolated tests)
- Default: inmemory (safe fallback if env vars not set)
"""

from skinwise.config import Settings
from skinwise.domain.entitlement.core.ports.entitlement_repository import (
    IEntitlementRepository,
)
from skinwise.infrastructure.persistence.in_memory.entitlement_repository import (
    InMemoryEntitlementRepository,
)


def create_entitlement_repository(settings: Settings) -> IEntitlementRepository:
    """Create entitlement repository based on settings.profile_repository.

    Values:
        - "inmemory": In-memory repository (default, fast, transient)
        - "mongodb": MongoDB repository (persistent, requires MONGODB_URI)

    Raises:
        ValueError: If mongodb selected but MONGODB_URI not set, or the
            value is unknown

    Example:
        # In .env (production):
        PROFILE_REPOSITORY=mongodb
        MONGODB_URI=mongodb://localhost:27017
    """
    mode = settings.profile_repository

    if mode == "mongodb":
        if not settings.mongodb_uri:
            raise ValueError(
                "PROFILE_REPOSITORY=mongodb but MONGODB_URI not set. "
                "Set MONGODB_URI in .env or use PROFILE_REPOSITORY=inmemory"
            )
        # Imported lazily so motor is only loaded when selected
        from skinwise.infrastructure.persistence.mongodb.entitlement_repository import (
            MongoEntitlementRepository,
        )

        return MongoEntitlementRepository(
            uri=settings.mongodb_uri,
            database_name=settings.mongodb_database,
        )

    if mode != "inmemory":
        raise ValueError(f"Unknown PROFILE_REPOSITORY: {mode!r} (use inmemory or mongodb)")

    return InMemoryEntitlementRepository()
