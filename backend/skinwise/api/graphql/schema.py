"""GraphQL schema factory for SkinWise.

Usage:
    from skinwise.api.graphql.schema import create_schema
    schema = create_schema()
"""

import strawberry

from skinwise.api.graphql.resolvers.mutations import Mutation
from skinwise.api.graphql.resolvers.queries import Query


def create_schema() -> strawberry.Schema:
    """Create Strawberry schema with all resolvers.

    Returns:
        Configured Strawberry Schema instance
    """
    return strawberry.Schema(query=Query, mutation=Mutation)
