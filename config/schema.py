# backend/config/schema.py
"""Root GraphQL schema: merges the per-app Query and Mutation types."""
import strawberry
from strawberry.schema.config import StrawberryConfig
from strawberry.tools import merge_types

from navigation.schema import Mutation as NavigationMutation
from navigation.schema import Query as NavigationQuery
from navigation.types import SCALAR_MAP

Query = merge_types("Query", (NavigationQuery,))
Mutation = merge_types("Mutation", (NavigationMutation,))

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    config=StrawberryConfig(scalar_map=SCALAR_MAP),
)
