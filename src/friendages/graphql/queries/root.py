"""
Root GraphQL query definitions
"""

import strawberry


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field(name="getAge")
    async def get_age(self, info: strawberry.Info, name: str) -> str | None:
        """Get a sentence describing a friend's age."""
        from ..resolvers.friend import resolve_get_age

        return await resolve_get_age(info, name)
