"""
Root GraphQL mutation definitions
"""

import strawberry


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="setAge")
    async def set_age(self, info: strawberry.Info, name: str, age: int) -> str | None:
        """Set a friend's age, creating the friend if needed."""
        from ..resolvers.friend import resolve_set_age

        return await resolve_set_age(info, name, age)

    @strawberry.mutation(name="changeAge", deprecation_reason="Use setAge")
    async def change_age(self, info: strawberry.Info, name: str, age: int) -> str | None:
        """Set a friend's age (earlier name of setAge)."""
        from ..resolvers.friend import resolve_set_age

        return await resolve_set_age(info, name, age)
