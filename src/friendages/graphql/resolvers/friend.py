from __future__ import annotations

import strawberry

from ...friends import get_age, set_age
from ..context import get_friend_context


async def resolve_get_age(info: strawberry.Info, name: str) -> str:
    return await get_age(name, get_friend_context(info))


async def resolve_set_age(info: strawberry.Info, name: str, age: int) -> str:
    saved_age = await set_age(name, age, get_friend_context(info))
    return str(saved_age)
