"""
``Query.viewer`` and its fields.

The viewer itself is an empty placeholder; each field identifies the caller
on its own, so an anonymous request fails on ``me``/``bookings`` without
failing ``viewer``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ariadne import ObjectType, QueryType
from graphql import GraphQLResolveInfo

from ...errors import AuthenticationError
from .auth import get_context

query = QueryType()
viewer = ObjectType("Viewer")


@dataclass(frozen=True)
class Viewer:
    """Per-request session placeholder; never persisted."""


@query.field("viewer")
def resolve_viewer(_parent: Any, _info: GraphQLResolveInfo) -> Viewer:
    return Viewer()


@viewer.field("me")
async def resolve_me(_viewer: Viewer, info: GraphQLResolveInfo) -> dict[str, Any]:
    context = get_context(info)
    if not context.is_authenticated:
        raise AuthenticationError()

    user = await context.remote.delegate("query", "user", None, info, exclude=("token",))
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return {**user, "token": context.auth_token}


@viewer.field("bookings")
async def resolve_bookings(_viewer: Viewer, info: GraphQLResolveInfo) -> list[dict[str, Any]]:
    context = get_context(info)
    if not context.is_authenticated:
        raise AuthenticationError()

    user = await context.remote.delegate("query", "user", None, info, nested=("bookings",))
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return user.get("bookings") or []
