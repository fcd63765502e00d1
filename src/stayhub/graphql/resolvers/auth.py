"""
Caller identification shared by the resolver modules.

The gateway never validates tokens itself; the backend's ``user`` root
answers with the user the token belongs to, or nothing.
"""

from __future__ import annotations

from typing import Any

from graphql import GraphQLResolveInfo

from ...errors import AuthenticationError
from ..context import RequestContext


def get_context(info: GraphQLResolveInfo) -> RequestContext:
    return info.context


async def resolve_current_user(info: GraphQLResolveInfo, selection: str = "{ id }") -> dict[str, Any]:
    """Fetch the calling user from the backend's ``user`` root.

    Raises:
        AuthenticationError: If the caller sent no token or the backend does
            not recognise it
    """
    context = get_context(info)
    if not context.is_authenticated:
        raise AuthenticationError()

    user = await context.remote.call("query", "user", None, selection)
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return user
