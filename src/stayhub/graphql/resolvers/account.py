"""
Account mutations. Credentials are checked and tokens issued by the backend;
the gateway only returns the backend's token alongside the user.
"""

from __future__ import annotations

from typing import Any

from ariadne import MutationType
from graphql import GraphQLResolveInfo

from ...logging import get_logger
from .auth import get_context

logger = get_logger(__name__)

AUTH_PAYLOAD = "{ id token }"

mutation = MutationType()


async def load_user(info: GraphQLResolveInfo, user_id: str, token: str | None) -> dict[str, Any]:
    """Fetch the caller's ``User`` selection by id and attach the session token."""
    user = await get_context(info).remote.delegate(
        "query", "User", {"id": user_id}, info, exclude=("token",)
    )
    return {**(user or {}), "id": user_id, "token": token}


@mutation.field("signup")
async def signup(
    _parent: Any,
    info: GraphQLResolveInfo,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    phone: str,
) -> dict[str, Any]:
    payload = await get_context(info).remote.call(
        "mutation",
        "signupUser",
        {
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
            "phone": phone,
        },
        AUTH_PAYLOAD,
    )
    logger.info("User signed up", user_id=payload["id"])
    return await load_user(info, payload["id"], payload["token"])


@mutation.field("login")
async def login(_parent: Any, info: GraphQLResolveInfo, email: str, password: str) -> dict[str, Any]:
    payload = await get_context(info).remote.call(
        "mutation", "authenticateUser", {"email": email, "password": password}, AUTH_PAYLOAD
    )
    logger.info("User logged in", user_id=payload["id"])
    return await load_user(info, payload["id"], payload["token"])
