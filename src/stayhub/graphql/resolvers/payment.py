"""
``Mutation.addPaymentMethod``: stores a credit card as a backend payment
account for the calling user.
"""

from __future__ import annotations

from typing import Any

from ariadne import MutationType
from graphql import GraphQLResolveInfo

from ...logging import get_logger
from ...remote import EnumLiteral
from .account import load_user
from .auth import get_context, resolve_current_user

logger = get_logger(__name__)

mutation = MutationType()


@mutation.field("addPaymentMethod")
async def add_payment_method(
    _parent: Any,
    info: GraphQLResolveInfo,
    card_number: str,
    expires_on_month: int,
    expires_on_year: int,
    security_code: str,
    first_name: str,
    last_name: str,
    postal_code: str,
    country: str,
) -> dict[str, Any]:
    """Store a credit card for the calling user.

    The card payload is passed through untouched; format and expiry checks
    are left to the backend.
    """
    user = await resolve_current_user(info)
    creditcard = {
        "cardNumber": card_number,
        "expiresOnMonth": expires_on_month,
        "expiresOnYear": expires_on_year,
        "securityCode": security_code,
        "firstName": first_name,
        "lastName": last_name,
        "postalCode": postal_code,
        "country": country,
    }

    context = get_context(info)
    account = await context.remote.call(
        "mutation",
        "createPaymentAccount",
        {"userId": user["id"], "type": EnumLiteral("CREDIT_CARD"), "creditcard": creditcard},
        "{ id }",
    )
    logger.info(
        "Payment method added",
        user_id=user["id"],
        payment_account_id=(account or {}).get("id"),
    )
    return await load_user(info, user["id"], context.auth_token)
