"""
``Mutation.book``.

Outcome mapping: errors reported by the backend are raised and reach the
caller as GraphQL errors. When the backend call completes, ``success`` is
true only if the booking came back together with its payment; a missing
booking or payment yields ``success: false``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ariadne import MutationType
from graphql import GraphQLResolveInfo

from ...errors import BookingError
from ...logging import get_logger
from .auth import get_context, resolve_current_user

logger = get_logger(__name__)

BOOKEE_SELECTION = "{ id paymentAccount { id } }"

mutation = MutationType()


@dataclass(frozen=True)
class BookingResult:
    success: bool


@mutation.field("book")
async def book(
    _parent: Any,
    info: GraphQLResolveInfo,
    place_id: str,
    check_in: str,
    check_out: str,
    num_guests: int,
) -> BookingResult:
    user = await resolve_current_user(info, BOOKEE_SELECTION)
    accounts = user.get("paymentAccount") or []
    if not accounts:
        raise BookingError("Add a payment method before booking")

    booking = await get_context(info).remote.call(
        "mutation",
        "createBooking",
        {
            "bookeeId": user["id"],
            "placeId": place_id,
            "startDate": check_in,
            "endDate": check_out,
            "numGuests": num_guests,
            "payment": {"paymentMethodId": accounts[0]["id"]},
        },
        "{ id payment { id } }",
    )

    success = bool(booking and booking.get("id") and booking.get("payment"))
    log = logger.info if success else logger.warning
    log(
        "Booking request completed",
        success=success,
        place_id=place_id,
        user_id=user["id"],
        booking_id=(booking or {}).get("id"),
    )
    return BookingResult(success=success)
