"""
Homepage queries. Ranking is done by the backend; each resolver asks for a
fixed popularity-ordered slice.
"""

from __future__ import annotations

from typing import Any

from ariadne import QueryType
from graphql import GraphQLResolveInfo

from ...remote import EnumLiteral
from .auth import get_context

HOMEPAGE_LIMIT = 10
POPULARITY_DESC = EnumLiteral("popularity_DESC")

# Homes are reshaped locally, so their selection is fixed rather than forwarded
HOME_SELECTION = "{ id name description reviews { stars } }"

query = QueryType()


def _ranked(**extra: Any) -> dict[str, Any]:
    return {**extra, "orderBy": POPULARITY_DESC, "first": HOMEPAGE_LIMIT}


@query.field("topExperiences")
async def resolve_top_experiences(_parent: Any, info: GraphQLResolveInfo) -> list[dict]:
    return await get_context(info).remote.delegate("query", "allExperiences", _ranked(), info) or []


@query.field("topHomes")
async def resolve_top_homes(_parent: Any, info: GraphQLResolveInfo) -> list[dict]:
    return await get_context(info).remote.call("query", "allPlaces", _ranked(), HOME_SELECTION) or []


@query.field("topReservations")
async def resolve_top_reservations(_parent: Any, info: GraphQLResolveInfo) -> list[dict]:
    return await get_context(info).remote.delegate("query", "allRestaurants", _ranked(), info) or []


@query.field("featuredDestinations")
async def resolve_featured_destinations(_parent: Any, info: GraphQLResolveInfo) -> list[dict]:
    args = _ranked(filter={"featured": True})
    return await get_context(info).remote.delegate("query", "allNeighbourhoods", args, info) or []
