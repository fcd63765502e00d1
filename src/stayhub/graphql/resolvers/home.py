"""Field resolvers for ``Home``, built from backend ``Place`` records."""

from __future__ import annotations

from typing import Any

from ariadne import ObjectType
from graphql import GraphQLResolveInfo

from .auth import get_context

home = ObjectType("Home")


def _stars(place: dict[str, Any]) -> list[int]:
    return [review["stars"] for review in place.get("reviews") or [] if review.get("stars") is not None]


@home.field("numRatings")
def resolve_num_ratings(place: dict[str, Any], _info: GraphQLResolveInfo) -> int:
    return len(_stars(place))


@home.field("avgRating")
def resolve_avg_rating(place: dict[str, Any], _info: GraphQLResolveInfo) -> float:
    stars = _stars(place)
    if not stars:
        return 0.0
    return sum(stars) / len(stars)


@home.field("pictures")
async def resolve_pictures(
    place: dict[str, Any], info: GraphQLResolveInfo, first: int | None = None
) -> list[dict]:
    """Pictures of the home; ``first`` is applied by the backend."""
    args: dict[str, Any] = {"filter": {"place": {"id": place["id"]}}}
    if first is not None:
        args["first"] = first
    return await get_context(info).remote.delegate("query", "allPictures", args, info) or []
