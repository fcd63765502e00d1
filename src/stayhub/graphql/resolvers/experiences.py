"""``Query.experiencesByCity``: backend experiences grouped per requested city."""

from __future__ import annotations

from typing import Any

from ariadne import ObjectType, QueryType
from graphql import GraphQLResolveInfo

from .auth import get_context

query = QueryType()
experiences_by_city = ObjectType("ExperiencesByCity")


@query.field("experiencesByCity")
async def resolve_experiences_by_city(
    _parent: Any, info: GraphQLResolveInfo, cities: list[str]
) -> list[dict[str, Any]]:
    """Group experiences by city, in the order the cities were requested."""
    found = await get_context(info).remote.call(
        "query", "allCities", {"filter": {"name_in": cities}}, "{ id name }"
    )
    order = {name: position for position, name in enumerate(cities)}
    found = sorted(found or [], key=lambda city: order.get(city["name"], len(order)))
    return [{"city": city} for city in found]


@experiences_by_city.field("experiences")
async def resolve_city_experiences(group: dict[str, Any], info: GraphQLResolveInfo) -> list[dict]:
    city_filter = {"location": {"neighbourHood": {"city": {"id": group["city"]["id"]}}}}
    return await get_context(info).remote.delegate(
        "query", "allExperiences", {"filter": city_filter}, info
    ) or []
