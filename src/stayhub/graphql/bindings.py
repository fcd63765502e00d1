"""
Resolver binding for the SDL-first gateway schema.

Resolvers are ariadne bindables (``QueryType``, ``MutationType``,
``ObjectType``). Field arguments reach resolvers as snake_case keywords,
while response fields keep their GraphQL names so backend records, which
use the same camelCase keys, are read as they arrive.
"""

from __future__ import annotations

from ariadne import convert_camel_case_to_snake
from ariadne.types import SchemaBindable
from graphql import GraphQLSchema

from ..errors import ResolverBindingError
from ..logging import get_logger

logger = get_logger(__name__)


def snake_case_arguments(name: str, _schema: GraphQLSchema, path: tuple[str, ...]) -> str:
    """Name converter for ``make_executable_schema``.

    ``path`` is ``(type, field)`` for fields and ``(type, field, argument)``
    for arguments; only arguments are renamed.
    """
    if len(path) > 2:
        return convert_camel_case_to_snake(name)
    return name


class RequireRootResolvers(SchemaBindable):
    """Fail schema creation when a root field has no resolver.

    Root fields have no parent object to read from, so an unbound one would
    only ever resolve to null. Must be passed after every other bindable.
    """

    def bind_to_schema(self, schema: GraphQLSchema) -> None:
        for root in (schema.query_type, schema.mutation_type):
            if root is None:
                continue
            unbound = sorted(name for name, field in root.fields.items() if field.resolve is None)
            if unbound:
                raise ResolverBindingError(
                    f"Missing resolvers for {root.name} field(s): {', '.join(unbound)}"
                )
            logger.debug("Root resolvers bound", type=root.name, fields=len(root.fields))
