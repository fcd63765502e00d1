"""
Gateway schema assembly: compose, persist, build with resolvers and validate
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ariadne import make_executable_schema
from ariadne.types import SchemaBindable
from graphql import GraphQLError, GraphQLSchema, get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema

from ..errors import ResolverBindingError, SchemaCompositionError
from ..logging import get_logger
from .bindings import RequireRootResolvers, snake_case_arguments
from .composer import ConflictPolicy, compose_type_defs
from .typedefs import load_local_type_defs

logger = get_logger(__name__)


@dataclass(frozen=True)
class GatewaySchema:
    """The composed SDL and the executable schema built from it."""

    type_defs: str
    schema: GraphQLSchema


def build_executable_schema(type_defs: str, bindables: Sequence[SchemaBindable]) -> GraphQLSchema:
    """Build the schema from SDL and attach the resolver bindables.

    Raises:
        SchemaCompositionError: If the SDL does not form a schema
        ResolverBindingError: If a bindable names an unknown type or field,
            or a root field is left without a resolver
    """
    try:
        return make_executable_schema(
            type_defs,
            *bindables,
            RequireRootResolvers(),
            convert_names_case=snake_case_arguments,
        )
    except (GraphQLError, TypeError) as e:
        raise SchemaCompositionError(f"Composed schema is invalid: {e}") from e
    except ValueError as e:
        # ariadne reports bindables that do not match the schema this way
        raise ResolverBindingError(str(e)) from e


def validate_schema(schema: GraphQLSchema) -> None:
    """Validate the composed schema at startup.

    Catches unresolved type references and invalid root types so the server
    fails fast instead of returning confusing field errors at runtime.

    Raises:
        SchemaCompositionError: If the schema is invalid
    """
    errors = gql_validate_schema(schema)
    if errors:
        error_messages = [str(e) for e in errors]
        logger.error("GraphQL schema validation failed", errors=error_messages)
        raise SchemaCompositionError(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

    result = graphql_sync(schema, get_introspection_query())
    if result.errors:
        error_messages = [str(e) for e in result.errors]
        logger.error("GraphQL introspection failed", errors=error_messages)
        raise SchemaCompositionError(f"GraphQL introspection failed: {'; '.join(error_messages)}")

    logger.info("GraphQL schema validation successful", types=len(schema.type_map))


def write_type_defs(type_defs: str, output_path: str | Path) -> Path:
    """Persist the composed SDL for tooling; the gateway never reads it back."""
    path = Path(output_path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(type_defs, encoding="utf-8")
    logger.info("Wrote composed schema", path=str(path))
    return path


def build_gateway_schema(
    remote_type_defs: str,
    *,
    bindables: Sequence[SchemaBindable] | None = None,
    conflict_policy: ConflictPolicy = "namespace",
    namespace_prefix: str = "Remote",
    output_path: str | Path | None = None,
    local_type_defs: str | None = None,
) -> GatewaySchema:
    """Compose the remote and local schemas into the executable gateway schema.

    Args:
        remote_type_defs: SDL fetched from the backend
        bindables: Resolver bindables (defaults to the gateway resolvers)
        conflict_policy: How to treat conflicting type definitions
        namespace_prefix: Prefix for renamed remote types
        output_path: Where to write the composed SDL, if anywhere
        local_type_defs: Override for the packaged local SDL

    Raises:
        SchemaCompositionError: If composition or validation fails
        ResolverBindingError: If the bindables do not match the schema
    """
    if bindables is None:
        from .resolvers import bindables as gateway_bindables

        bindables = gateway_bindables

    type_defs = compose_type_defs(
        remote_type_defs,
        local_type_defs if local_type_defs is not None else load_local_type_defs(),
        conflict_policy=conflict_policy,
        namespace_prefix=namespace_prefix,
    )

    if output_path:
        write_type_defs(type_defs, output_path)

    schema = build_executable_schema(type_defs, bindables)
    validate_schema(schema)

    return GatewaySchema(type_defs=type_defs, schema=schema)
