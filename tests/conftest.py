"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any

import pytest
from graphql import ExecutionResult, GraphQLSchema, graphql, print_ast

from stayhub.graphql.context import RequestContext
from stayhub.graphql.schema import build_gateway_schema
from stayhub.remote.delegation import forward_selection

# What the hosted backend exposes; shares CURRENCY and DateTime with the local schema
REMOTE_TYPE_DEFS = """
type Query {
  allRestaurants: [Restaurant!]!
  user: AuthUser
}

type Mutation {
  signupUser(email: String!, password: String!): AuthPayload
}

type Restaurant {
  id: ID!
  title: String!
  currency: CURRENCY
}

type AuthPayload {
  id: ID!
  token: String!
}

type AuthUser {
  id: ID!
  createdAt: DateTime
}

enum CURRENCY {
  USD
  EUR
  CAD
  CHF
  JPY
  ZAR
}

"Date and time in ISO 8601"
scalar DateTime
"""


@dataclass
class RemoteCall:
    operation: str
    field_name: str
    args: dict[str, Any]
    selection: str | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    fragments: list[str] = field(default_factory=list)


class FakeRemote:
    """Stands in for RemoteSchemaClient inside resolvers.

    Responses are keyed by remote root field; an exception instance is raised,
    a callable is invoked with the call's arguments.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[RemoteCall] = []
        self.closed = False

    def _respond(self, field_name: str, args: dict[str, Any]) -> Any:
        response = self.responses.get(field_name)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(args)
        return response

    async def call(self, operation, field_name, args=None, selection=None):
        self.calls.append(RemoteCall(operation, field_name, dict(args or {}), selection))
        return self._respond(field_name, dict(args or {}))

    async def delegate(self, operation, field_name, args, info, *, exclude=(), nested=()):
        forwarded = forward_selection(info, exclude=exclude, nested=nested)
        selection = print_ast(forwarded.selection_set) if forwarded.selection_set else None
        self.calls.append(
            RemoteCall(
                operation,
                field_name,
                dict(args or {}),
                selection,
                forwarded.variables,
                [print_ast(fragment) for fragment in forwarded.fragments],
            )
        )
        return self._respond(field_name, dict(args or {}))

    def calls_to(self, field_name: str) -> list[RemoteCall]:
        return [call for call in self.calls if call.field_name == field_name]

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def remote_type_defs() -> str:
    return REMOTE_TYPE_DEFS


@pytest.fixture(scope="session")
def gateway_schema() -> GraphQLSchema:
    """Gateway schema composed against the sample remote schema."""
    return build_gateway_schema(REMOTE_TYPE_DEFS).schema


@pytest.fixture
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def run_query(gateway_schema: GraphQLSchema):
    """Execute a document against the gateway schema with a fake remote."""

    async def run(
        query: str,
        remote: FakeRemote,
        token: str | None = None,
        variables: dict[str, Any] | None = None,
    ) -> ExecutionResult:
        context = RequestContext(request=None, remote=remote, auth_token=token)  # type: ignore[arg-type]
        return await graphql(gateway_schema, query, context_value=context, variable_values=variables)

    return run


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
