"""GraphQL schema, resolvers and HTTP endpoint."""
