"""Packaged SDL for the gateway's own types."""

from importlib import resources

from ariadne import load_schema_from_path


def load_local_type_defs() -> str:
    """Return the locally authored type definitions.

    Raises:
        ariadne.exceptions.GraphQLFileSyntaxError: If the packaged SDL does not parse
    """
    with resources.as_file(resources.files(__name__).joinpath("local.graphql")) as path:
        return load_schema_from_path(path)
