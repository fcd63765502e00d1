"""
Combine the remote backend's type definitions with the local schema.

Both sources are parsed and merged by name:

- the remote ``schema { ... }`` definition is dropped, and remote types that
  share a name with a local root operation type are replaced by the local root;
- definitions that are structurally identical (ignoring descriptions and
  member order) are kept once;
- any other name collision is a conflict, which is either rejected or, for
  types under the ``namespace`` policy, resolved by renaming the remote type.
"""

from __future__ import annotations

from copy import copy
from typing import Any, Literal

from graphql import (
    DirectiveDefinitionNode,
    DocumentNode,
    GraphQLSyntaxError,
    NamedTypeNode,
    NameNode,
    Node,
    OperationType,
    OperationTypeDefinitionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    TypeDefinitionNode,
    TypeExtensionNode,
    Visitor,
    parse,
    print_ast,
    visit,
)

from ..errors import SchemaCompositionError
from ..logging import get_logger

logger = get_logger(__name__)

ConflictPolicy = Literal["reject", "namespace"]

DEFAULT_ROOT_NAMES = {
    OperationType.QUERY: "Query",
    OperationType.MUTATION: "Mutation",
    OperationType.SUBSCRIPTION: "Subscription",
}

_MEMBER_KEYS = ("interfaces", "directives", "fields", "values", "types", "arguments", "locations")


class _StripDescriptions(Visitor):
    def enter(self, node: Any, *_args: Any) -> Any:
        if getattr(node, "description", None) is None:
            return None
        stripped = copy(node)
        stripped.description = None
        return stripped


class _RenameTypes(Visitor):
    """Rename type definitions and every reference to them."""

    def __init__(self, renames: dict[str, str]) -> None:
        super().__init__()
        self.renames = renames

    def enter_named_type(self, node: NamedTypeNode, *_args: Any) -> NamedTypeNode | None:
        new_name = self.renames.get(node.name.value)
        if new_name is None:
            return None
        return NamedTypeNode(name=NameNode(value=new_name))

    def leave(self, node: Any, *_args: Any) -> Any:
        if not isinstance(node, (TypeDefinitionNode, TypeExtensionNode)):
            return None
        new_name = self.renames.get(node.name.value)
        if new_name is None:
            return None
        renamed = copy(node)
        renamed.name = NameNode(value=new_name)
        return renamed


def _parse(type_defs: str, source: str) -> DocumentNode:
    try:
        return parse(type_defs, no_location=True)
    except GraphQLSyntaxError as e:
        raise SchemaCompositionError(f"Invalid {source} type definitions: {e.message}") from e


def _signature(node: Node) -> tuple:
    """Structural identity of a definition, ignoring descriptions and member order."""
    stripped = visit(node, _StripDescriptions())
    members = []
    for key in _MEMBER_KEYS:
        items = getattr(stripped, key, None) or ()
        members.append((key, tuple(sorted(print_ast(item) for item in items))))
    return (stripped.kind, getattr(stripped, "repeatable", None), tuple(members))


class _Source:
    """Definitions of one schema source, indexed by name."""

    def __init__(self, document: DocumentNode, label: str) -> None:
        self.label = label
        self.types: dict[str, TypeDefinitionNode] = {}
        self.directives: dict[str, DirectiveDefinitionNode] = {}
        self.extensions: list[TypeExtensionNode] = []
        self.schema: SchemaDefinitionNode | None = None
        self.schema_extensions: list[SchemaExtensionNode] = []

        for definition in document.definitions:
            if isinstance(definition, TypeDefinitionNode):
                self._add(self.types, definition, "type")
            elif isinstance(definition, DirectiveDefinitionNode):
                self._add(self.directives, definition, "directive")
            elif isinstance(definition, TypeExtensionNode):
                self.extensions.append(definition)
            elif isinstance(definition, SchemaDefinitionNode):
                if self.schema is not None:
                    raise SchemaCompositionError(f"Multiple schema definitions in {label} type definitions")
                self.schema = definition
            elif isinstance(definition, SchemaExtensionNode):
                self.schema_extensions.append(definition)
            else:
                raise SchemaCompositionError(
                    f"Unexpected {definition.kind} in {label} type definitions"
                )

    def _add(self, index: dict, definition: Any, what: str) -> None:
        name = definition.name.value
        if name in index:
            raise SchemaCompositionError(
                f"Duplicate {what} '{name}' in {self.label} type definitions", conflicts=[name]
            )
        index[name] = definition

    def root_names(self) -> dict[OperationType, str]:
        if self.schema is not None:
            return {
                operation_type.operation: operation_type.type.name.value
                for operation_type in self.schema.operation_types
            }
        return {
            operation: name for operation, name in DEFAULT_ROOT_NAMES.items() if name in self.types
        }


def compose_type_defs(
    remote_type_defs: str,
    local_type_defs: str,
    *,
    conflict_policy: ConflictPolicy = "namespace",
    namespace_prefix: str = "Remote",
) -> str:
    """Merge remote and local type definitions into one SDL document.

    Args:
        remote_type_defs: SDL fetched from the backend
        local_type_defs: SDL authored for the gateway
        conflict_policy: "reject" fails on conflicting definitions,
            "namespace" renames conflicting remote types with ``namespace_prefix``
        namespace_prefix: Prefix for renamed remote types

    Returns:
        The composed SDL

    Raises:
        SchemaCompositionError: On malformed input or unresolved conflicts
    """
    if conflict_policy not in ("reject", "namespace"):
        raise SchemaCompositionError(f"Unknown schema conflict policy '{conflict_policy}'")

    local = _Source(_parse(local_type_defs, "local"), "local")
    remote = _Source(_parse(remote_type_defs, "remote"), "remote")

    local_roots = local.root_names()
    if OperationType.QUERY not in local_roots:
        raise SchemaCompositionError("Local type definitions do not define a Query type")

    # Remote entry points are reached through delegation, never exposed directly
    replaced_roots = sorted(set(remote.root_names().values()) & set(local_roots.values()))
    for name in replaced_roots:
        remote.types.pop(name)
    remote.extensions = [ext for ext in remote.extensions if ext.name.value not in replaced_roots]

    duplicates: list[str] = []
    conflicts: list[str] = []
    for name, remote_definition in remote.types.items():
        if name not in local.types:
            continue
        if _signature(local.types[name]) == _signature(remote_definition):
            duplicates.append(name)
        else:
            conflicts.append(name)

    directive_conflicts = [
        f"@{name}"
        for name, remote_directive in remote.directives.items()
        if name in local.directives and _signature(local.directives[name]) != _signature(remote_directive)
    ]
    if directive_conflicts:
        raise SchemaCompositionError(
            f"Conflicting directive definitions: {', '.join(directive_conflicts)}",
            conflicts=directive_conflicts,
        )

    for name in duplicates:
        del remote.types[name]

    remote_definitions: list[Any] = [
        *(
            directive
            for name, directive in remote.directives.items()
            if name not in local.directives
        ),
        *remote.types.values(),
        *remote.extensions,
    ]

    if conflicts:
        if conflict_policy == "reject":
            logger.error("Schema composition conflicts", conflicts=conflicts)
            raise SchemaCompositionError(
                f"Conflicting type definitions between local and remote schema: {', '.join(conflicts)}",
                conflicts=conflicts,
            )

        renames = {name: f"{namespace_prefix}{name}" for name in conflicts}
        taken = set(local.types) | set(remote.types)
        clashes = sorted(new for new in renames.values() if new in taken)
        if clashes:
            raise SchemaCompositionError(
                f"Namespaced type names already in use: {', '.join(clashes)}", conflicts=clashes
            )
        renamer = _RenameTypes(renames)
        remote_definitions = [visit(definition, renamer) for definition in remote_definitions]
        logger.warning("Namespaced conflicting remote types", renames=renames)

    schema_definition = local.schema or SchemaDefinitionNode(
        directives=(),
        operation_types=tuple(
            OperationTypeDefinitionNode(
                operation=operation, type=NamedTypeNode(name=NameNode(value=name))
            )
            for operation, name in local_roots.items()
        ),
    )
    local_definitions = [
        *(d for d in local.directives.values()),
        *local.types.values(),
        *local.extensions,
        *local.schema_extensions,
    ]

    document = DocumentNode(definitions=(schema_definition, *local_definitions, *remote_definitions))
    composed = print_ast(document)

    logger.info(
        "Composed schema",
        local_types=len(local.types),
        remote_types=len(remote.types),
        merged_duplicates=duplicates,
        replaced_remote_roots=replaced_roots,
    )
    return composed
