"""
Build operations sent to the remote backend.

Operations are assembled as graphql-core AST nodes and printed once, so
argument values are always rendered as proper GraphQL literals and the
caller's selection set is forwarded node-for-node.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from copy import copy
from dataclasses import dataclass, field
from typing import Any

from graphql import (
    REMOVE,
    ArgumentNode,
    BooleanValueNode,
    DocumentNode,
    EnumValueNode,
    FieldNode,
    FloatValueNode,
    FragmentDefinitionNode,
    GraphQLNamedType,
    GraphQLResolveInfo,
    GraphQLSchema,
    IntValueNode,
    ListValueNode,
    NameNode,
    NullValueNode,
    ObjectFieldNode,
    ObjectValueNode,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
    StringValueNode,
    TypeInfo,
    TypeInfoVisitor,
    ValueNode,
    VariableDefinitionNode,
    Visitor,
    get_named_type,
    parse,
    visit,
)


class EnumLiteral(str):
    """A string argument rendered as a GraphQL enum value, e.g. ``popularity_DESC``."""

    __slots__ = ()


def value_to_ast(value: Any) -> ValueNode:
    """Convert a Python argument value into a GraphQL literal node."""
    if value is None:
        return NullValueNode()
    if isinstance(value, EnumLiteral):
        return EnumValueNode(value=str(value))
    if isinstance(value, bool):
        return BooleanValueNode(value=value)
    if isinstance(value, int):
        return IntValueNode(value=str(value))
    if isinstance(value, float):
        return FloatValueNode(value=repr(value))
    if isinstance(value, str):
        return StringValueNode(value=value, block=False)
    if isinstance(value, Mapping):
        return ObjectValueNode(
            fields=tuple(
                ObjectFieldNode(name=NameNode(value=str(key)), value=value_to_ast(item))
                for key, item in value.items()
            )
        )
    if isinstance(value, (list, tuple)):
        return ListValueNode(values=tuple(value_to_ast(item) for item in value))
    raise TypeError(f"Cannot express {type(value).__name__} as a GraphQL literal")


def arguments_to_ast(args: Mapping[str, Any]) -> tuple[ArgumentNode, ...]:
    return tuple(
        ArgumentNode(name=NameNode(value=name), value=value_to_ast(value))
        for name, value in args.items()
    )


def parse_selection(text: str) -> SelectionSetNode:
    """Parse a selection set written as ``{ id name }``."""
    definition = parse(text, no_location=True).definitions[0]
    if not isinstance(definition, OperationDefinitionNode):
        raise ValueError(f"Not a selection set: {text!r}")
    return definition.selection_set


def build_operation(
    operation: str,
    field_name: str,
    args: Mapping[str, Any] | None = None,
    selection_set: SelectionSetNode | None = None,
    *,
    variable_definitions: Sequence[VariableDefinitionNode] = (),
    fragments: Sequence[FragmentDefinitionNode] = (),
) -> DocumentNode:
    """Assemble a document selecting a single remote root field."""
    root_field = FieldNode(
        name=NameNode(value=field_name),
        arguments=arguments_to_ast(args or {}),
        directives=(),
        selection_set=selection_set,
    )
    definition = OperationDefinitionNode(
        operation=OperationType(operation),
        variable_definitions=tuple(variable_definitions),
        directives=(),
        selection_set=SelectionSetNode(selections=(root_field,)),
    )
    return DocumentNode(definitions=(definition, *fragments))


class _StripAliases(Visitor):
    """Remove aliases so the response keys match the field names resolved locally."""

    def enter_field(self, node: FieldNode, *_args: Any) -> FieldNode | None:
        if node.alias is None:
            return None
        stripped = copy(node)
        stripped.alias = None
        return stripped


TYPENAME_SELECTION = SelectionSetNode(
    selections=(FieldNode(name=NameNode(value="__typename"), arguments=(), directives=()),)
)


class _ExcludeFields(Visitor):
    """Drop named fields wherever they are selected on one type.

    Inline fragments and nested selections are covered; a selection set left
    empty asks for ``__typename`` so the document stays valid.
    """

    def __init__(self, type_info: TypeInfo, type_name: str, names: set[str]) -> None:
        super().__init__()
        self.type_info = type_info
        self.type_name = type_name
        self.names = names

    def enter_field(self, node: FieldNode, *_args: Any) -> Any:
        parent = self.type_info.get_parent_type()
        if parent is not None and parent.name == self.type_name and node.name.value in self.names:
            return REMOVE
        return None

    def leave_selection_set(self, node: SelectionSetNode, *_args: Any) -> SelectionSetNode | None:
        return None if node.selections else TYPENAME_SELECTION


def _exclude_fields(
    node: Any, schema: GraphQLSchema, parent_type: GraphQLNamedType | None, names: set[str]
) -> Any:
    if not names or parent_type is None:
        return node
    type_info = TypeInfo(schema, parent_type)
    return visit(node, TypeInfoVisitor(type_info, _ExcludeFields(type_info, parent_type.name, names)))


class _UsageCollector(Visitor):
    """Collect variable and fragment names referenced by a selection."""

    def __init__(self) -> None:
        super().__init__()
        self.variables: set[str] = set()
        self.fragments: set[str] = set()

    def enter_variable(self, node: Any, *_args: Any) -> None:
        self.variables.add(node.name.value)

    def enter_fragment_spread(self, node: Any, *_args: Any) -> None:
        self.fragments.add(node.name.value)


@dataclass
class ForwardedSelection:
    """The part of the incoming request that is sent on to the remote backend."""

    selection_set: SelectionSetNode | None
    variable_definitions: list[VariableDefinitionNode] = field(default_factory=list)
    fragments: list[FragmentDefinitionNode] = field(default_factory=list)
    variables: dict[str, Any] = field(default_factory=dict)


def forward_selection(
    info: GraphQLResolveInfo,
    exclude: Iterable[str] = (),
    nested: Sequence[str] = (),
) -> ForwardedSelection:
    """Extract the selection of the field being resolved.

    Args:
        info: Resolve info of the local field
        exclude: Fields of the field's own type the remote backend does not
            know about; dropped at any depth, including inside fragments
        nested: Remote field names to wrap the selection in, outermost first
    """
    excluded = set(exclude)
    field_type = get_named_type(info.return_type)
    selections = [
        selection
        for node in info.field_nodes
        if node.selection_set is not None
        for selection in node.selection_set.selections
    ]

    selection_set = None
    if selections:
        selection_set = visit(SelectionSetNode(selections=tuple(selections)), _StripAliases())
        selection_set = _exclude_fields(selection_set, info.schema, field_type, excluded)

    # Pull in fragment definitions transitively
    fragments: dict[str, FragmentDefinitionNode] = {}
    variables: set[str] = set()
    pending = [selection_set] if selection_set is not None else []
    while pending:
        collector = _UsageCollector()
        visit(pending.pop(), collector)
        variables |= collector.variables
        for name in sorted(collector.fragments):
            if name in fragments or name not in info.fragments:
                continue
            fragment = visit(info.fragments[name], _StripAliases())
            fragment = _exclude_fields(fragment, info.schema, field_type, excluded)
            fragments[name] = fragment
            pending.append(fragment)

    variable_definitions = [
        definition
        for definition in (info.operation.variable_definitions or ())
        if definition.variable.name.value in variables
    ]
    values = {
        name: info.variable_values[name] for name in sorted(variables) if name in info.variable_values
    }

    for name in reversed(nested):
        selection_set = SelectionSetNode(
            selections=(
                FieldNode(
                    name=NameNode(value=name),
                    arguments=(),
                    directives=(),
                    selection_set=selection_set,
                ),
            )
        )

    return ForwardedSelection(
        selection_set=selection_set,
        variable_definitions=variable_definitions,
        fragments=list(fragments.values()),
        variables=values,
    )
