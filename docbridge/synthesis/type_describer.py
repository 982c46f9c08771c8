"""
Type annotation to JSDoc type-expression description.

``describe_type`` maps a tree-sitter type (or initializer expression) node to
the string placed between the braces of a doc tag, e.g. ``number``,
``Array<string>`` or ``function(a: number)``. It is a pure function of the
node and the source it was parsed from.
"""

from typing import Callable, Dict, Optional

import tree_sitter

from docbridge.synthesis.parser import field_or_child, node_text, parameter_name, parameters

ANY_TYPE = "*"

_PREDEFINED = {
    "number": "number",
    "string": "string",
    "boolean": "boolean",
    "void": "undefined",
    "undefined": "undefined",
    "object": "Object",
    "any": ANY_TYPE,
}

_Handler = Callable[[tree_sitter.Node, bytes], Optional[str]]


def describe_type(
    node: Optional[tree_sitter.Node],
    source: bytes,
    fallback: Optional[str] = None
) -> str:
    """
    Describe a type annotation node as a JSDoc type expression.

    Args:
        node: Type node, ``type_annotation`` wrapper or initializer expression
        source: Source bytes the node was parsed from
        fallback: Result for unrecognized shapes; defaults to the node's
            verbatim source text

    Returns:
        Type description string; ``*`` when ``node`` is None
    """
    if node is None:
        return fallback if fallback is not None else ANY_TYPE

    handler = _HANDLERS.get(node.type)
    if handler is not None:
        described = handler(node, source)
        if described is not None:
            return described

    if node.type == "type_annotation":
        inner = node.named_children[0] if node.named_children else None
        return describe_type(inner, source, fallback)

    if fallback is not None:
        return fallback
    return node_text(node, source).strip()


def describe_type_parameters(node: Optional[tree_sitter.Node], source: bytes) -> str:
    """Render ``<A, B>`` for a type parameter/argument list, or '' if empty."""
    if node is None or not node.named_children:
        return ""
    described = [describe_type(child, source) for child in node.named_children]
    return "<" + ", ".join(described) + ">"


def _constant(value: str) -> _Handler:
    return lambda node, source: value


def _predefined(node: tree_sitter.Node, source: bytes) -> Optional[str]:
    return _PREDEFINED.get(node_text(node, source).strip())


def _verbatim(node: tree_sitter.Node, source: bytes) -> str:
    return node_text(node, source).strip()


def _generic(node: tree_sitter.Node, source: bytes) -> str:
    name = field_or_child(node, "name", ("type_identifier", "nested_type_identifier", "identifier"))
    arguments = field_or_child(node, "type_arguments", ("type_arguments",))
    base = node_text(name, source) if name is not None else ""
    return base + describe_type_parameters(arguments, source)


def _array(node: tree_sitter.Node, source: bytes) -> Optional[str]:
    if not node.named_children:
        return None
    return f"{describe_type(node.named_children[0], source)}[]"


def _union(node: tree_sitter.Node, source: bytes) -> str:
    return " | ".join(describe_type(member, source) for member in node.named_children)


def describe_callable(node: tree_sitter.Node, source: bytes) -> str:
    """Describe a function type or call signature as ``function(name: type, ...)``."""
    params = []
    for param in parameters(node):
        name = parameter_name(param, source) or _verbatim(param, source)
        annotation = field_or_child(param, "type", ("type_annotation",))
        params.append(f"{name}: {describe_type(annotation, source)}")
    return f"function({', '.join(params)})"


_HANDLERS: Dict[str, _Handler] = {
    # keywords
    "predefined_type": _predefined,
    # expression literals, seen when a property type comes from its initializer
    "number": _constant("number"),
    "string": _constant("string"),
    "template_string": _constant("string"),
    "true": _constant("boolean"),
    "false": _constant("boolean"),
    "undefined": _constant("undefined"),
    # boolean-producing forms
    "type_predicate": _constant("boolean"),
    "type_predicate_annotation": _constant("boolean"),
    # references
    "type_identifier": _verbatim,
    "identifier": _verbatim,
    "generic_type": _generic,
    "this_type": _constant("this"),
    "this": _constant("this"),
    # composites
    "literal_type": _verbatim,
    "array_type": _array,
    "union_type": _union,
    "function_type": describe_callable,
    # deliberately coarse: inner structure is not described
    "parenthesized_type": _constant("Object"),
}
