"""
TypeScript parsing and syntax-tree helpers built on tree-sitter.

The grammar is chosen from the file extension: ``.ts`` uses the plain
TypeScript grammar, ``.tsx`` the TSX variant. All positions handed out by
this module are UTF-8 byte offsets into the parsed source.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import tree_sitter
import tree_sitter_typescript

logger = logging.getLogger(__name__)

TYPESCRIPT_EXTENSIONS = (".ts", ".tsx")

# Statements that wrap a declaration without being part of its name
_WRAPPER_TYPES = ("export_statement", "ambient_declaration")

_MODIFIER_TYPES = ("accessibility_modifier", "override_modifier", "readonly")

_languages: Dict[str, tree_sitter.Language] = {}


def _get_language(extension: str) -> tree_sitter.Language:
    """Load (once) the tree-sitter language for a file extension."""
    if extension not in _languages:
        if extension == ".tsx":
            capsule = tree_sitter_typescript.language_tsx()
        else:
            capsule = tree_sitter_typescript.language_typescript()
        _languages[extension] = tree_sitter.Language(capsule)
    return _languages[extension]


def is_typescript_file(file_path: str) -> bool:
    """Return True if the path has one of the recognized TypeScript extensions."""
    return Path(file_path).suffix in TYPESCRIPT_EXTENSIONS


def parse_source(file_path: str, source: bytes) -> tree_sitter.Tree:
    """
    Parse TypeScript source into a tree-sitter tree.

    Args:
        file_path: Path of the file, used to pick the grammar
        source: UTF-8 encoded source

    Returns:
        Parsed syntax tree

    Raises:
        ValueError: If the extension is not a TypeScript extension
    """
    extension = Path(file_path).suffix
    if extension not in TYPESCRIPT_EXTENSIONS:
        raise ValueError(f"Not a TypeScript file: {file_path}")

    parser = tree_sitter.Parser(_get_language(extension))
    tree = parser.parse(source)

    if tree.root_node.has_error:
        logger.warning(
            f"Syntax errors in {file_path}, annotating best-effort",
            extra={"file_path": file_path, "phase": "parse"}
        )

    return tree


def node_text(node: tree_sitter.Node, source: bytes) -> str:
    """Return the source text covered by a node."""
    return source[node.start_byte:node.end_byte].decode("utf8")


def child_of_type(node: tree_sitter.Node, types: Iterable[str]) -> Optional[tree_sitter.Node]:
    """Return the first direct child whose type is in ``types``."""
    types = tuple(types)
    for child in node.children:
        if child.type in types:
            return child
    return None


def field_or_child(
    node: tree_sitter.Node,
    field: str,
    types: Iterable[str]
) -> Optional[tree_sitter.Node]:
    """Look a child up by field name, falling back to its node type."""
    found = node.child_by_field_name(field)
    if found is not None:
        return found
    return child_of_type(node, types)


def is_doc_comment(node: Optional[tree_sitter.Node], source: bytes) -> bool:
    """Return True for a ``/** ... */`` block comment node."""
    if node is None or node.type != "comment":
        return False
    text = node_text(node, source)
    return text.startswith("/**") and not text.startswith("/**/")


def declaration_start(node: tree_sitter.Node) -> tree_sitter.Node:
    """
    Return the outermost node a declaration's leading comment attaches to.

    Wrapping ``export``/``declare`` statements are included, as are
    decorators that tree-sitter places as preceding siblings.
    """
    while node.parent is not None and node.parent.type in _WRAPPER_TYPES:
        node = node.parent

    previous = node.prev_sibling
    while previous is not None and previous.type == "decorator":
        node = previous
        previous = previous.prev_sibling

    return node


def leading_doc_comment(node: tree_sitter.Node, source: bytes) -> Optional[tree_sitter.Node]:
    """Return the doc comment directly preceding a declaration, if any."""
    previous = declaration_start(node).prev_sibling
    if is_doc_comment(previous, source):
        return previous
    return None


def insertion_point(node: tree_sitter.Node, source: bytes) -> Tuple[int, int]:
    """
    Compute where a synthesized comment for ``node`` goes.

    Returns:
        Tuple of (position, remove_length): the byte offset to insert at and
        the length of an existing doc comment starting there (0 if none)
    """
    comment = leading_doc_comment(node, source)
    if comment is not None:
        return comment.start_byte, comment.end_byte - comment.start_byte
    return declaration_start(node).start_byte, 0


def line_indent(source: bytes, position: int) -> str:
    """Return the whitespace between the start of the line and ``position``."""
    line_start = source.rfind(b"\n", 0, position) + 1
    prefix = source[line_start:position]
    if prefix.strip():
        return ""
    return prefix.decode("utf8")


def line_number(node: tree_sitter.Node) -> int:
    """Return the 1-indexed line a node starts on."""
    return node.start_point[0] + 1


def modifier_nodes(node: tree_sitter.Node) -> List[tree_sitter.Node]:
    """Return accessibility/override/readonly modifiers of a member or parameter."""
    return [child for child in node.children if child.type in _MODIFIER_TYPES]


def accessibility(node: tree_sitter.Node, source: bytes) -> Optional[str]:
    """Return 'public', 'protected' or 'private' if the node declares one."""
    modifier = child_of_type(node, ("accessibility_modifier",))
    if modifier is None:
        return None
    return node_text(modifier, source).strip()


def has_readonly(node: tree_sitter.Node) -> bool:
    """Return True if the node carries a ``readonly`` modifier."""
    return child_of_type(node, ("readonly",)) is not None


def parameters(node: tree_sitter.Node) -> List[tree_sitter.Node]:
    """Return the declared parameters of a callable or function type node."""
    params = field_or_child(node, "parameters", ("formal_parameters",))
    if params is None:
        return []
    return [
        child for child in params.named_children
        if child.type in ("required_parameter", "optional_parameter")
    ]


def parameter_name(param: tree_sitter.Node, source: bytes) -> Optional[str]:
    """
    Return the bound identifier of a parameter.

    ``...rest`` yields ``rest``; destructuring patterns have no single name
    and yield None.
    """
    pattern = field_or_child(
        param, "pattern", ("identifier", "rest_pattern", "this", "object_pattern", "array_pattern")
    )
    if pattern is None:
        return None
    if pattern.type in ("identifier", "this"):
        return node_text(pattern, source)
    if pattern.type == "rest_pattern":
        inner = child_of_type(pattern, ("identifier",))
        if inner is not None:
            return node_text(inner, source)
    return None


def type_annotation(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    """Return the ``: T`` annotation of a parameter, field or member."""
    return field_or_child(node, "type", ("type_annotation",))


def return_annotation(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    """Return the return-type annotation of a callable declaration."""
    return field_or_child(
        node,
        "return_type",
        ("type_annotation", "type_predicate_annotation", "asserts_annotation"),
    )
