"""
Declaration selection.

A depth-first walk over the syntax tree that finds documentable
declarations, asks the synthesizer for their tags and records everything the
rewriter needs in an ``EditLedger``:

- classes, methods, accessors, constructors and functions become comment
  targets at their own position;
- class properties are removed from the class body and re-emitted as
  documented ``this.<name> = undefined;`` assignments in the constructor;
- interfaces become a ``@typedef`` block appended at end of file;
- type aliases become a ``@typedef`` block prepended at start of file.
"""

from typing import List, Optional

import tree_sitter

from docbridge.models.declaration import DeclarationKind
from docbridge.models.doc_tag import PendingProperty
from docbridge.synthesis.doc_comment import build_doc_comment
from docbridge.synthesis.ledger import EditLedger
from docbridge.synthesis.parser import (
    child_of_type,
    declaration_start,
    field_or_child,
    insertion_point,
    line_indent,
    line_number,
    node_text,
)
from docbridge.synthesis.synthesizer import AnnotationSynthesizer
from docbridge.utils.logging import get_logger

logger = get_logger(__name__)

_CLASS_TYPES = ("class_declaration", "abstract_class_declaration", "class")

_FUNCTION_TYPES = ("function_declaration", "generator_function_declaration")

INDENT_UNIT = "  "


class ClassScope:
    """One frame of the class-scope stack."""

    def __init__(self, node: tree_sitter.Node):
        self.node = node
        self.pending: List[PendingProperty] = []


class DeclarationSelector:
    """Walks one file's syntax tree and fills an edit ledger."""

    def __init__(self, source: bytes, ledger: Optional[EditLedger] = None):
        """
        Initialize the selector.

        Args:
            source: UTF-8 source the tree was parsed from
            ledger: Ledger to fill; a new one is created if omitted
        """
        self._source = source
        self.ledger = ledger if ledger is not None else EditLedger()
        self._synthesizer = AnnotationSynthesizer(source, self.ledger)
        self._scopes: List[ClassScope] = []

    def select(self, root: tree_sitter.Node) -> EditLedger:
        """
        Walk the tree from ``root`` and return the filled ledger.

        Raises:
            MismatchError: If a declaration's @param tags do not match
            MalformedInputError: If a parameter property has no identifier
        """
        self._walk(root)
        return self.ledger

    def classify(self, node: tree_sitter.Node) -> Optional[DeclarationKind]:
        """Return the declaration kind of a node, or None if it is not selected."""
        node_type = node.type

        if node_type in ("class_declaration", "abstract_class_declaration"):
            return DeclarationKind.CLASS
        if node_type in _FUNCTION_TYPES:
            return DeclarationKind.FUNCTION
        if node_type == "interface_declaration":
            return DeclarationKind.INTERFACE
        if node_type == "type_alias_declaration":
            return DeclarationKind.TYPE_ALIAS

        if node_type == "public_field_definition":
            # private (#x), computed and quoted names cannot be re-emitted as this.<name>
            name = node.child_by_field_name("name")
            if name is not None and name.type == "property_identifier":
                return DeclarationKind.PROPERTY
            return None

        if node_type == "method_definition":
            name = node.child_by_field_name("name")
            if name is None:
                return None
            if name.type == "property_identifier" and node_text(name, self._source) == "constructor":
                return DeclarationKind.CONSTRUCTOR
            for child in node.children:
                if child.start_byte >= name.start_byte:
                    break
                if not child.is_named and child.type == "get":
                    return DeclarationKind.GET_ACCESSOR
                if not child.is_named and child.type == "set":
                    return DeclarationKind.SET_ACCESSOR
            return DeclarationKind.METHOD

        return None

    def _walk(self, node: tree_sitter.Node) -> None:
        if node.type == "ambient_declaration":
            # erased by the compiler, and may not contain implementations
            return

        kind = self.classify(node)

        if kind is DeclarationKind.PROPERTY:
            self._select_property(node)
            return
        if kind is DeclarationKind.INTERFACE:
            self._select_typedef(node, kind, at_end=True)
            return
        if kind is DeclarationKind.TYPE_ALIAS:
            self._select_typedef(node, kind, at_end=False)
            return

        opens_scope = node.type in _CLASS_TYPES
        if opens_scope:
            self._scopes.append(ClassScope(node))

        if kind is not None:
            self._select_target(node, kind)

        for child in node.children:
            self._walk(child)

        if opens_scope:
            self._flush(self._scopes.pop())

    def _pending(self) -> Optional[List[PendingProperty]]:
        return self._scopes[-1].pending if self._scopes else None

    def _select_target(self, node: tree_sitter.Node, kind: DeclarationKind) -> None:
        tags = self._synthesizer.synthesize(kind, node, self._pending())
        position, remove_length = insertion_point(node, self._source)
        self.ledger.add_target(
            kind=kind,
            position=position,
            remove_length=remove_length,
            indent=line_indent(self._source, position),
            line_number=line_number(node),
            tags=tags,
        )

    def _select_property(self, node: tree_sitter.Node) -> None:
        tags = self._synthesizer.synthesize(DeclarationKind.PROPERTY, node)
        name = node_text(node.child_by_field_name("name"), self._source)
        self._scopes[-1].pending.append(PendingProperty(name=name, tags=tags))

        start, _ = insertion_point(node, self._source)
        end = node.end_byte
        following = node.next_sibling
        if following is not None and following.type == ";":
            end = following.end_byte

        # drop whole lines when the property owns them
        indent = line_indent(self._source, start).encode("utf8")
        line_end = self._source.find(b"\n", end)
        owns_line = (
            line_end != -1
            and not self._source[end:line_end].strip()
            and (self._source[:start].endswith(b"\n" + indent) or start == len(indent))
        )
        if owns_line:
            start -= len(indent)
            end = line_end + 1
        else:
            start = self._skip_blanks_back(start)

        self.ledger.delete(start, end)

    def _skip_blanks_back(self, position: int) -> int:
        """Move ``position`` back over spaces and tabs on the same line."""
        while position > 0 and self._source[position - 1:position] in (b" ", b"\t"):
            position -= 1
        return position

    def _select_typedef(self, node: tree_sitter.Node, kind: DeclarationKind, at_end: bool) -> None:
        tags = self._synthesizer.synthesize(kind, node)
        block = f"\n{build_doc_comment(tags)}\n"
        self.ledger.insert(len(self._source) if at_end else 0, block)

    def _flush(self, scope: ClassScope) -> None:
        """Materialize a class's pending properties as constructor assignments."""
        if not scope.pending:
            return

        body = field_or_child(scope.node, "body", ("class_body",))
        if body is None:
            return

        class_indent = line_indent(self._source, declaration_start(scope.node).start_byte)
        member_indent = class_indent + INDENT_UNIT

        constructor = self._find_constructor(body)
        if constructor is not None:
            self._extend_constructor(constructor, scope.pending)
        else:
            self._synthesize_constructor(scope.node, body, scope.pending, class_indent, member_indent)

        logger.debug(
            f"Flushed {len(scope.pending)} properties into constructor",
            extra={"phase": "select", "line": line_number(scope.node)}
        )

    def _find_constructor(self, body: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        for member in body.named_children:
            if (
                self.classify(member) is DeclarationKind.CONSTRUCTOR
                and member.child_by_field_name("body") is not None
            ):
                return member
        return None

    @staticmethod
    def _assignments(pending: List[PendingProperty], indent: str) -> str:
        statements = [
            f"{build_doc_comment(prop.tags, indent)}\n{indent}this.{prop.name} = undefined;"
            for prop in pending
        ]
        return ("\n" + indent).join(statements)

    def _extend_constructor(self, constructor: tree_sitter.Node, pending: List[PendingProperty]) -> None:
        body = constructor.child_by_field_name("body")
        constructor_indent = line_indent(self._source, declaration_start(constructor).start_byte)
        indent = constructor_indent + INDENT_UNIT
        assignments = f"\n{indent}{self._assignments(pending, indent)}"

        inner_start, inner_end = body.start_byte + 1, body.end_byte - 1
        inner = self._source[inner_start:inner_end]
        if not body.named_children and b"\n" not in inner:
            # `{}` or `{ }`: the closing brace moves to its own line
            self.ledger.replace(inner_start, len(inner), f"{assignments}\n{constructor_indent}")
            return

        position = inner_start
        statements = [child for child in body.named_children if child.type != "comment"]
        if statements and self._is_super_call(statements[0]):
            position = statements[0].end_byte

        self.ledger.insert(position, assignments)

    def _is_super_call(self, statement: tree_sitter.Node) -> bool:
        if statement.type != "expression_statement" or not statement.named_children:
            return False
        call = statement.named_children[0]
        if call.type != "call_expression":
            return False
        function = call.child_by_field_name("function")
        return function is not None and function.type == "super"

    def _synthesize_constructor(
        self,
        class_node: tree_sitter.Node,
        body: tree_sitter.Node,
        pending: List[PendingProperty],
        class_indent: str,
        member_indent: str
    ) -> None:
        statement_indent = member_indent + INDENT_UNIT
        lines = [f"{member_indent}constructor() {{"]
        if self._has_superclass(class_node):
            lines.append(f"{statement_indent}super(...arguments);")
        lines.append(f"{statement_indent}{self._assignments(pending, statement_indent)}")
        lines.append(f"{member_indent}}}")
        constructor = "\n".join(lines) + "\n"

        closing = body.end_byte - 1
        closing_indent = line_indent(self._source, closing).encode("utf8")
        if self._source[:closing].endswith(b"\n" + closing_indent):
            self.ledger.insert(closing - len(closing_indent), constructor)
        else:
            # brace shares a line with code: drop the blanks before it too
            blanks_start = self._skip_blanks_back(closing)
            self.ledger.replace(blanks_start, closing - blanks_start, f"\n{constructor}{class_indent}")

    @staticmethod
    def _has_superclass(class_node: tree_sitter.Node) -> bool:
        heritage = child_of_type(class_node, ("class_heritage",))
        return heritage is not None and child_of_type(heritage, ("extends_clause",)) is not None
