"""
Per-declaration doc-tag synthesis.

Each declaration kind has one handler. A handler starts from the tags of the
declaration's existing doc comment (plus a ``lineNumber`` tag) and merges in
what the type annotations say, never overwriting a type the author already
wrote by hand.
"""

import logging
from typing import Callable, Dict, List, Optional

import tree_sitter

from docbridge.models.declaration import AccessModifier, DeclarationKind
from docbridge.models.doc_tag import DocTag, PendingProperty
from docbridge.models.error import MalformedInputError, MismatchError
from docbridge.synthesis.doc_comment import description_text, parse_doc_comment
from docbridge.synthesis.ledger import EditLedger
from docbridge.synthesis.parser import (
    accessibility,
    field_or_child,
    has_readonly,
    leading_doc_comment,
    line_number,
    modifier_nodes,
    node_text,
    parameter_name,
    parameters,
    return_annotation,
    type_annotation,
)
from docbridge.synthesis.type_describer import (
    ANY_TYPE,
    describe_type,
    describe_type_parameters,
)

logger = logging.getLogger(__name__)

_Handler = Callable[[tree_sitter.Node, List[DocTag], List[PendingProperty]], None]

_RETURN_TAGS = ("return", "returns")


def _typed(type_description: str, text: str = "") -> str:
    return f"{{{type_description}}} {text}".rstrip()


class AnnotationSynthesizer:
    """Builds doc-tag lists for the declarations of one source file."""

    def __init__(self, source: bytes, ledger: EditLedger):
        """
        Initialize the synthesizer.

        Args:
            source: UTF-8 source the syntax tree was parsed from
            ledger: Ledger receiving modifier-stripping edits

        Raises:
            RuntimeError: If a declaration kind has no handler
        """
        self._source = source
        self._ledger = ledger
        self._handlers: Dict[DeclarationKind, _Handler] = {
            DeclarationKind.CLASS: self._synthesize_class,
            DeclarationKind.METHOD: self._synthesize_method,
            DeclarationKind.CONSTRUCTOR: self._synthesize_constructor,
            DeclarationKind.GET_ACCESSOR: self._synthesize_getter,
            DeclarationKind.SET_ACCESSOR: self._synthesize_setter,
            DeclarationKind.FUNCTION: self._synthesize_function,
            DeclarationKind.PROPERTY: self._synthesize_property,
            DeclarationKind.INTERFACE: self._synthesize_interface,
            DeclarationKind.TYPE_ALIAS: self._synthesize_type_alias,
        }

        missing = set(DeclarationKind) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No synthesis handler for: {sorted(k.value for k in missing)}")

    def synthesize(
        self,
        kind: DeclarationKind,
        node: tree_sitter.Node,
        pending: Optional[List[PendingProperty]] = None
    ) -> List[DocTag]:
        """
        Build the tag list for a declaration.

        Args:
            kind: Declaration kind of ``node``
            node: Declaration node
            pending: Pending-property list of the enclosing class, receiving
                promoted constructor parameters

        Returns:
            Ordered tag list

        Raises:
            MismatchError: If documented and declared parameters disagree
            MalformedInputError: If a parameter property has no identifier
        """
        tags = self.existing_tags(node)
        self._handlers[kind](node, tags, pending if pending is not None else [])
        return tags

    def existing_tags(self, node: tree_sitter.Node) -> List[DocTag]:
        """Return the tags of the node's doc comment followed by its line number."""
        comment = leading_doc_comment(node, self._source)
        tags = parse_doc_comment(node_text(comment, self._source) if comment else None)
        tags.append(DocTag(name="lineNumber", value=str(line_number(node))))
        return tags

    def _text(self, node: tree_sitter.Node) -> str:
        return node_text(node, self._source)

    def _describe(self, node: Optional[tree_sitter.Node], fallback: Optional[str] = None) -> str:
        return describe_type(node, self._source, fallback)

    # -- handlers ---------------------------------------------------------

    def _synthesize_class(self, node, tags, pending):
        pass

    def _synthesize_method(self, node, tags, pending):
        self._apply_access(node, tags)
        self._apply_params(node, tags)
        self._apply_return(node, tags)

    def _synthesize_constructor(self, node, tags, pending):
        self._apply_access(node, tags)
        self._apply_params(node, tags, promote_to=pending)

    def _synthesize_function(self, node, tags, pending):
        self._apply_params(node, tags)
        self._apply_return(node, tags)

    def _synthesize_getter(self, node, tags, pending):
        annotation = return_annotation(node)
        if annotation is None:
            return
        self._merge_type_tag(tags, self._describe(annotation), keep_text=False)

    def _synthesize_setter(self, node, tags, pending):
        params = parameters(node)
        if not params:
            return
        annotation = type_annotation(params[0])
        if annotation is None:
            return
        if any(tag.name == "type" for tag in tags):
            return
        tags.append(DocTag(name="type", value=_typed(self._describe(annotation))))

    def _synthesize_property(self, node, tags, pending):
        self._apply_access(node, tags)

        type_description = ANY_TYPE
        annotation = type_annotation(node)
        if annotation is not None:
            type_description = self._describe(annotation, ANY_TYPE)
        initializer = node.child_by_field_name("value")
        if initializer is not None and type_description == ANY_TYPE:
            type_description = self._describe(initializer, ANY_TYPE)

        self._merge_type_tag(tags, type_description, keep_text=True)

        if has_readonly(node) and not any(tag.name == "readonly" for tag in tags):
            tags.append(DocTag(name="readonly"))

    def _synthesize_interface(self, node, tags, pending):
        name = self._declared_name(node)
        tags.append(DocTag(name="typedef", value=_typed("Object", name)))

        body = field_or_child(node, "body", ("interface_body", "object_type"))
        if body is None:
            return

        for member in body.named_children:
            if member.type == "property_signature":
                type_description = self._describe(type_annotation(member))
            elif member.type == "method_signature":
                # a method member is documented by what it returns
                type_description = self._describe(return_annotation(member))
            else:
                continue

            member_name = member.child_by_field_name("name")
            if member_name is None:
                continue

            value = _typed(type_description, self._text(member_name))
            comment = leading_doc_comment(member, self._source)
            if comment is not None:
                description = description_text(parse_doc_comment(self._text(comment)))
                if description:
                    value = f"{value} {description}"
            tags.append(DocTag(name="property", value=value))

    def _synthesize_type_alias(self, node, tags, pending):
        value = node.child_by_field_name("value")
        if value is None:
            named = [
                child for child in node.named_children
                if child.type not in ("type_identifier", "type_parameters", "comment")
            ]
            value = named[-1] if named else None
        tags.append(
            DocTag(name="typedef", value=_typed(self._describe(value), self._declared_name(node)))
        )

    # -- merging ----------------------------------------------------------

    def _declared_name(self, node: tree_sitter.Node) -> str:
        name = node.child_by_field_name("name")
        type_parameters = field_or_child(node, "type_parameters", ("type_parameters",))
        base = self._text(name) if name is not None else ""
        return base + describe_type_parameters(type_parameters, self._source)

    def _access_level(self, node: tree_sitter.Node) -> str:
        name = node.child_by_field_name("name")
        if name is not None and name.type == "private_property_identifier":
            return AccessModifier.PRIVATE.value
        return accessibility(node, self._source) or AccessModifier.PUBLIC.value

    def _apply_access(self, node: tree_sitter.Node, tags: List[DocTag]) -> None:
        if any(tag.name == "access" for tag in tags):
            return
        tags.append(DocTag(name="access", value=self._access_level(node)))

    def _merge_type_tag(self, tags: List[DocTag], type_description: str, keep_text: bool) -> None:
        existing = next((tag for tag in tags if tag.name == "type"), None)
        if existing is None:
            tags.append(DocTag(name="type", value=_typed(type_description)))
        elif not existing.has_explicit_type():
            text = existing.value if keep_text else ""
            existing.value = _typed(type_description, text)

    def _apply_params(
        self,
        node: tree_sitter.Node,
        tags: List[DocTag],
        promote_to: Optional[List[PendingProperty]] = None
    ) -> None:
        declared = []
        for param in parameters(node):
            name = parameter_name(param, self._source)
            if name == "this":
                continue

            type_description = self._describe(type_annotation(param))
            if promote_to is not None and (accessibility(param, self._source) or has_readonly(param)):
                promote_to.append(self._promote_parameter(param, name, type_description))

            if name is None:
                pattern = param.child_by_field_name("pattern")
                name = self._text(pattern if pattern is not None else param)
            declared.append((type_description, name))

        param_tags = [tag for tag in tags if tag.name == "param"]

        if not param_tags:
            tags.extend(
                DocTag(name="param", value=_typed(type_description, name))
                for type_description, name in declared
            )
            return

        if len(param_tags) == len(declared):
            for tag, (type_description, _) in zip(param_tags, declared):
                if not tag.has_explicit_type():
                    tag.value = _typed(type_description, tag.value)
            return

        raise MismatchError(len(declared), len(param_tags), line_number(node))

    def _promote_parameter(
        self,
        param: tree_sitter.Node,
        name: Optional[str],
        type_description: str
    ) -> PendingProperty:
        """Turn a constructor parameter property into a pending class property."""
        if name is None:
            raise MalformedInputError(
                f"Parameter property without an identifier at line {line_number(param)}: "
                f"{self._text(param)!r}"
            )

        prop_tags = [
            DocTag(name="access", value=accessibility(param, self._source) or AccessModifier.PUBLIC.value),
            DocTag(name="type", value=_typed(type_description)),
        ]
        if has_readonly(param):
            prop_tags.append(DocTag(name="readonly"))

        modifiers = modifier_nodes(param)
        pattern = field_or_child(param, "pattern", ("identifier", "rest_pattern"))
        self._ledger.delete(min(m.start_byte for m in modifiers), pattern.start_byte)

        logger.debug(f"Promoted constructor parameter '{name}' to a class property")
        return PendingProperty(name=name, tags=prop_tags)

    def _apply_return(self, node: tree_sitter.Node, tags: List[DocTag]) -> None:
        annotation = return_annotation(node)
        if annotation is None:
            return

        type_description = self._describe(annotation)
        existing = next((tag for tag in tags if tag.name in _RETURN_TAGS), None)
        if existing is not None and not existing.has_explicit_type():
            existing.value = _typed(type_description, existing.value)
        else:
            tags.append(DocTag(name="return", value=_typed(type_description)))
