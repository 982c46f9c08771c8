"""Declaration kinds recognized by the selector."""

from enum import Enum


class DeclarationKind(str, Enum):
    """Kinds of documentable declarations."""

    CLASS = "class"
    METHOD = "method"
    GET_ACCESSOR = "get_accessor"
    SET_ACCESSOR = "set_accessor"
    CONSTRUCTOR = "constructor"
    FUNCTION = "function"
    PROPERTY = "property"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"


class AccessModifier(str, Enum):
    """Access levels emitted in ``@access`` tags."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
