"""Kinds of contract violation reported by the asserters."""

from enum import StrEnum


class ViolationKind(StrEnum):
    """Which behavioural rule a class broke.

    The value is the short name used in violation messages.
    """

    ACCESSOR = "accessor"
    EQUALITY = "equality"
    NOT_OVERRIDDEN = "not-overridden"
    MUTABLE_AFTER_CONSTRUCTION = "mutable-after-construction"
    UNVERIFIABLE_PROPERTY = "unverifiable-property"


class PropertyKind(StrEnum):
    """How a property is exposed on its class."""

    FIELD = "field"  # dataclass / pydantic field or annotated attribute
    PROPERTY = "property"  # builtin property descriptor
    METHOD = "method"  # get_x()/is_x() and set_x(value) pair
