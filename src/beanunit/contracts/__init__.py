"""Shared types for the verification engine.

This package is a LEAF MODULE: it imports nothing from core/ or asserters/.
"""

from beanunit.contracts.enums import PropertyKind, ViolationKind
from beanunit.contracts.errors import (
    AmbiguousConstructorError,
    BeanunitError,
    ContractViolation,
    IntrospectionError,
    NotConstructibleError,
    UnresolvableTypeError,
)
from beanunit.contracts.properties import (
    ConstructorParameter,
    ConstructorSpec,
    ExclusionSet,
    PropertyDescriptor,
    TypeDefaultEntry,
)

__all__ = [
    "AmbiguousConstructorError",
    "BeanunitError",
    "ConstructorParameter",
    "ConstructorSpec",
    "ContractViolation",
    "ExclusionSet",
    "IntrospectionError",
    "NotConstructibleError",
    "PropertyDescriptor",
    "PropertyKind",
    "TypeDefaultEntry",
    "UnresolvableTypeError",
    "ViolationKind",
]
