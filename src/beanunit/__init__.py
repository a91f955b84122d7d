"""
beanunit: Contract verification for Python classes.

Checks that a class honours accessor round-trips, a consistent
``__eq__``/``__hash__`` pair, or immutable construction, without
per-type assertions written by hand.
"""

from beanunit.asserters.accessor import (
    assert_accessor,
    assert_accessors,
    assert_all_accessors,
)
from beanunit.asserters.bean import assert_bean, create_object
from beanunit.asserters.equality import assert_equals_hash_code
from beanunit.asserters.immutable import (
    assert_getters_on_constructor_immutable_object,
    assert_immutable_construction,
)
from beanunit.contracts.enums import ViolationKind
from beanunit.contracts.errors import (
    AmbiguousConstructorError,
    BeanunitError,
    ContractViolation,
    IntrospectionError,
    NotConstructibleError,
    UnresolvableTypeError,
)
from beanunit.core.construction import primary_constructor
from beanunit.core.registry import (
    TypeDefaultRegistry,
    get_default_registry,
    isolated_registry,
    register_type_and_default_argument,
    reset_to_default_types,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousConstructorError",
    "BeanunitError",
    "ContractViolation",
    "IntrospectionError",
    "NotConstructibleError",
    "TypeDefaultRegistry",
    "UnresolvableTypeError",
    "ViolationKind",
    "assert_accessor",
    "assert_accessors",
    "assert_all_accessors",
    "assert_bean",
    "assert_equals_hash_code",
    "assert_getters_on_constructor_immutable_object",
    "assert_immutable_construction",
    "create_object",
    "get_default_registry",
    "isolated_registry",
    "primary_constructor",
    "register_type_and_default_argument",
    "reset_to_default_types",
]
