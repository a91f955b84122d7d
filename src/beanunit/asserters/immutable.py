"""ImmutableConstructionAsserter: state comes in through the constructor only.

The class is built through its designated constructor with a registry
default per parameter. Afterwards:
1. no property may be writable, and
2. every readable property must return exactly the argument of the
   same-named constructor parameter.

A readable property with no matching parameter cannot be verified this
way (a derived value, say) and must be excluded explicitly.
"""

from __future__ import annotations

from typing import Any

from beanunit.asserters.violations import violation
from beanunit.contracts.enums import ViolationKind
from beanunit.contracts.errors import BeanunitError, type_name
from beanunit.contracts.properties import ExclusionSet
from beanunit.core.config import BeanunitSettings
from beanunit.core.construction import construct
from beanunit.core.introspection import PropertyIntrospector
from beanunit.core.logging import get_logger
from beanunit.core.registry import TypeDefaultRegistry, resolve_registry
from beanunit.core.type_semantics import has_value_semantics, same_value

logger = get_logger(__name__)


def assert_immutable_construction(
    cls: type,
    *excluded: str,
    registry: TypeDefaultRegistry | None = None,
    settings: BeanunitSettings | None = None,
) -> None:
    """Check that cls is read-only after construction and echoes its arguments.

    Args:
        cls: Class under test
        *excluded: Property names to skip (e.g. derived, read-only values)
        registry: Default-value registry (default: the process-wide one)
        settings: Engine settings (default: process-wide settings)

    Raises:
        AmbiguousConstructorError: If several constructors qualify and none is primary
        NotConstructibleError: If the designated constructor raises
        UnresolvableTypeError: If a parameter type has no default value
        ContractViolation: MUTABLE_AFTER_CONSTRUCTION, ACCESSOR or UNVERIFIABLE_PROPERTY
    """
    exclusions = ExclusionSet.of(excluded)
    instance, arguments = construct(cls, resolve_registry(registry))
    descriptors = [
        d for d in PropertyIntrospector(settings).describe(cls) if d.name not in exclusions
    ]

    for descriptor in descriptors:
        if descriptor.writable:
            raise violation(
                ViolationKind.MUTABLE_AFTER_CONSTRUCTION,
                cls,
                f"{descriptor.name} can be written after construction ({descriptor.kind.value})",
                property_name=descriptor.name,
            )

    for descriptor in descriptors:
        if not descriptor.readable:
            continue
        if descriptor.name not in arguments:
            raise violation(
                ViolationKind.UNVERIFIABLE_PROPERTY,
                cls,
                f"{descriptor.name} has no constructor parameter of the same name; exclude it to skip it",
                property_name=descriptor.name,
            )
        expected = arguments[descriptor.name]
        actual = _read(cls, descriptor, instance)
        if not same_value(descriptor.declared_type, expected, actual):
            comparison = "an equal value" if has_value_semantics(descriptor.declared_type) else "the same object"
            raise violation(
                ViolationKind.ACCESSOR,
                cls,
                f"constructed with {expected!r}, expected {comparison} back but got {actual!r}",
                property_name=descriptor.name,
            )
        logger.debug("constructor_property_verified", type=type_name(cls), property=descriptor.name)


def _read(cls: type, descriptor: Any, instance: Any) -> Any:
    try:
        return descriptor.read(instance)
    except BeanunitError:
        raise
    except Exception as exc:
        raise violation(
            ViolationKind.ACCESSOR,
            cls,
            f"accessor raised {type(exc).__name__}: {exc}",
            property_name=descriptor.name,
        ) from exc


# Name kept from the bean-testing tradition this call surface follows
assert_getters_on_constructor_immutable_object = assert_immutable_construction
