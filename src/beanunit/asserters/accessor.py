"""AccessorContractAsserter: writing a property then reading it back.

A bean's accessor must return exactly what its mutator was given. Values
of value-semantic types (numbers, strings, dates, enums...) must compare
equal; everything else must come back as the very same object, so a
mutator that stores a defensive copy fails here.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from beanunit.asserters.violations import violation
from beanunit.contracts.enums import ViolationKind
from beanunit.contracts.errors import BeanunitError, IntrospectionError, type_name
from beanunit.contracts.properties import ExclusionSet, PropertyDescriptor
from beanunit.core.config import BeanunitSettings
from beanunit.core.construction import instantiate
from beanunit.core.introspection import PropertyIntrospector
from beanunit.core.logging import get_logger
from beanunit.core.registry import TypeDefaultRegistry, resolve_registry
from beanunit.core.type_semantics import has_value_semantics, same_value

logger = get_logger(__name__)

# Distinguishes "no value supplied" from an explicit None
_UNSET: Any = object()


def assert_accessor(
    cls: type,
    property_name: str,
    value: Any = _UNSET,
    *,
    registry: TypeDefaultRegistry | None = None,
    settings: BeanunitSettings | None = None,
) -> None:
    """Check that the mutator/accessor pair of one property round-trips.

    Args:
        cls: Class under test; must be constructible without arguments
        property_name: Property to check, e.g. "first_name"
        value: Value handed to the mutator (default: the registry's default for the declared type)
        registry: Default-value registry (default: the process-wide one)
        settings: Engine settings (default: process-wide settings)

    Raises:
        NotConstructibleError: If cls has no zero-argument constructor
        IntrospectionError: If the property lacks an accessor or a mutator
        UnresolvableTypeError: If no value is given and none can be synthesized
        ContractViolation: If the accessor does not return the value written
    """
    descriptor = PropertyIntrospector(settings).find(cls, property_name)
    verify_round_trip(cls, descriptor, lambda: instantiate(cls), resolve_registry(registry), value)


def assert_accessors(
    cls: type,
    properties: Mapping[str, Any],
    *,
    registry: TypeDefaultRegistry | None = None,
    settings: BeanunitSettings | None = None,
) -> None:
    """Check several properties, each with its own value.

    A None value in the mapping means "use the registry default".
    Stops at the first violation.
    """
    for name, value in properties.items():
        assert_accessor(
            cls,
            name,
            _UNSET if value is None else value,
            registry=registry,
            settings=settings,
        )


def assert_all_accessors(
    cls: type,
    *excluded: str,
    registry: TypeDefaultRegistry | None = None,
    settings: BeanunitSettings | None = None,
) -> None:
    """Check every writable property of cls except the excluded names.

    Read-only properties are skipped - there is no mutator to drive them.
    Stops at the first violation.
    """
    check_all_accessors(
        cls,
        ExclusionSet.of(excluded),
        resolve_registry(registry),
        PropertyIntrospector(settings).describe(cls),
        lambda: instantiate(cls),
    )


def check_all_accessors(
    cls: type,
    exclusions: ExclusionSet,
    registry: TypeDefaultRegistry,
    descriptors: Iterable[PropertyDescriptor],
    make_instance: Callable[[], Any],
) -> None:
    """Round-trip every writable, non-excluded descriptor on a fresh instance each."""
    for descriptor in descriptors:
        if not descriptor.writable or descriptor.name in exclusions:
            continue
        verify_round_trip(cls, descriptor, make_instance, registry)


def verify_round_trip(
    cls: type,
    descriptor: PropertyDescriptor,
    make_instance: Callable[[], Any],
    registry: TypeDefaultRegistry,
    value: Any = _UNSET,
) -> None:
    """Write value (or the registry default) through the mutator and read it back."""
    instance = make_instance()
    if not (descriptor.readable and descriptor.writable):
        missing = "mutator" if descriptor.readable else "accessor"
        raise IntrospectionError(type_name(cls), descriptor.name, f"property has no {missing}")

    if value is _UNSET:
        value = registry.lookup(descriptor.declared_type)

    try:
        descriptor.write(instance, value)
        actual = descriptor.read(instance)
    except BeanunitError:
        raise
    except Exception as exc:
        raise violation(
            ViolationKind.ACCESSOR,
            cls,
            f"accessor/mutator raised {type(exc).__name__}: {exc}",
            property_name=descriptor.name,
        ) from exc

    if not same_value(descriptor.declared_type, value, actual):
        comparison = "an equal value" if has_value_semantics(descriptor.declared_type) else "the same object"
        raise violation(
            ViolationKind.ACCESSOR,
            cls,
            f"accessor/mutator failed: set {value!r}, expected {comparison} back but got {actual!r}",
            property_name=descriptor.name,
        )
    logger.debug("accessor_verified", type=type_name(cls), property=descriptor.name)
