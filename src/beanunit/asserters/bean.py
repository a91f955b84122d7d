"""Bean facade: whole-class checks and representative instances.

assert_bean() combines the accessor round-trip over every writable
property with the full equals/hash contract. Classes without a
zero-argument constructor are built through their designated constructor,
so a constructor-injected bean can be checked too.
"""

from __future__ import annotations

from typing import TypeVar

from beanunit.asserters.accessor import check_all_accessors
from beanunit.asserters.equality import assert_equals_hash_code
from beanunit.contracts.errors import BeanunitError, NotConstructibleError, type_name
from beanunit.contracts.properties import ExclusionSet
from beanunit.core.config import BeanunitSettings
from beanunit.core.construction import build_instance, construct
from beanunit.core.introspection import PropertyIntrospector
from beanunit.core.logging import get_logger
from beanunit.core.registry import TypeDefaultRegistry, resolve_registry

logger = get_logger(__name__)

T = TypeVar("T")


def assert_bean(
    cls: type,
    *excluded: str,
    registry: TypeDefaultRegistry | None = None,
    settings: BeanunitSettings | None = None,
) -> None:
    """Run the accessor checks, then the equals/hash checks, on cls.

    Raises on the first violation. See assert_all_accessors() and
    assert_equals_hash_code() for the individual rules.
    """
    registry = resolve_registry(registry)
    check_all_accessors(
        cls,
        ExclusionSet.of(excluded),
        registry,
        PropertyIntrospector(settings).describe(cls),
        lambda: build_instance(cls, registry),
    )
    assert_equals_hash_code(cls, *excluded, registry=registry, settings=settings)
    logger.debug("bean_contract_verified", type=type_name(cls))


def create_object(
    cls: type[T],
    *,
    registry: TypeDefaultRegistry | None = None,
    settings: BeanunitSettings | None = None,
) -> T:
    """A representative instance of cls, populated from the registry.

    Built through the designated constructor; any writable property the
    constructor did not receive is then set to its registry default.

    Example:
        employee = create_object(Employee)
        assert repr(employee) == "Employee{id='String'}"
    """
    registry = resolve_registry(registry)
    instance, arguments = construct(cls, registry)
    for descriptor in PropertyIntrospector(settings).describe(cls):
        if not descriptor.writable or descriptor.name in arguments:
            continue
        value = registry.lookup(descriptor.declared_type)
        try:
            descriptor.write(instance, value)
        except BeanunitError:
            raise
        except Exception as exc:
            raise NotConstructibleError(
                type_name(cls),
                f"populating {descriptor.name} raised {type(exc).__name__}: {exc}",
            ) from exc
    result: T = instance
    return result
