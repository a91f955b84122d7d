"""EqualityContractAsserter: the ``__eq__``/``__hash__`` laws, property by property.

Equality bugs are almost always property-specific: a field compared in
``__eq__`` but forgotten in ``__hash__``, or the other way round. Comparing
two whole default instances cannot find those, so after the class-level
checks every writable property is perturbed on one instance (they must now
differ), then on the other (they must be equal again, with equal hashes).
Optional properties repeat the walk with None.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from beanunit.asserters.violations import violation
from beanunit.contracts.enums import ViolationKind
from beanunit.contracts.errors import BeanunitError, type_name
from beanunit.contracts.properties import ExclusionSet, PropertyDescriptor
from beanunit.core.config import BeanunitSettings, get_settings
from beanunit.core.construction import build_pair
from beanunit.core.introspection import PropertyIntrospector
from beanunit.core.logging import get_logger
from beanunit.core.registry import TypeDefaultRegistry, resolve_registry
from beanunit.core.type_semantics import is_nullable

logger = get_logger(__name__)


class _UnrelatedType:
    """An instance of this must never equal an instance of the class under test."""


def _declaring_class(cls: type, name: str) -> type:
    for klass in cls.__mro__:
        if name in vars(klass):
            return klass
    return object


def _pydantic_generated_pair(eq_owner: type, hash_owner: type) -> bool:
    """pydantic declares __eq__ on BaseModel and generates __hash__ on each frozen model."""
    if eq_owner is not BaseModel or not issubclass(hash_owner, BaseModel):
        return False
    hash_func = vars(hash_owner)["__hash__"]
    return (getattr(hash_func, "__module__", "") or "").startswith("pydantic")


def check_overrides(cls: type) -> None:
    """Require __eq__ and __hash__ to be overridden together, by the same class.

    Raises:
        ContractViolation: kind NOT_OVERRIDDEN
    """
    eq_owner = _declaring_class(cls, "__eq__")
    hash_owner = _declaring_class(cls, "__hash__")

    if eq_owner is object and hash_owner is object:
        raise violation(ViolationKind.NOT_OVERRIDDEN, cls, "does not override __eq__ and __hash__")
    if vars(hash_owner)["__hash__"] is None:
        raise violation(
            ViolationKind.NOT_OVERRIDDEN,
            cls,
            f"__hash__ is None in {type_name(hash_owner)} (defining __eq__ alone makes instances unhashable)",
        )
    if eq_owner is not hash_owner and not _pydantic_generated_pair(eq_owner, hash_owner):
        raise violation(
            ViolationKind.NOT_OVERRIDDEN,
            cls,
            f"__eq__ and __hash__ have different declaring classes: "
            f"__eq__ from {type_name(eq_owner)}, __hash__ from {type_name(hash_owner)}",
        )


def _equal(cls: type, left: Any, right: Any, property_name: str | None = None) -> bool:
    try:
        return bool(left == right)
    except Exception as exc:
        raise violation(
            ViolationKind.EQUALITY,
            cls,
            f"__eq__ raised {type(exc).__name__}: {exc}",
            property_name=property_name,
        ) from exc


def _same_hash(cls: type, left: Any, right: Any, property_name: str | None = None) -> bool:
    try:
        return hash(left) == hash(right)
    except Exception as exc:
        raise violation(
            ViolationKind.EQUALITY,
            cls,
            f"__hash__ raised {type(exc).__name__}: {exc}",
            property_name=property_name,
        ) from exc


def check_baseline(cls: type, one: Any, two: Any) -> None:
    """Reflexivity, symmetry and inequality to foreign values on default instances."""
    name = type_name(cls)
    if not _equal(cls, one, two):
        raise violation(ViolationKind.EQUALITY, cls, f"two default {name} instances are not equal (one == two)")
    if not _equal(cls, one, one):
        raise violation(ViolationKind.EQUALITY, cls, f"a default {name} instance is not equal to itself (one == one)")
    if not _equal(cls, two, one):
        raise violation(ViolationKind.EQUALITY, cls, "equality is not symmetric (two == one is False)")
    if not _same_hash(cls, one, two):
        raise violation(ViolationKind.EQUALITY, cls, "two equal default instances have different hashes")
    if _equal(cls, one, _UnrelatedType()):
        raise violation(ViolationKind.EQUALITY, cls, "an instance equals an instance of an unrelated class")
    if _equal(cls, one, None):
        raise violation(ViolationKind.EQUALITY, cls, "an instance equals None")


def _set(cls: type, descriptor: PropertyDescriptor, instance: Any, value: Any) -> None:
    try:
        descriptor.write(instance, value)
    except BeanunitError:
        raise
    except Exception as exc:
        raise violation(
            ViolationKind.EQUALITY,
            cls,
            f"mutator raised {type(exc).__name__} for {value!r}: {exc}",
            property_name=descriptor.name,
        ) from exc


def walk_property(cls: type, descriptor: PropertyDescriptor, one: Any, two: Any, value: Any, label: str) -> None:
    """Set value on one (must diverge), then on two (must converge with equal hashes)."""
    name = descriptor.name

    _set(cls, descriptor, one, value)
    if _equal(cls, one, two, name):
        raise violation(
            ViolationKind.EQUALITY,
            cls,
            f"instances with {name} set to {value!r} on only one of them are equal; "
            f"{name} is probably missing from __eq__",
            property_name=name,
            check=f"divergence ({label})",
        )

    _set(cls, descriptor, two, value)
    if not _equal(cls, one, two, name):
        raise violation(
            ViolationKind.EQUALITY,
            cls,
            f"instances with {name} set to the same {value!r} on both are not equal",
            property_name=name,
            check=f"convergence ({label})",
        )
    if not _same_hash(cls, one, two, name):
        raise violation(
            ViolationKind.EQUALITY,
            cls,
            f"instances with {name} set to the same {value!r} on both have different hashes; "
            f"{name} is probably compared in __eq__ but hashed inconsistently",
            property_name=name,
            check=f"hash ({label})",
        )


def _walk_value(cls: type, descriptor: PropertyDescriptor, instance: Any, registry: TypeDefaultRegistry) -> Any:
    """Registry default for the property, unless instance already holds it.

    Instances built through a constructor hold the registry defaults, so
    setting the same default again would show no divergence.
    """
    if not descriptor.readable:
        return registry.lookup(descriptor.declared_type)
    try:
        current = descriptor.read(instance)
    except BeanunitError:
        raise
    except Exception as exc:
        raise violation(
            ViolationKind.EQUALITY,
            cls,
            f"accessor raised {type(exc).__name__}: {exc}",
            property_name=descriptor.name,
        ) from exc
    return registry.lookup_distinct(
        descriptor.declared_type, current, context=f"{type_name(cls)}.{descriptor.name}"
    )


def check_property_sensitivity(
    cls: type,
    one: Any,
    two: Any,
    exclusions: ExclusionSet,
    registry: TypeDefaultRegistry,
    settings: BeanunitSettings,
) -> None:
    """Walk every writable, non-excluded property in introspection order."""
    for descriptor in PropertyIntrospector(settings).describe(cls):
        if not descriptor.writable or descriptor.name in exclusions:
            continue
        value = _walk_value(cls, descriptor, one, registry)
        walk_property(cls, descriptor, one, two, value, "value")
        if settings.null_checks and is_nullable(descriptor.declared_type):
            walk_property(cls, descriptor, one, two, None, "null")
        logger.debug("equality_property_verified", type=type_name(cls), property=descriptor.name)


def assert_equals_hash_code(
    cls: type,
    *excluded: str,
    registry: TypeDefaultRegistry | None = None,
    settings: BeanunitSettings | None = None,
) -> None:
    """Check the __eq__/__hash__ contract of cls.

    - __eq__ and __hash__ must both be overridden, by the same class
    - default instances a, b: a == b, a == a, b == a, hash(a) == hash(b)
    - a != None and a != an instance of an unrelated class
    - per writable property: setting it on one side breaks equality,
      setting it on both restores equality and hash equality (again with
      None for Optional properties)

    Args:
        cls: Class under test
        *excluded: Property names left out of the per-property walk
        registry: Default-value registry (default: the process-wide one)
        settings: Engine settings (default: process-wide settings)

    Raises:
        ContractViolation: kind NOT_OVERRIDDEN or EQUALITY, on the first failure
        NotConstructibleError: If instances cannot be built
        UnresolvableTypeError: If a property or parameter type has no default value
    """
    exclusions = ExclusionSet.of(excluded)
    registry = resolve_registry(registry)
    settings = settings if settings is not None else get_settings()

    check_overrides(cls)
    one, two = build_pair(cls, registry)
    check_baseline(cls, one, two)
    check_property_sensitivity(cls, one, two, exclusions, registry, settings)
    logger.debug("equality_contract_verified", type=type_name(cls), excluded=sorted(exclusions.names))
