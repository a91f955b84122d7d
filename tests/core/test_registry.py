"""Tests for TypeDefaultRegistry."""

import collections.abc
import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, TypeVar

import pytest

from beanunit.contracts.errors import UnresolvableTypeError
from beanunit.core.registry import (
    TypeDefaultRegistry,
    get_default_registry,
    isolated_registry,
    register_type_and_default_argument,
    reset_to_default_types,
    resolve_registry,
)
from tests.fixtures.beans import AddressDto, Opaque, Status


class _Empty(Enum):
    pass


class TestBuiltinDefaults:
    """Tests for the built-in baseline."""

    @pytest.mark.parametrize(
        ("declared_type", "expected"),
        [
            (str, "String"),
            (int, 42),
            (float, 42.0),
            (bool, True),
            (bytes, b"bytes"),
            (Decimal, Decimal("42")),
            (date, date(1970, 1, 1)),
            (datetime, datetime(1970, 1, 1, tzinfo=UTC)),
            (uuid.UUID, uuid.UUID(int=42)),
            (list, ["String"]),
            (dict, {"String": "String"}),
            (set, {"String"}),
            (tuple, ("String",)),
            (type(None), None),
        ],
    )
    def test_builtin_value(self, declared_type: Any, expected: Any) -> None:
        assert TypeDefaultRegistry().lookup(declared_type) == expected

    def test_text_default_is_the_literal_string(self) -> None:
        assert TypeDefaultRegistry().lookup(str) == "String"

    def test_abc_containers_resolve(self) -> None:
        registry = TypeDefaultRegistry()
        assert registry.lookup(collections.abc.Sequence) == ["String"]
        assert registry.lookup(collections.abc.Mapping) == {"String": "String"}

    def test_separate_registries_do_not_share_mutable_defaults(self) -> None:
        first = TypeDefaultRegistry().lookup(list)
        second = TypeDefaultRegistry().lookup(list)
        assert first == second
        assert first is not second


class TestLookupResolution:
    """Tests for lookup() on typing constructs and classes."""

    def test_optional_resolves_inner_type(self) -> None:
        registry = TypeDefaultRegistry()
        assert registry.lookup(Optional[int]) == 42
        assert registry.lookup(int | None) == 42

    def test_union_uses_first_member(self) -> None:
        assert TypeDefaultRegistry().lookup(str | int) == "String"

    def test_annotated_is_unwrapped(self) -> None:
        assert TypeDefaultRegistry().lookup(Annotated[int, "meta"]) == 42

    def test_literal_uses_first_value(self) -> None:
        assert TypeDefaultRegistry().lookup(Literal["FIXED", "FLEXIBLE"]) == "FIXED"

    def test_parameterised_generic_uses_origin(self) -> None:
        registry = TypeDefaultRegistry()
        assert registry.lookup(list[int]) == ["String"]
        assert registry.lookup(dict[str, int]) == {"String": "String"}
        assert registry.lookup(collections.abc.Sequence[str]) == ["String"]

    def test_registered_generic_takes_precedence_over_origin(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(list[int], [1, 2])
        assert registry.lookup(list[int]) == [1, 2]
        assert registry.lookup(list[str]) == ["String"]

    def test_enum_uses_first_member(self) -> None:
        assert TypeDefaultRegistry().lookup(Status) is Status.ACTIVE

    def test_empty_enum_is_unresolvable(self) -> None:
        with pytest.raises(UnresolvableTypeError, match="no members"):
            TypeDefaultRegistry().lookup(_Empty)

    def test_zero_argument_class_is_constructed(self) -> None:
        value = TypeDefaultRegistry().lookup(AddressDto)
        assert value == AddressDto()

    def test_class_requiring_arguments_is_unresolvable(self) -> None:
        with pytest.raises(UnresolvableTypeError, match="requires arguments") as exc_info:
            TypeDefaultRegistry().lookup(Opaque)
        assert exc_info.value.declared_type is Opaque

    def test_constructor_failure_is_chained(self) -> None:
        class Exploding:
            def __init__(self) -> None:
                raise RuntimeError("nope")

        with pytest.raises(UnresolvableTypeError, match="RuntimeError") as exc_info:
            TypeDefaultRegistry().lookup(Exploding)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("declared_type", [Any, object, TypeVar("T")])
    def test_opaque_types_are_unresolvable(self, declared_type: Any) -> None:
        with pytest.raises(UnresolvableTypeError, match="any value"):
            TypeDefaultRegistry().lookup(declared_type)

    def test_abstract_class_is_unresolvable(self) -> None:
        with pytest.raises(UnresolvableTypeError, match="abstract"):
            TypeDefaultRegistry().lookup(collections.abc.Hashable)

    def test_unregistered_generic_origin_is_unresolvable(self) -> None:
        with pytest.raises(UnresolvableTypeError):
            TypeDefaultRegistry().lookup(collections.abc.Callable[[int], str])


class TestRegistration:
    """Tests for register() and reset()."""

    def test_register_overrides_builtin(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(Decimal, Decimal(7))
        assert registry.lookup(Decimal) == Decimal(7)

    def test_reregistration_replaces(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(AddressDto, AddressDto(city="a"))
        registry.register(AddressDto, AddressDto(city="b"))
        assert registry.lookup(AddressDto) == AddressDto(city="b")
        assert sum(1 for e in registry.entries() if e.type is AddressDto) == 1

    def test_registered_value_returned_by_identity(self) -> None:
        registry = TypeDefaultRegistry()
        address = AddressDto(city="c")
        registry.register(AddressDto, address)
        assert registry.lookup(AddressDto) is address
        assert registry.lookup(AddressDto | None) is address

    def test_register_rejects_wrong_instance(self) -> None:
        with pytest.raises(TypeError, match="must be an instance"):
            TypeDefaultRegistry().register(Decimal, 42)

    def test_register_accepts_int_for_float(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(float, 1)
        assert registry.lookup(float) == 1

    def test_register_accepts_numbers_for_complex(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(complex, 2.5)
        assert registry.lookup(complex) == 2.5

    def test_register_rejects_float_for_int(self) -> None:
        with pytest.raises(TypeError, match="must be an instance"):
            TypeDefaultRegistry().register(int, 1.5)

    def test_register_accepts_subclass_instance(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(int, True)
        assert registry.lookup(int) is True

    def test_reset_discards_registrations(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(AddressDto, AddressDto(city="c"))
        registry.register(str, "other")
        registry.reset()
        assert not registry.is_registered(AddressDto)
        assert registry.lookup(str) == "String"

    def test_reset_rebuilds_mutable_defaults(self) -> None:
        registry = TypeDefaultRegistry()
        polluted = registry.lookup(list)
        polluted.append("leak")
        registry.reset()
        assert registry.lookup(list) == ["String"]


class TestLookupDistinct:
    """Tests for lookup_distinct(), the value that differs from what an instance holds."""

    def test_default_returned_when_it_differs(self) -> None:
        assert TypeDefaultRegistry().lookup_distinct(str, "") == "String"

    @pytest.mark.parametrize(
        ("declared_type", "current", "expected"),
        [
            (str, "String", "Other"),
            (int, 42, 43),
            (bool, True, False),
            (Decimal, Decimal("42"), Decimal("43")),
            (date, date(1970, 1, 1), date(1970, 1, 2)),
            (Optional[str], "String", "Other"),
            (list[str], ["String"], ["Other"]),
        ],
    )
    def test_alternate_when_default_matches(self, declared_type: Any, current: Any, expected: Any) -> None:
        assert TypeDefaultRegistry().lookup_distinct(declared_type, current) == expected

    def test_registered_value_matching_current_falls_back(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(str, "acme")
        assert registry.lookup_distinct(str, "acme") == "Other"

    def test_enum_uses_next_member(self) -> None:
        assert TypeDefaultRegistry().lookup_distinct(Status, Status.ACTIVE) is Status.CLOSED

    def test_literal_uses_next_value(self) -> None:
        assert TypeDefaultRegistry().lookup_distinct(Literal["a", "b"], "a") == "b"

    def test_no_differing_candidate(self) -> None:
        with pytest.raises(UnresolvableTypeError, match=r"Order\.ship_to") as exc_info:
            TypeDefaultRegistry().lookup_distinct(AddressDto, AddressDto(), context="Order.ship_to")
        assert exc_info.value.declared_type is AddressDto


class TestScoping:
    """Tests for scoped(), copy() and isolated registries."""

    def test_scoped_restores_on_normal_exit(self) -> None:
        registry = TypeDefaultRegistry()
        with registry.scoped() as scoped:
            scoped.register(AddressDto, AddressDto(city="c"))
            assert registry.is_registered(AddressDto)
        assert not registry.is_registered(AddressDto)

    def test_scoped_restores_on_exception(self) -> None:
        registry = TypeDefaultRegistry()
        with pytest.raises(RuntimeError), registry.scoped():
            registry.register(str, "temporary")
            raise RuntimeError("test failure")
        assert registry.lookup(str) == "String"

    def test_scoped_keeps_earlier_registrations(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(str, "outer")
        with registry.scoped():
            registry.register(str, "inner")
        assert registry.lookup(str) == "outer"

    def test_copy_is_independent(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(str, "original")
        clone = registry.copy()
        clone.register(str, "clone")
        assert registry.lookup(str) == "original"
        assert clone.lookup(str) == "clone"

    def test_isolated_registry_leaves_global_untouched(self) -> None:
        with isolated_registry() as registry:
            registry.register(str, "isolated")
            assert get_default_registry().lookup(str) == "String"

    def test_resolve_registry(self) -> None:
        registry = TypeDefaultRegistry()
        assert resolve_registry(registry) is registry
        assert resolve_registry(None) is get_default_registry()


class TestProcessWideRegistry:
    """Tests for the module-level functions."""

    def test_register_and_reset(self) -> None:
        register_type_and_default_argument(Decimal, Decimal(42))
        assert get_default_registry().lookup(Decimal) == Decimal(42)
        register_type_and_default_argument(Decimal, Decimal(1))
        assert get_default_registry().lookup(Decimal) == Decimal(1)
        reset_to_default_types()
        assert get_default_registry().lookup(Decimal) == Decimal("42")
