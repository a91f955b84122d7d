"""End-to-end checks through the bean facade."""

from decimal import Decimal

import pytest

from beanunit import (
    ContractViolation,
    NotConstructibleError,
    ViolationKind,
    assert_bean,
    assert_equals_hash_code,
    assert_getters_on_constructor_immutable_object,
    create_object,
    register_type_and_default_argument,
)
from beanunit.core.registry import TypeDefaultRegistry
from tests.fixtures.beans import (
    Account,
    AddressDto,
    BusinessLocationDto,
    CopyingBean,
    Customer,
    Employee,
    InventoryDto,
    LegacyAccount,
    Money,
    NotImmutableBuildingDto,
    Person,
    Status,
    Tag,
)


class _ExplodingSetter:
    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int) -> None:
        raise RuntimeError("read-only in disguise")


class TestAssertBean:
    def test_registered_defaults_compliant_bean(self) -> None:
        register_type_and_default_argument(AddressDto, AddressDto(city="c"))
        register_type_and_default_argument(Decimal, Decimal(42))
        assert_bean(Person)

    def test_method_accessor_bean(self) -> None:
        assert_bean(LegacyAccount)

    def test_dataclass_bean(self) -> None:
        assert_bean(Tag)

    def test_missing_hash_fails(self) -> None:
        with pytest.raises(ContractViolation) as exc_info:
            assert_bean(BusinessLocationDto)
        assert exc_info.value.kind is ViolationKind.NOT_OVERRIDDEN

    def test_accessor_failure_reported_before_equality(self) -> None:
        with pytest.raises(ContractViolation) as exc_info:
            assert_bean(CopyingBean)
        assert exc_info.value.kind is ViolationKind.ACCESSOR
        assert exc_info.value.property_name == "items"

    def test_excluded_property_is_skipped(self) -> None:
        with pytest.raises(ContractViolation) as exc_info:
            assert_bean(CopyingBean, "items")
        assert exc_info.value.kind is not ViolationKind.ACCESSOR

    def test_constructor_injected_bean_with_setter(self) -> None:
        assert_bean(Account)

    def test_mutable_pydantic_model_is_unhashable(self) -> None:
        with pytest.raises(ContractViolation) as exc_info:
            assert_bean(Customer)
        assert exc_info.value.kind is ViolationKind.NOT_OVERRIDDEN


class TestScenarios:
    def test_employee_missing_equals_override(self) -> None:
        with pytest.raises(ContractViolation) as exc_info:
            assert_equals_hash_code(Employee)
        assert exc_info.value.kind is ViolationKind.NOT_OVERRIDDEN
        assert "Entity" in str(exc_info.value)

    def test_mutable_building(self) -> None:
        with pytest.raises(ContractViolation) as exc_info:
            assert_getters_on_constructor_immutable_object(NotImmutableBuildingDto)
        assert exc_info.value.kind is ViolationKind.MUTABLE_AFTER_CONSTRUCTION

    def test_inventory_with_derived_property_excluded(self) -> None:
        assert_getters_on_constructor_immutable_object(InventoryDto, "insured_amount")


class TestCreateObject:
    def test_constructor_arguments_from_registry(self) -> None:
        assert repr(create_object(Employee)) == "Employee{id='String'}"

    def test_writable_properties_populated(self) -> None:
        person = create_object(Person)

        assert person.first_name == "String"
        assert person.last_name == "String"
        assert person.age == 42
        assert person.salary == Decimal("42")
        assert isinstance(person.address, AddressDto)

    def test_method_accessors_populated(self) -> None:
        account = create_object(LegacyAccount)

        assert account.get_number() == "String"
        assert account.is_active() is True
        assert account.get_status() is Status.ACTIVE

    def test_designated_constructor_used(self) -> None:
        money = create_object(Money)

        assert money.amount == Decimal("42")
        assert money.currency == "String"

    def test_explicit_registry(self) -> None:
        registry = TypeDefaultRegistry()
        registry.register(str, "E-1")

        assert repr(create_object(Employee, registry=registry)) == "Employee{id='E-1'}"

    def test_returns_distinct_instances(self) -> None:
        assert create_object(Person) is not create_object(Person)

    def test_populating_failure(self) -> None:
        with pytest.raises(NotConstructibleError, match="populating value raised RuntimeError"):
            create_object(_ExplodingSetter)
