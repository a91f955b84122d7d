# tests/property/test_contract_properties.py
"""Property-based tests for the accessor and equality contracts.

A compliant bean must pass for any representative value, not just the
built-in defaults; a broken one must fail for every value that exposes
the defect.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from beanunit import ContractViolation, ViolationKind, assert_accessor, assert_equals_hash_code
from beanunit.core.registry import TypeDefaultRegistry
from tests.fixtures.beans import CopyingBean, EqualsForgetsFieldBean, LegacyAccount, Person, Tag
from tests.property.settings import QUICK_SETTINGS, STANDARD_SETTINGS

non_empty_text = st.text(min_size=1)
non_zero_ints = st.integers().filter(lambda n: n != 0)
finite_decimals = st.decimals(allow_nan=False, allow_infinity=False)


class TestAccessorRoundTrip:
    @given(value=st.one_of(st.none(), st.text()))
    @STANDARD_SETTINGS
    def test_optional_text_property(self, value: str | None) -> None:
        assert_accessor(Person, "first_name", value)

    @given(value=st.integers())
    @STANDARD_SETTINGS
    def test_int_property(self, value: int) -> None:
        assert_accessor(Person, "age", value)

    @given(value=st.one_of(st.none(), finite_decimals))
    @STANDARD_SETTINGS
    def test_decimal_property(self, value: Decimal | None) -> None:
        assert_accessor(Person, "salary", value)

    @given(value=st.text())
    @STANDARD_SETTINGS
    def test_method_accessor(self, value: str) -> None:
        assert_accessor(LegacyAccount, "number", value)

    @given(value=st.lists(st.text()))
    @STANDARD_SETTINGS
    def test_copying_setter_always_fails(self, value: list[str]) -> None:
        with pytest.raises(ContractViolation) as exc_info:
            assert_accessor(CopyingBean, "items", value)
        assert exc_info.value.kind is ViolationKind.ACCESSOR


class TestEqualitySensitivity:
    @given(text=non_empty_text, number=non_zero_ints, amount=finite_decimals)
    @QUICK_SETTINGS
    def test_compliant_bean_with_any_defaults(self, text: str, number: int, amount: Decimal) -> None:
        registry = TypeDefaultRegistry()
        registry.register(str, text)
        registry.register(int, number)
        registry.register(Decimal, amount)

        assert_equals_hash_code(Person, registry=registry)

    @given(label=non_empty_text, weight=st.floats(allow_nan=False).filter(lambda w: w != 0.0))
    @QUICK_SETTINGS
    def test_dataclass_with_any_defaults(self, label: str, weight: float) -> None:
        registry = TypeDefaultRegistry()
        registry.register(str, label)
        registry.register(float, weight)

        assert_equals_hash_code(Tag, registry=registry)

    @given(number=non_zero_ints)
    @QUICK_SETTINGS
    def test_ignored_field_always_detected(self, number: int) -> None:
        registry = TypeDefaultRegistry()
        registry.register(int, number)

        with pytest.raises(ContractViolation) as exc_info:
            assert_equals_hash_code(EqualsForgetsFieldBean, registry=registry)
        assert exc_info.value.kind is ViolationKind.EQUALITY
