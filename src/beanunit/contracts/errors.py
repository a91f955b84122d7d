"""Exception taxonomy for contract verification.

Every failure raised by the engine derives from BeanunitError and carries
the name of the class under test, the offending member and the rule that
was broken. Errors raised by user code while the engine invokes members
are chained onto these with ``raise ... from exc``.

Usage errors (the class cannot be reflected, constructed, or given values)
are plain exceptions. Contract violations also subclass AssertionError so
that any test runner reports them as test failures rather than errors.
"""

from __future__ import annotations

from typing import Any

from beanunit.contracts.enums import ViolationKind


def type_name(target: Any) -> str:
    """Readable name for a class or typing construct."""
    if isinstance(target, type):
        return target.__qualname__
    return repr(target)


class BeanunitError(Exception):
    """Base class for everything the engine raises."""


class IntrospectionError(BeanunitError):
    """Raised when a class cannot be reflected or lacks a named member.

    Attributes:
        type_name: Class under test
        member: Property or method involved (None for whole-class failures)
        reason: What went wrong
    """

    def __init__(self, type_name: str, member: str | None, reason: str) -> None:
        self.type_name = type_name
        self.member = member
        self.reason = reason
        where = f"{type_name}.{member}" if member else type_name
        super().__init__(f"Cannot introspect {where}: {reason}")


class NotConstructibleError(BeanunitError):
    """Raised when a class has no usable zero-argument construction path."""

    def __init__(self, type_name: str, reason: str) -> None:
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"Cannot construct {type_name}: {reason}")


class AmbiguousConstructorError(BeanunitError):
    """Raised when several constructors qualify and none is marked primary.

    Attributes:
        type_name: Class under test
        candidates: Printable signatures of the competing constructors
    """

    def __init__(self, type_name: str, candidates: tuple[str, ...]) -> None:
        self.type_name = type_name
        self.candidates = candidates
        listing = "; ".join(candidates)
        super().__init__(
            f"{type_name} has {len(candidates)} candidate constructors and exactly one must be "
            f"marked with @primary_constructor: {listing}"
        )


class UnresolvableTypeError(BeanunitError):
    """Raised when no default value can be synthesized for a declared type."""

    def __init__(self, declared_type: Any, reason: str) -> None:
        self.declared_type = declared_type
        self.reason = reason
        super().__init__(
            f"No default value for {type_name(declared_type)}: {reason}. "
            f"Register one with register_type_and_default_argument()."
        )


class ContractViolation(BeanunitError, AssertionError):
    """A class broke one of the behavioural contracts.

    Attributes:
        kind: Which contract was broken
        type_name: Class under test
        property_name: Offending property or method (None for class-level rules)
        check: Failing sub-check, e.g. "divergence (value)" (None when the kind says it all)
        detail: Human-readable explanation
    """

    def __init__(
        self,
        kind: ViolationKind,
        type_name: str,
        detail: str,
        *,
        property_name: str | None = None,
        check: str | None = None,
    ) -> None:
        self.kind = kind
        self.type_name = type_name
        self.property_name = property_name
        self.check = check
        self.detail = detail
        where = f"{type_name}.{property_name}" if property_name else type_name
        label = f"{kind.value}/{check}" if check else kind.value
        super().__init__(f"[{label}] {where}: {detail}")
