"""TypeDefaultRegistry: representative default values per declared type.

The asserters need one value for every property type they meet. The
registry maps a type to that value, falls back to built-in defaults for
common scalar, temporal and collection types, and as a last resort
constructs an instance of a class with no required constructor arguments.

There is a process-wide registry (what the module-level functions act on)
and registries can be created in isolation and passed to any asserter via
``registry=``. Registrations on the process-wide instance persist until
reset_to_default_types() is called - run it at test teardown, or use
``with registry.scoped():`` to get restoration on every exit path.

NOT thread-safe: serialize register()/reset() calls, or give each thread
its own registry.
"""

from __future__ import annotations

import collections.abc
import inspect
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import Any, Literal, TypeVar, get_args, get_origin

from beanunit.contracts.errors import UnresolvableTypeError, type_name
from beanunit.contracts.properties import TypeDefaultEntry
from beanunit.core.logging import get_logger
from beanunit.core.type_semantics import NONE_TYPE, is_union, strip_optional, unwrap_annotated

logger = get_logger(__name__)

# reset() calls every factory again, so a mutated default list does not survive it.
# Values differ from the 0, "" or empty container a fresh bean usually holds.
BUILTIN_DEFAULT_FACTORIES: dict[Any, Callable[[], Any]] = {
    str: lambda: "String",
    int: lambda: 42,
    float: lambda: 42.0,
    complex: lambda: 42j,
    bool: lambda: True,
    bytes: lambda: b"bytes",
    bytearray: lambda: bytearray(b"bytes"),
    Decimal: lambda: Decimal("42"),
    Fraction: lambda: Fraction(42),
    date: lambda: date(1970, 1, 1),
    datetime: lambda: datetime(1970, 1, 1, tzinfo=UTC),
    time: lambda: time(12, 0),
    timedelta: lambda: timedelta(seconds=42),
    uuid.UUID: lambda: uuid.UUID(int=42),
    Path: lambda: Path("String"),
    list: lambda: ["String"],
    tuple: lambda: ("String",),
    set: lambda: {"String"},
    frozenset: lambda: frozenset({"String"}),
    dict: lambda: {"String": "String"},
    collections.abc.Sequence: lambda: ["String"],
    collections.abc.MutableSequence: lambda: ["String"],
    collections.abc.Set: lambda: {"String"},
    collections.abc.MutableSet: lambda: {"String"},
    collections.abc.Mapping: lambda: {"String": "String"},
    collections.abc.MutableMapping: lambda: {"String": "String"},
    collections.abc.Collection: lambda: ["String"],
    collections.abc.Iterable: lambda: ["String"],
    NONE_TYPE: lambda: None,
}

# Second values, used when the default equals what an instance already holds
# (e.g. an instance built from the defaults themselves).
ALTERNATE_DEFAULT_FACTORIES: dict[Any, Callable[[], Any]] = {
    str: lambda: "Other",
    int: lambda: 43,
    float: lambda: 43.0,
    complex: lambda: 43j,
    bool: lambda: False,
    bytes: lambda: b"other",
    bytearray: lambda: bytearray(b"other"),
    Decimal: lambda: Decimal("43"),
    Fraction: lambda: Fraction(43),
    date: lambda: date(1970, 1, 2),
    datetime: lambda: datetime(1970, 1, 2, tzinfo=UTC),
    time: lambda: time(13, 0),
    timedelta: lambda: timedelta(seconds=43),
    uuid.UUID: lambda: uuid.UUID(int=43),
    Path: lambda: Path("Other"),
    list: lambda: ["Other"],
    tuple: lambda: ("Other",),
    set: lambda: {"Other"},
    frozenset: lambda: frozenset({"Other"}),
    dict: lambda: {"Other": "Other"},
    collections.abc.Sequence: lambda: ["Other"],
    collections.abc.MutableSequence: lambda: ["Other"],
    collections.abc.Set: lambda: {"Other"},
    collections.abc.MutableSet: lambda: {"Other"},
    collections.abc.Mapping: lambda: {"Other": "Other"},
    collections.abc.MutableMapping: lambda: {"Other": "Other"},
    collections.abc.Collection: lambda: ["Other"],
    collections.abc.Iterable: lambda: ["Other"],
}

# Numeric tower: an int is an acceptable float or complex default
_NUMERIC_WIDENING: dict[type, tuple[type, ...]] = {float: (int,), complex: (int, float)}

# Types that describe "anything": there is no representative value for them.
_OPAQUE_TYPES: frozenset[Any] = frozenset({Any, object})


def _zero_argument_callable(cls: type) -> bool:
    """Whether cls can be called without arguments, judged from its signature."""
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures: let the call decide
        return True
    return all(
        p.default is not inspect.Parameter.empty or p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


class TypeDefaultRegistry:
    """Maps declared types to representative values.

    Example:
        registry = TypeDefaultRegistry()
        registry.register(Decimal, Decimal(42))
        registry.lookup(Decimal | None)  # -> Decimal(42)
    """

    def __init__(self, factories: dict[Any, Callable[[], Any]] | None = None) -> None:
        self._factories = dict(BUILTIN_DEFAULT_FACTORIES if factories is None else factories)
        self._entries: dict[Any, TypeDefaultEntry] = {}
        self.reset()

    def register(self, declared_type: Any, value: Any) -> None:
        """Make lookup(declared_type) return value, replacing any previous entry.

        Raises:
            TypeError: If declared_type is a class and value is not an instance of it
                (ints are accepted for float and complex)
        """
        checkable = isinstance(declared_type, type) and get_origin(declared_type) is None
        accepted = (declared_type, *_NUMERIC_WIDENING.get(declared_type, ())) if checkable else ()
        if checkable and declared_type not in _OPAQUE_TYPES and not isinstance(value, accepted):
            raise TypeError(
                f"Default for {type_name(declared_type)} must be an instance of it, got {type(value).__name__}: {value!r}"
            )
        self._entries[declared_type] = TypeDefaultEntry(type=declared_type, value=value)
        logger.debug("type_default_registered", declared_type=type_name(declared_type))

    def reset(self) -> None:
        """Discard caller registrations and rebuild the built-in baseline."""
        self._entries = {tp: TypeDefaultEntry(type=tp, value=factory()) for tp, factory in self._factories.items()}

    def is_registered(self, declared_type: Any) -> bool:
        """Whether declared_type has an explicit (built-in or registered) entry."""
        return declared_type in self._entries

    def entries(self) -> tuple[TypeDefaultEntry, ...]:
        return tuple(self._entries.values())

    def copy(self) -> TypeDefaultRegistry:
        """An independent registry holding the same entries and baseline."""
        clone = TypeDefaultRegistry(self._factories)
        clone._entries = dict(self._entries)
        return clone

    @contextmanager
    def scoped(self) -> Iterator[TypeDefaultRegistry]:
        """Restore the current entries when the block exits, however it exits.

        Example:
            with registry.scoped():
                registry.register(Address, Address(city="c"))
                assert_bean(Person, registry=registry)
            # Address registration is gone here
        """
        snapshot = dict(self._entries)
        try:
            yield self
        finally:
            self._entries = snapshot

    def lookup(self, declared_type: Any) -> Any:
        """Return the representative value for declared_type.

        Raises:
            UnresolvableTypeError: If no value can be produced
        """
        entry = self._entries.get(declared_type) if _hashable(declared_type) else None
        if entry is not None:
            return entry.value

        declared_type = unwrap_annotated(declared_type)
        if is_union(declared_type):
            return self.lookup(strip_optional(declared_type))

        origin = get_origin(declared_type)
        if origin is Literal:
            return get_args(declared_type)[0]
        if origin is not None:
            # Parameterised generic: list[int] is served by the list default
            if origin in self._entries:
                return self._entries[origin].value
            raise UnresolvableTypeError(declared_type, f"no default registered for {type_name(origin)}")

        if declared_type in _OPAQUE_TYPES or isinstance(declared_type, TypeVar):
            raise UnresolvableTypeError(declared_type, "type admits any value")
        if not isinstance(declared_type, type):
            raise UnresolvableTypeError(declared_type, "not a class")
        if issubclass(declared_type, Enum):
            members = list(declared_type)
            if not members:
                raise UnresolvableTypeError(declared_type, "enum has no members")
            return members[0]
        return self._construct(declared_type)

    def lookup_distinct(self, declared_type: Any, current: Any, *, context: str | None = None) -> Any:
        """A value for declared_type that compares unequal to current.

        lookup() is tried first, then the built-in alternates for the type
        (a second scalar, the other enum members, the other Literal values).

        Raises:
            UnresolvableTypeError: If every candidate equals current
        """
        value = self.lookup(declared_type)
        if value != current:
            return value
        for candidate in _alternates(declared_type):
            if candidate != current:
                logger.debug("alternate_default_used", declared_type=type_name(declared_type), context=context)
                return candidate
        where = f" for {context}" if context else ""
        raise UnresolvableTypeError(
            declared_type,
            f"every candidate{where} equals the current value {current!r}; register a different one",
        )

    def _construct(self, cls: type) -> Any:
        if inspect.isabstract(cls):
            raise UnresolvableTypeError(cls, "class is abstract")
        if not _zero_argument_callable(cls):
            raise UnresolvableTypeError(cls, "constructor requires arguments")
        try:
            value = cls()
        except Exception as exc:
            raise UnresolvableTypeError(cls, f"zero-argument construction raised {type(exc).__name__}: {exc}") from exc
        logger.debug("type_default_constructed", declared_type=type_name(cls))
        return value


def _alternates(declared_type: Any) -> Iterator[Any]:
    target = unwrap_annotated(declared_type)
    if is_union(target):
        for member in get_args(target):
            if member is not NONE_TYPE:
                yield from _alternates(member)
        return
    origin = get_origin(target)
    if origin is Literal:
        yield from get_args(target)
        return
    key = target if origin is None else origin
    factory = ALTERNATE_DEFAULT_FACTORIES.get(key) if _hashable(key) else None
    if factory is not None:
        yield factory()
    if isinstance(target, type) and issubclass(target, Enum):
        yield from target


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


# =============================================================================
# Process-wide registry
# =============================================================================

_default_registry = TypeDefaultRegistry()


def get_default_registry() -> TypeDefaultRegistry:
    """The registry used by asserters when no ``registry=`` is passed."""
    return _default_registry


def register_type_and_default_argument(declared_type: Any, value: Any) -> None:
    """Register a default on the process-wide registry.

    Remember to call reset_to_default_types() at teardown.
    """
    _default_registry.register(declared_type, value)


def reset_to_default_types() -> None:
    """Restore the process-wide registry to its built-in baseline."""
    _default_registry.reset()


@contextmanager
def isolated_registry() -> Iterator[TypeDefaultRegistry]:
    """Yield a fresh registry holding only the built-in baseline.

    Pass it to asserters with ``registry=``; the process-wide registry is
    never touched.
    """
    yield TypeDefaultRegistry()


def resolve_registry(registry: TypeDefaultRegistry | None) -> TypeDefaultRegistry:
    """The registry an asserter should use."""
    return _default_registry if registry is None else registry
