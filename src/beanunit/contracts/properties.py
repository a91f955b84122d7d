"""Property, constructor and exclusion metadata.

These types answer: "What does a class expose, and what may we skip?"
All are frozen - they are produced once per assertion call and never
mutated afterwards.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from beanunit.contracts.enums import PropertyKind
from beanunit.contracts.errors import IntrospectionError, type_name


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """One exposed property of a class.

    Attributes:
        owner: Class the property was discovered on
        name: Property name as used by callers and exclusion lists
        declared_type: Annotation (a class or typing construct, Any if unannotated)
        readable: A no-argument accessor exists
        writable: A one-argument mutator accepting declared_type exists
        kind: How the property is exposed
        getter_name: Accessor method name (METHOD kind only)
        setter_name: Mutator method name (METHOD kind only)
    """

    owner: type
    name: str
    declared_type: Any
    readable: bool
    writable: bool
    kind: PropertyKind
    getter_name: str | None = None
    setter_name: str | None = None

    def read(self, instance: Any) -> Any:
        """Invoke the accessor on instance."""
        if not self.readable:
            raise IntrospectionError(type_name(self.owner), self.name, "property has no accessor")
        if self.getter_name is not None:
            return getattr(instance, self.getter_name)()
        return getattr(instance, self.name)

    def write(self, instance: Any, value: Any) -> None:
        """Invoke the mutator on instance."""
        if not self.writable:
            raise IntrospectionError(type_name(self.owner), self.name, "property has no mutator")
        if self.setter_name is not None:
            getattr(instance, self.setter_name)(value)
            return
        setattr(instance, self.name, value)


@dataclass(frozen=True, slots=True)
class TypeDefaultEntry:
    """A registered default value for one declared type."""

    type: Any
    value: Any


@dataclass(frozen=True, slots=True)
class ExclusionSet:
    """Property names an assertion call must skip.

    Built once per call from the caller's variadic arguments.
    """

    names: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, names: Iterable[str]) -> ExclusionSet:
        """Build from caller input, rejecting anything that is not a name.

        Raises:
            TypeError: If an element is not a str
        """
        collected = tuple(names)
        for name in collected:
            if not isinstance(name, str):
                raise TypeError(f"Excluded property names must be str, got {type(name).__name__}: {name!r}")
        return cls(frozenset(collected))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True, slots=True)
class ConstructorParameter:
    """One parameter of a designated constructor."""

    name: str
    declared_type: Any
    positional_only: bool = False


@dataclass(frozen=True, slots=True)
class ConstructorSpec:
    """The constructor the engine uses to build instances of a class.

    Attributes:
        owner: Class being constructed
        factory: Callable producing an instance (the class itself or a classmethod)
        parameters: Parameters in declaration order
        label: Printable description, e.g. "__init__(self, city: str)"
    """

    owner: type
    factory: Callable[..., Any]
    parameters: tuple[ConstructorParameter, ...]
    label: str

    @property
    def parameter_names(self) -> frozenset[str]:
        return frozenset(p.name for p in self.parameters)

    def call(self, arguments: dict[str, Any]) -> Any:
        """Invoke the factory with one argument per parameter.

        Positional-only parameters are passed positionally, in order;
        the rest are passed by keyword.
        """
        args = [arguments[p.name] for p in self.parameters if p.positional_only]
        kwargs = {p.name: arguments[p.name] for p in self.parameters if not p.positional_only}
        return self.factory(*args, **kwargs)


def describe_signature(func: Callable[..., Any]) -> str:
    """Printable signature of a callable, for diagnostics."""
    name = getattr(func, "__name__", type(func).__name__)
    try:
        return f"{name}{inspect.signature(func)}"
    except (TypeError, ValueError):
        return f"{name}(...)"
