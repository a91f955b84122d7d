"""PropertyIntrospector: discover what a class exposes.

Property sources, in the order they are collected:
1. pydantic model fields (writable unless the model or field is frozen)
2. dataclass fields (writable unless the dataclass is frozen)
3. plain class-level annotations (instance attributes, always writable)
4. builtin ``property`` objects (readable via fget, writable via fset)
5. ``get_x()``/``is_x()`` + ``set_x(value)`` method pairs

A later source only adds names the earlier ones did not produce, except
that a property object overrides an annotation of the same name.
Descriptors are built fresh on every call; nothing is cached.
"""

from __future__ import annotations

import dataclasses
import inspect
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, get_origin, get_type_hints

from pydantic import BaseModel

from beanunit.contracts.enums import PropertyKind
from beanunit.contracts.errors import IntrospectionError, type_name
from beanunit.contracts.properties import PropertyDescriptor
from beanunit.core.config import BeanunitSettings, get_settings
from beanunit.core.logging import get_logger

logger = get_logger(__name__)

_GETTER_PATTERN = re.compile(r"^(get|is)_(?P<name>[A-Za-z0-9]\w*)$")
_SETTER_PATTERN = re.compile(r"^set_(?P<name>[A-Za-z0-9]\w*)$")

# Base classes whose own members are machinery, not properties of the target
_FRAMEWORK_MODULES: tuple[str, ...] = ("builtins", "typing", "abc", "enum", "pydantic", "collections")


def _is_framework_class(klass: type) -> bool:
    module = klass.__module__ or ""
    return any(module == prefix or module.startswith(prefix + ".") for prefix in _FRAMEWORK_MODULES)


def _is_class_var(hint: Any) -> bool:
    return hint is ClassVar or get_origin(hint) is ClassVar


@dataclass
class _MethodPair:
    getter: str | None = None
    getter_type: Any = inspect.Parameter.empty
    setter: str | None = None
    setter_type: Any = inspect.Parameter.empty


class PropertyIntrospector:
    """Enumerates the properties of a class.

    Example:
        introspector = PropertyIntrospector()
        for descriptor in introspector.describe(Person):
            print(descriptor.name, descriptor.writable)
    """

    def __init__(self, settings: BeanunitSettings | None = None) -> None:
        self._settings = settings if settings is not None else get_settings()

    def describe(self, cls: type) -> tuple[PropertyDescriptor, ...]:
        """All exposed properties of cls, grouped by source.

        Fields and plain annotations come first, then ``property`` objects,
        then method pairs; within a source, declaration order with base
        classes first. A ``property`` replaces a field of the same name in
        the field's position.

        Raises:
            IntrospectionError: If cls is not a structured class or its annotations can't be resolved
        """
        self._require_structured(cls)
        found: dict[str, PropertyDescriptor] = {}

        for descriptor in self._field_properties(cls):
            found[descriptor.name] = descriptor
        for descriptor in self._descriptor_properties(cls):
            found[descriptor.name] = descriptor
        if self._settings.method_accessors:
            for descriptor in self._method_properties(cls):
                found.setdefault(descriptor.name, descriptor)

        result = tuple(d for d in found.values() if self._exposed(d.name))
        logger.debug(
            "properties_described",
            type=type_name(cls),
            properties=[d.name for d in result],
        )
        return result

    def find(self, cls: type, name: str) -> PropertyDescriptor:
        """The descriptor for one named property.

        Raises:
            IntrospectionError: If cls has no property called name
        """
        for descriptor in self.describe(cls):
            if descriptor.name == name:
                return descriptor
        raise IntrospectionError(type_name(cls), name, "no such property. Do you have an accessor and a mutator?")

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def _field_properties(self, cls: type) -> list[PropertyDescriptor]:
        if issubclass(cls, BaseModel):
            model_frozen = bool(cls.model_config.get("frozen", False))
            return [
                PropertyDescriptor(
                    owner=cls,
                    name=name,
                    declared_type=info.annotation,
                    readable=True,
                    writable=not (model_frozen or bool(info.frozen)),
                    kind=PropertyKind.FIELD,
                )
                for name, info in cls.model_fields.items()
            ]

        hints = self._resolve(cls, cls)
        if dataclasses.is_dataclass(cls):
            frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
            return [
                PropertyDescriptor(
                    owner=cls,
                    name=f.name,
                    declared_type=hints.get(f.name, f.type),
                    readable=True,
                    writable=not frozen,
                    kind=PropertyKind.FIELD,
                )
                for f in dataclasses.fields(cls)
            ]

        descriptors: list[PropertyDescriptor] = []
        seen: set[str] = set()
        for klass in reversed(cls.__mro__):
            if _is_framework_class(klass):
                continue
            for name in inspect.get_annotations(klass):
                hint = hints.get(name, Any)
                if name in seen or _is_class_var(hint):
                    continue
                seen.add(name)
                descriptors.append(
                    PropertyDescriptor(
                        owner=cls,
                        name=name,
                        declared_type=hint,
                        readable=True,
                        writable=True,
                        kind=PropertyKind.FIELD,
                    )
                )
        return descriptors

    def _descriptor_properties(self, cls: type) -> list[PropertyDescriptor]:
        collected: dict[str, PropertyDescriptor] = {}
        for klass in reversed(cls.__mro__):
            if _is_framework_class(klass):
                continue
            for name, member in vars(klass).items():
                if not isinstance(member, property):
                    continue
                getter_type = self._return_type(cls, member.fget) if member.fget else inspect.Parameter.empty
                setter_type = self._value_type(cls, member.fset) if member.fset else inspect.Parameter.empty
                collected[name] = self._pair_descriptor(
                    cls,
                    name,
                    PropertyKind.PROPERTY,
                    readable=member.fget is not None,
                    writable=member.fset is not None,
                    getter_type=getter_type,
                    setter_type=setter_type,
                )
        return list(collected.values())

    def _method_properties(self, cls: type) -> list[PropertyDescriptor]:
        pairs: dict[str, _MethodPair] = {}
        for klass in reversed(cls.__mro__):
            if _is_framework_class(klass):
                continue
            for attr, member in vars(klass).items():
                if not inspect.isfunction(member):
                    continue
                getter = _GETTER_PATTERN.match(attr)
                if getter and _arity(member) == 0:
                    pair = pairs.setdefault(getter.group("name"), _MethodPair())
                    pair.getter = attr
                    pair.getter_type = self._return_type(cls, member)
                    continue
                setter = _SETTER_PATTERN.match(attr)
                if setter and _arity(member) == 1:
                    pair = pairs.setdefault(setter.group("name"), _MethodPair())
                    pair.setter = attr
                    pair.setter_type = self._value_type(cls, member)

        return [
            self._pair_descriptor(
                cls,
                name,
                PropertyKind.METHOD,
                readable=pair.getter is not None,
                writable=pair.setter is not None,
                getter_type=pair.getter_type,
                setter_type=pair.setter_type,
                getter_name=pair.getter,
                setter_name=pair.setter,
            )
            for name, pair in pairs.items()
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pair_descriptor(
        self,
        cls: type,
        name: str,
        kind: PropertyKind,
        *,
        readable: bool,
        writable: bool,
        getter_type: Any,
        setter_type: Any,
        getter_name: str | None = None,
        setter_name: str | None = None,
    ) -> PropertyDescriptor:
        """Combine accessor and mutator into one descriptor.

        A mutator only makes the property writable when it accepts the
        accessor's declared type (or either side is unannotated).
        """
        empty = inspect.Parameter.empty
        declared_type = getter_type if getter_type is not empty else setter_type
        if declared_type is empty:
            declared_type = Any
        if readable and writable and empty not in (getter_type, setter_type) and getter_type != setter_type:
            logger.debug(
                "mutator_type_mismatch",
                type=type_name(cls),
                property=name,
                accessor_type=type_name(getter_type),
                mutator_type=type_name(setter_type),
            )
            writable = False
            setter_name = None
        return PropertyDescriptor(
            owner=cls,
            name=name,
            declared_type=declared_type,
            readable=readable,
            writable=writable,
            kind=kind,
            getter_name=getter_name,
            setter_name=setter_name,
        )

    def _exposed(self, name: str) -> bool:
        return self._settings.include_private or not name.startswith("_")

    def _require_structured(self, cls: Any) -> None:
        if not inspect.isclass(cls):
            raise IntrospectionError(type_name(cls), None, "not a class")
        if cls.__module__ == "builtins":
            raise IntrospectionError(type_name(cls), None, "built-in types have no introspectable properties")

    def _resolve(self, cls: type, target: type | Callable[..., Any]) -> dict[str, Any]:
        """Resolved annotations of target, reported against cls on failure."""
        try:
            return get_type_hints(target, localns={cls.__name__: cls})
        except (NameError, TypeError, AttributeError) as exc:
            member = None if target is cls else getattr(target, "__name__", None)
            raise IntrospectionError(type_name(cls), member, f"cannot resolve annotations: {exc}") from exc

    def _return_type(self, cls: type, func: Callable[..., Any]) -> Any:
        return self._resolve(cls, func).get("return", inspect.Parameter.empty)

    def _value_type(self, cls: type, func: Callable[..., Any]) -> Any:
        """Annotation of a mutator's single value parameter."""
        hints = self._resolve(cls, func)
        parameters = list(inspect.signature(func).parameters.values())
        if len(parameters) < 2:
            return inspect.Parameter.empty
        return hints.get(parameters[1].name, inspect.Parameter.empty)


def _arity(func: Callable[..., Any]) -> int:
    """Number of parameters besides self; -1 when variadic or keyword-only parameters are involved."""
    parameters = list(inspect.signature(func).parameters.values())[1:]
    if any(p.kind not in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) for p in parameters):
        return -1
    return len(parameters)


def describe_properties(cls: type, settings: BeanunitSettings | None = None) -> tuple[PropertyDescriptor, ...]:
    """Shorthand for PropertyIntrospector(settings).describe(cls)."""
    return PropertyIntrospector(settings).describe(cls)
