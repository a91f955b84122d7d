"""Building instances of the class under test.

Two paths:
- instantiate(): the bean path, a constructor callable with no arguments
- construct(): the designated constructor, fed values from the registry

A class may offer several constructor signatures (``typing.overload``
stubs of ``__init__``, or classmethod factories). When more than one
qualifies, exactly one must be marked with @primary_constructor.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Callable
from typing import Any, TypeVar, get_overloads, get_type_hints

from pydantic import BaseModel

from beanunit.contracts.errors import (
    AmbiguousConstructorError,
    IntrospectionError,
    NotConstructibleError,
    type_name,
)
from beanunit.contracts.properties import ConstructorParameter, ConstructorSpec, describe_signature
from beanunit.core.logging import get_logger
from beanunit.core.registry import TypeDefaultRegistry

logger = get_logger(__name__)

F = TypeVar("F")

PRIMARY_MARKER = "__beanunit_primary__"


def primary_constructor(func: F) -> F:
    """Mark a constructor signature as the one the engine should use.

    Works on ``__init__`` overload stubs and on classmethod factories.
    With @overload it must sit BELOW the overload decorator, because
    overload replaces the function it returns:

        @overload
        @primary_constructor
        def __init__(self, city: str) -> None: ...

        @classmethod
        @primary_constructor
        def from_row(cls, row: dict[str, str]) -> "Address": ...
    """
    target = func.__func__ if isinstance(func, classmethod) else func
    setattr(target, PRIMARY_MARKER, True)
    return func


def _is_primary(func: Any) -> bool:
    return bool(getattr(func, PRIMARY_MARKER, False))


def _requires_arguments(signature: inspect.Signature) -> bool:
    return any(
        p.default is inspect.Parameter.empty and p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


def instantiate(cls: type) -> Any:
    """Construct cls with no arguments.

    Raises:
        NotConstructibleError: If cls is abstract, needs arguments, or its constructor raises
    """
    if not inspect.isclass(cls):
        raise NotConstructibleError(type_name(cls), "not a class")
    if inspect.isabstract(cls):
        raise NotConstructibleError(type_name(cls), "class is abstract")
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        signature = None
    if signature is not None and _requires_arguments(signature):
        raise NotConstructibleError(
            type_name(cls),
            f"no zero-argument constructor, signature is {type_name(cls)}{signature}",
        )
    try:
        return cls()
    except Exception as exc:
        raise NotConstructibleError(type_name(cls), f"constructor raised {type(exc).__name__}: {exc}") from exc


def has_zero_argument_constructor(cls: type) -> bool:
    """Whether instantiate(cls) can succeed, judged without calling anything."""
    if inspect.isabstract(cls):
        return False
    try:
        return not _requires_arguments(inspect.signature(cls))
    except (TypeError, ValueError):
        return True


# =============================================================================
# Designated constructor
# =============================================================================


def _parameter_hints(cls: type, func: Callable[..., Any] | None) -> dict[str, Any]:
    """Resolved parameter annotations for a constructor of cls."""
    if issubclass(cls, BaseModel) and (func is None or func is BaseModel.__init__):
        return {name: info.annotation for name, info in cls.model_fields.items()}
    localns = {cls.__name__: cls}
    hints: dict[str, Any] = {}
    try:
        if func is None:
            # Default __init__: dataclasses and annotated classes describe
            # their parameters through class annotations
            hints.update(get_type_hints(cls, localns=localns))
            init = cls.__init__
            if inspect.isfunction(init) and not dataclasses.is_dataclass(cls):
                hints.update(get_type_hints(init, localns=localns))
        else:
            hints.update(get_type_hints(func, localns=localns))
    except (NameError, TypeError) as exc:
        raise IntrospectionError(type_name(cls), "__init__", f"cannot resolve constructor annotations: {exc}") from exc
    return hints


def _spec_from_signature(
    cls: type,
    factory: Callable[..., Any],
    signature: inspect.Signature,
    hints: dict[str, Any],
    label: str,
) -> ConstructorSpec:
    parameters = []
    for p in signature.parameters.values():
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
            continue
        declared = hints.get(p.name, Any)
        if declared is Any and p.annotation is not inspect.Parameter.empty and not isinstance(p.annotation, str):
            declared = p.annotation
        parameters.append(
            ConstructorParameter(
                name=p.name,
                declared_type=declared,
                positional_only=p.kind is p.POSITIONAL_ONLY,
            )
        )
    return ConstructorSpec(owner=cls, factory=factory, parameters=tuple(parameters), label=label)


def _bound_signature(func: Callable[..., Any]) -> inspect.Signature:
    """Signature of an unbound method with its first (self/cls) parameter dropped."""
    signature = inspect.signature(func)
    parameters = list(signature.parameters.values())[1:]
    return signature.replace(parameters=parameters)


def _candidates(cls: type) -> list[tuple[ConstructorSpec, bool]]:
    candidates: list[tuple[ConstructorSpec, bool]] = []

    init = cls.__init__
    overloads = get_overloads(init) if inspect.isfunction(init) else []
    if overloads:
        for stub in overloads:
            candidates.append(
                (
                    _spec_from_signature(
                        cls, cls, _bound_signature(stub), _parameter_hints(cls, stub), describe_signature(stub)
                    ),
                    _is_primary(stub),
                )
            )
    else:
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError) as exc:
            raise IntrospectionError(type_name(cls), "__init__", f"constructor signature unavailable: {exc}") from exc
        candidates.append(
            (
                _spec_from_signature(cls, cls, signature, _parameter_hints(cls, None), f"__init__{signature}"),
                _is_primary(init),
            )
        )

    seen: set[str] = set()
    for klass in cls.__mro__:
        for name, member in vars(klass).items():
            if not isinstance(member, classmethod) or name in seen:
                continue
            seen.add(name)
            if _is_primary(member.__func__):
                func = member.__func__
                candidates.append(
                    (
                        _spec_from_signature(
                            cls,
                            getattr(cls, name),
                            _bound_signature(func),
                            _parameter_hints(cls, func),
                            describe_signature(func),
                        ),
                        True,
                    )
                )
    return candidates


def designated_constructor(cls: type) -> ConstructorSpec:
    """The single constructor the engine should use for cls.

    Raises:
        NotConstructibleError: If cls is not a concrete class
        AmbiguousConstructorError: If several candidates exist and not exactly one is primary
    """
    if not inspect.isclass(cls):
        raise NotConstructibleError(type_name(cls), "not a class")
    if inspect.isabstract(cls):
        raise NotConstructibleError(type_name(cls), "class is abstract")

    candidates = _candidates(cls)
    if len(candidates) == 1:
        return candidates[0][0]
    primary = [spec for spec, marked in candidates if marked]
    if len(primary) == 1:
        return primary[0]
    raise AmbiguousConstructorError(type_name(cls), tuple(spec.label for spec, _ in candidates))


def construct(cls: type, registry: TypeDefaultRegistry) -> tuple[Any, dict[str, Any]]:
    """Build cls through its designated constructor with registry defaults.

    Returns:
        The instance and the arguments it was built from, by parameter name

    Raises:
        UnresolvableTypeError: If a parameter's declared type has no default
        NotConstructibleError: If the constructor raises
    """
    spec = designated_constructor(cls)
    arguments = {p.name: registry.lookup(p.declared_type) for p in spec.parameters}
    try:
        instance = spec.call(arguments)
    except Exception as exc:
        raise NotConstructibleError(
            type_name(cls),
            f"{spec.label} raised {type(exc).__name__}: {exc}",
        ) from exc
    logger.debug("instance_constructed", type=type_name(cls), constructor=spec.label, parameters=sorted(arguments))
    return instance, arguments


def build_instance(cls: type, registry: TypeDefaultRegistry) -> Any:
    """Zero-argument construction when cls allows it, else the designated constructor."""
    if has_zero_argument_constructor(cls):
        return instantiate(cls)
    instance, _ = construct(cls, registry)
    return instance


def build_pair(cls: type, registry: TypeDefaultRegistry) -> tuple[Any, Any]:
    """Two independent instances that should compare equal.

    With the designated constructor both are built from the same
    arguments, so argument types without their own equality still match.
    """
    if has_zero_argument_constructor(cls):
        return instantiate(cls), instantiate(cls)
    spec = designated_constructor(cls)
    first, arguments = construct(cls, registry)
    try:
        second = spec.call(arguments)
    except Exception as exc:
        raise NotConstructibleError(type_name(cls), f"{spec.label} raised {type(exc).__name__}: {exc}") from exc
    return first, second
