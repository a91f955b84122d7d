"""Classification of declared types.

Answers two questions the asserters ask about every property:
- Does the declared type admit None? (drives the null walk in equality checks)
- Is it value-semantic? (round-trips compare with == instead of identity)
"""

from __future__ import annotations

import types
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Annotated, Any, Literal, Union, get_args, get_origin

NONE_TYPE = type(None)

# Immutable scalars whose instances are interchangeable when equal. A getter
# may legitimately hand back an equal-but-distinct object for these (interned
# ints, re-parsed Decimals), so round-trips compare by equality.
VALUE_SEMANTIC_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    Fraction,
    date,
    datetime,
    time,
    timedelta,
    uuid.UUID,
    Enum,
    NONE_TYPE,
)


def is_union(declared_type: Any) -> bool:
    """True for typing.Union[...] and PEP 604 ``X | Y`` unions."""
    origin = get_origin(declared_type)
    return origin is Union or origin is types.UnionType


def unwrap_annotated(declared_type: Any) -> Any:
    """Strip Annotated[X, ...] down to X."""
    while get_origin(declared_type) is Annotated:
        declared_type = get_args(declared_type)[0]
    return declared_type


def is_nullable(declared_type: Any) -> bool:
    """Whether None is a legal value for declared_type."""
    declared_type = unwrap_annotated(declared_type)
    if declared_type is None or declared_type is NONE_TYPE:
        return True
    if is_union(declared_type):
        return any(arg is NONE_TYPE for arg in get_args(declared_type))
    if get_origin(declared_type) is Literal:
        return any(arg is None for arg in get_args(declared_type))
    return False


def strip_optional(declared_type: Any) -> Any:
    """Reduce Optional[X] to X; other unions reduce to their first non-None member."""
    declared_type = unwrap_annotated(declared_type)
    if is_union(declared_type):
        members = [arg for arg in get_args(declared_type) if arg is not NONE_TYPE]
        if members:
            return unwrap_annotated(members[0])
    return declared_type


def has_value_semantics(declared_type: Any) -> bool:
    """Whether round-trips of declared_type compare by equality rather than identity."""
    base = strip_optional(declared_type)
    if get_origin(base) is Literal:
        return True
    return isinstance(base, type) and issubclass(base, VALUE_SEMANTIC_TYPES)


def same_value(declared_type: Any, expected: Any, actual: Any) -> bool:
    """Compare a written value with what was read back, per declared_type's semantics."""
    if has_value_semantics(declared_type):
        return bool(expected == actual)
    return actual is expected
