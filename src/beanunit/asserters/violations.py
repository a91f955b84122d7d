"""Raising contract violations with a matching log event."""

from __future__ import annotations

from typing import Any

from beanunit.contracts.enums import ViolationKind
from beanunit.contracts.errors import ContractViolation, type_name
from beanunit.core.logging import get_logger

logger = get_logger(__name__)


def violation(
    kind: ViolationKind,
    cls: Any,
    detail: str,
    *,
    property_name: str | None = None,
    check: str | None = None,
) -> ContractViolation:
    """Build a ContractViolation and log it. The caller raises it.

    Returning instead of raising keeps ``raise violation(...) from exc``
    available at call sites that chain a user-code exception.
    """
    logger.warning(
        "contract_violation",
        kind=kind.value,
        type=type_name(cls),
        property=property_name,
        check=check,
        detail=detail,
    )
    return ContractViolation(kind, type_name(cls), detail, property_name=property_name, check=check)
