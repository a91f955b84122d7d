"""Core infrastructure: configuration, logging, type defaults, introspection, construction."""

from beanunit.core.config import BeanunitSettings, configure_settings, get_settings, load_settings
from beanunit.core.construction import (
    build_instance,
    build_pair,
    construct,
    designated_constructor,
    primary_constructor,
)
from beanunit.core.introspection import PropertyIntrospector, describe_properties
from beanunit.core.logging import configure_logging, get_logger
from beanunit.core.registry import (
    TypeDefaultRegistry,
    get_default_registry,
    isolated_registry,
    register_type_and_default_argument,
    reset_to_default_types,
)

__all__ = [
    "BeanunitSettings",
    "PropertyIntrospector",
    "TypeDefaultRegistry",
    "build_instance",
    "build_pair",
    "configure_logging",
    "configure_settings",
    "construct",
    "describe_properties",
    "designated_constructor",
    "get_default_registry",
    "get_logger",
    "get_settings",
    "isolated_registry",
    "load_settings",
    "primary_constructor",
    "register_type_and_default_argument",
    "reset_to_default_types",
]
