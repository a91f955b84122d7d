"""
Settings for the verification engine.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from beanunit.core.logging import configure_logging, set_package_level


class BeanunitSettings(BaseModel):
    """Engine behaviour switches.

    Example YAML:
        null_checks: true
        method_accessors: true
        include_private: false
        log_level: DEBUG
    """

    model_config = {"frozen": True, "extra": "forbid"}

    null_checks: bool = Field(
        default=True,
        description="Repeat the equality divergence/convergence walk with None for Optional properties",
    )
    method_accessors: bool = Field(
        default=True,
        description="Discover get_x()/is_x()/set_x(value) method pairs as properties",
    )
    include_private: bool = Field(
        default=False,
        description="Introspect names starting with an underscore",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Level for beanunit's own structured log events",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log events as JSON instead of console text",
    )

    def apply_logging(self) -> None:
        """Configure the beanunit logger tree from these settings."""
        configure_logging(json_output=self.json_logs, level=self.log_level)


def load_settings(config_path: Path | None = None) -> BeanunitSettings:
    """Load settings from an optional YAML file with environment overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (BEANUNIT_*) - highest priority
    2. Config file, when given
    3. Defaults from the Pydantic schema - lowest priority

    Args:
        config_path: Path to a YAML configuration file, or None for environment only

    Returns:
        Validated BeanunitSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="BEANUNIT",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
    )

    # Dynaconf returns uppercase keys mixed with its own bookkeeping entries
    # (LOAD_DOTENV, ENVIRONMENTS, ...); keep only the keys this schema owns
    known_keys = set(BeanunitSettings.model_fields)
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k.lower() in known_keys}
    if "log_level" in raw_config and isinstance(raw_config["log_level"], str):
        raw_config["log_level"] = raw_config["log_level"].upper()
    return BeanunitSettings(**raw_config)


_settings: BeanunitSettings | None = None


def get_settings() -> BeanunitSettings:
    """Process-wide settings, loaded from the environment on first use.

    The first load also applies log_level to the "beanunit" logger.
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
        set_package_level(_settings.log_level)
    return _settings


def configure_settings(settings: BeanunitSettings | None) -> None:
    """Replace the process-wide settings.

    Passing None drops the cached settings so the next get_settings()
    reloads them from the environment.
    """
    global _settings
    _settings = settings
