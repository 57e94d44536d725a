"""
core/config.py - Central configuration

Immutable defaults, environment helpers, logging configuration and the
provider configuration used to build a ProviderContext.

Usage:
    from core.config import ProviderConfig, settings

    config = ProviderConfig.from_env().merged(project_id="p-123")
    config.validate()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from core.exceptions import ConfigError

PACKAGE_NAME = "quake-inventory"


@dataclass(frozen=True)
class Settings:
    """Immutable defaults"""

    API_TIMEOUT: float = 30.0
    REST_PATH_AVAILABLE_RESOURCES: str = "available-resources"
    REST_SUFFIX: str = "/rest"
    ENV_PREFIX: str = "QUAKE_"


settings = Settings()


def get_version() -> str:
    """Installed package version ("0.0.0" when running from a source tree)"""
    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0"


# =============================================================================
# Environment helpers
# =============================================================================

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def get_env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable (unrecognized values give default)"""
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def get_env_float(name: str, default: float = 0.0) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


# =============================================================================
# Logging
# =============================================================================


@dataclass
class LogConfig:
    """Logging configuration"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        return cls(
            level=os.environ.get("LOG_LEVEL", cls.level).upper(),
            format=os.environ.get("LOG_FORMAT", cls.format),
        )


# =============================================================================
# Provider
# =============================================================================


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for the remote inventory

    Attributes:
        portal_url: fully qualified portal URL
        rest_url: REST API base URL (defaults to portal_url + "/rest")
        token: bearer token passed through to the transport
        project_id: project the inventory is scoped to
        use_gl_token: token is a GreenLake token rather than a portal token
        timeout: per-request timeout in seconds
        inventory_file: read the payload from a file instead of the REST API
    """

    portal_url: str = ""
    rest_url: str = ""
    token: str = field(default="", repr=False)
    project_id: str = ""
    use_gl_token: bool = False
    timeout: float = settings.API_TIMEOUT
    inventory_file: str = ""

    @classmethod
    def from_env(cls) -> ProviderConfig:
        prefix = settings.ENV_PREFIX
        return cls(
            portal_url=os.environ.get(f"{prefix}PORTAL_URL", ""),
            rest_url=os.environ.get(f"{prefix}REST_URL", ""),
            token=os.environ.get(f"{prefix}TOKEN", ""),
            project_id=os.environ.get(f"{prefix}PROJECT", ""),
            use_gl_token=get_env_bool(f"{prefix}GL_TOKEN", False),
            timeout=get_env_float(f"{prefix}TIMEOUT", settings.API_TIMEOUT),
            inventory_file=os.environ.get(f"{prefix}INVENTORY_FILE", ""),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> ProviderConfig:
        """Load a YAML configuration file

        Keys match the attribute names; unknown keys are a ConfigError.
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(str(path), "cannot read configuration file", cause=e) from e
        except UnicodeDecodeError as e:
            raise ConfigError(str(path), "configuration file is not valid UTF-8", cause=e) from e
        except yaml.YAMLError as e:
            raise ConfigError(str(path), "invalid YAML", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigError(str(path), "configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(unknown[0], f"unknown configuration key in {path}")

        return cls().merged(**data)

    def merged(self, **overrides: Any) -> ProviderConfig:
        """Copy with every non-empty override applied"""
        values = {key: value for key, value in overrides.items() if value not in (None, "")}
        if "timeout" in values:
            try:
                values["timeout"] = float(values["timeout"])
            except (TypeError, ValueError) as e:
                raise ConfigError("timeout", f"not a number: {values['timeout']!r}", cause=e) from e
        return replace(self, **values)

    def resolved_rest_url(self) -> str:
        if self.rest_url:
            return self.rest_url
        if self.portal_url:
            return self.portal_url.rstrip("/") + settings.REST_SUFFIX
        return ""

    def validate(self) -> None:
        """Raise ConfigError when no inventory endpoint is configured"""
        if self.timeout <= 0:
            raise ConfigError("timeout", "must be positive")
        if not self.inventory_file and not self.resolved_rest_url():
            raise ConfigError("rest_url", "set rest_url, portal_url or inventory_file")
