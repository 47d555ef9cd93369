"""TOML-based profile and credential configuration.

Loads ``config.toml`` and ``credential.toml`` from the per-user configuration
directory (``~/.ucloud`` unless ``UCLOUD_CONFIG_DIR`` is set), merges them and
resolves a named profile, letting ``UCLOUD_*`` environment variables win.

Example ``config.toml``::

    active = "default"

    [profiles.default]
    region = "cn-bj2"
    zone = "cn-bj2-05"
    project_id = "org-xxxxxx"

Example ``credential.toml``::

    [profiles.default]
    public_key = "..."
    private_key = "..."
"""

from __future__ import annotations

import dataclasses
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias

from loguru import logger

from ucloudctl.core.exceptions import ConfigurationError

RawConfig: TypeAlias = dict[str, Any]

CONFIG_DIR_NAME = ".ucloud"
CONFIG_FILE_NAME = "config.toml"
CREDENTIAL_FILE_NAME = "credential.toml"
DEFAULT_PROFILE = "default"
DEFAULT_BASE_URL = "https://api.ucloud.cn"

_ENV_OVERRIDES = {
    "UCLOUD_PUBLIC_KEY": "public_key",
    "UCLOUD_PRIVATE_KEY": "private_key",
    "UCLOUD_REGION": "region",
    "UCLOUD_ZONE": "zone",
    "UCLOUD_PROJECT_ID": "project_id",
    "UCLOUD_BASE_URL": "base_url",
}

log = logger.bind(component="config")


@dataclass(frozen=True, slots=True)
class Profile:
    """Resolved settings for one named profile."""

    name: str = DEFAULT_PROFILE
    public_key: str = ""
    private_key: str = ""
    region: str = "cn-bj2"
    zone: str = ""
    project_id: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 15.0
    max_retries: int = 3

    def require_credentials(self) -> Profile:
        if not self.public_key or not self.private_key:
            raise ConfigurationError(
                f"Profile '{self.name}' has no credentials. Set public_key/private_key in "
                f"{CREDENTIAL_FILE_NAME} or UCLOUD_PUBLIC_KEY/UCLOUD_PRIVATE_KEY."
            )
        return self


def config_dir(path: Path | None = None, *, create: bool = False) -> Path:
    """Return the configuration directory, optionally creating it."""
    resolved = path or Path(os.environ.get("UCLOUD_CONFIG_DIR") or Path.home() / CONFIG_DIR_NAME)
    if create and not resolved.exists():
        resolved.mkdir(mode=0o755, parents=True)
    return resolved


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        log.debug("Config file not found: {path}", path=path)
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e


def load_config(directory: Path | None = None) -> RawConfig:
    """Read and merge config.toml and credential.toml."""
    base = config_dir(directory)
    merged = _deep_merge(
        _read_toml(base / CONFIG_FILE_NAME),
        _read_toml(base / CREDENTIAL_FILE_NAME),
    )
    merged.setdefault("profiles", {})
    return merged


def _coerce(raw: RawConfig) -> RawConfig:
    valid = {f.name: f.type for f in dataclasses.fields(Profile)}
    filtered = {k: v for k, v in raw.items() if k in valid}
    profile_name = raw.get("name", DEFAULT_PROFILE)
    for key, value in list(filtered.items()):
        try:
            match valid[key], value:
                case "float", str() | int():
                    filtered[key] = float(value)
                case "int", str():
                    filtered[key] = int(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {key} in profile '{profile_name}': {value!r}"
            ) from e
    return filtered


def load_profile(name: str | None = None, *, directory: Path | None = None) -> Profile:
    """Resolve a profile from files and environment.

    Priority (highest to lowest):
    1. Environment variables (UCLOUD_PUBLIC_KEY, UCLOUD_REGION, ...)
    2. The profile section in config.toml / credential.toml
    3. Defaults

    Raises:
        ConfigurationError: If a profile was explicitly requested but does not exist.
    """
    config = load_config(directory)
    profiles: RawConfig = config["profiles"]

    explicit = name or os.environ.get("UCLOUD_PROFILE")
    profile_name = explicit or config.get("active") or DEFAULT_PROFILE
    if explicit and explicit not in profiles:
        raise ConfigurationError(
            f"Profile '{explicit}' not found. Available: {', '.join(profiles) or 'none'}"
        )

    raw = dict(profiles.get(profile_name, {}))
    for env_key, field_name in _ENV_OVERRIDES.items():
        if value := os.environ.get(env_key):
            raw[field_name] = value

    raw["name"] = profile_name
    return Profile(**_coerce(raw))
