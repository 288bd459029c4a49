"""Configuration management for samplepush.

Settings are layered once at startup and then treated as read-only:
defaults, YAML config file, environment variables, explicit CLI overrides.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from samplepush.core.exceptions import ConfigurationError
from samplepush.core.validation import validate_server_url, validate_timeout, validate_workers

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "samplepush"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

SAMPLES_PATH = "/samples/"
DEFAULT_USER_ID = "-1"
DEFAULT_WORKERS = 1

# Environment variable names
ENV_STORAGE = "SAMPLEPUSH_STORAGE"
ENV_CFS = "SAMPLEPUSH_CFS"
ENV_UID = "SAMPLEPUSH_UID"
ENV_SOURCE = "SAMPLEPUSH_SOURCE"
ENV_COMMENT = "SAMPLEPUSH_COMMENT"
ENV_WORKERS = "SAMPLEPUSH_WORKERS"
ENV_INSECURE = "SAMPLEPUSH_INSECURE"
ENV_TIMEOUT = "SAMPLEPUSH_TIMEOUT"

_TRUE_VALUES = ("true", "1", "yes")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """Immutable run configuration shared by every component."""

    storage_url: str
    cfs_url: Optional[str] = None
    user_id: str = DEFAULT_USER_ID
    source: str = ""
    comment: str = ""
    mime_filter: str = ""
    workers: int = DEFAULT_WORKERS
    recursive: bool = False
    insecure: bool = False
    timeout: Optional[float] = None
    fail_fast: bool = False

    def __post_init__(self) -> None:
        """Validate and normalize URLs and numeric limits."""
        object.__setattr__(self, "storage_url", validate_server_url(self.storage_url, "storage"))
        if self.cfs_url:
            object.__setattr__(self, "cfs_url", validate_server_url(self.cfs_url, "cfs"))
        else:
            object.__setattr__(self, "cfs_url", None)
        validate_workers(self.workers)
        validate_timeout(self.timeout)

    @property
    def storage_endpoint(self) -> str:
        """Full URL samples are PUT to."""
        return self.storage_url + SAMPLES_PATH

    @property
    def verify_ssl(self) -> bool:
        return not self.insecure

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def load(cls, config_path: Optional[Path] = None, **overrides: Any) -> Settings:
        """Load settings with file and environment layering.

        Priority (highest to lowest):
        1. Explicit overrides (CLI flags); None means "not given"
        2. Environment variables
        3. Config file
        4. Defaults

        Args:
            config_path: Optional path to a YAML config file. When omitted,
                the user config file is read if it exists.
            **overrides: Field values that take precedence over everything.

        Returns:
            Validated, immutable settings.

        Raises:
            ConfigurationError: If the config file is unreadable or malformed,
                an environment value is invalid, or no storage URL is set.
        """
        data: dict[str, Any] = {}

        path = config_path or CONFIG_FILE
        if config_path is not None and not path.exists():
            raise ConfigurationError("Config file not found", field="config", value=str(path))
        if path.exists():
            data.update(_load_yaml(path))

        data.update(_load_env())
        data.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

        if not data.get("storage_url"):
            raise ConfigurationError(
                "Storage URL required. Pass --storage or set " + ENV_STORAGE + ".",
                field="storage",
            )

        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid settings: {e}")


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load config: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a mapping", value=str(path))

    # Config files use the CLI flag names
    aliases = {
        "storage": "storage_url",
        "cfs": "cfs_url",
        "uid": "user_id",
        "src": "source",
        "mime": "mime_filter",
        "rec": "recursive",
        "fail-fast": "fail_fast",
    }
    settings = {aliases.get(k, k): v for k, v in data.items()}
    for key in ("recursive", "insecure", "fail_fast"):
        if key in settings:
            settings[key] = _parse_bool(settings[key])
    return settings


def _load_env() -> dict[str, Any]:
    env: dict[str, Any] = {}

    if storage := os.getenv(ENV_STORAGE):
        env["storage_url"] = storage
    if cfs := os.getenv(ENV_CFS):
        env["cfs_url"] = cfs
    if uid := os.getenv(ENV_UID):
        env["user_id"] = uid
    if source := os.getenv(ENV_SOURCE):
        env["source"] = source
    if comment := os.getenv(ENV_COMMENT):
        env["comment"] = comment
    if insecure := os.getenv(ENV_INSECURE):
        env["insecure"] = _parse_bool(insecure)

    try:
        if workers := os.getenv(ENV_WORKERS):
            env["workers"] = int(workers)
        if timeout := os.getenv(ENV_TIMEOUT):
            env["timeout"] = float(timeout)
    except ValueError as e:
        raise ConfigurationError(f"Invalid environment value: {e}")

    return env
