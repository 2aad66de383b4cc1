"""
Runtime Configuration

Central configuration for the verifying client: active namespace, where
trust anchors are persisted, and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "HISTREE_"

DEFAULT_NAMESPACE = "defaultdb"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AnchorStoreConfig:
    """Where and when trust anchors are persisted."""
    path: Optional[str] = None
    autosave: bool = True


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    namespace: str = DEFAULT_NAMESPACE
    anchors: AnchorStoreConfig = field(default_factory=AnchorStoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - HISTREE_NAMESPACE: Active namespace
        - HISTREE_ANCHOR_FILE: Path of the persisted anchor blob
        - HISTREE_ANCHOR_AUTOSAVE: Save anchors after each advance (true/false)
        - HISTREE_LOG_LEVEL: Log level
        - HISTREE_LOG_FILE: Optional log file
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}NAMESPACE"):
            overrides["namespace"] = os.getenv(f"{ENV_PREFIX}NAMESPACE")

        if os.getenv(f"{ENV_PREFIX}ANCHOR_FILE"):
            overrides.setdefault("anchors", {})["path"] = os.getenv(f"{ENV_PREFIX}ANCHOR_FILE")
        if os.getenv(f"{ENV_PREFIX}ANCHOR_AUTOSAVE"):
            overrides.setdefault("anchors", {})["autosave"] = _env_bool(
                os.getenv(f"{ENV_PREFIX}ANCHOR_AUTOSAVE", "true")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        anchors_data = data.get("anchors", {})
        logging_data = data.get("logging", {})

        return cls(
            namespace=data.get("namespace") or DEFAULT_NAMESPACE,
            anchors=AnchorStoreConfig(**anchors_data) if anchors_data else AnchorStoreConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "namespace" in overrides:
            new_config.namespace = overrides["namespace"]

        for key, value in overrides.get("anchors", {}).items():
            setattr(new_config.anchors, key, value)

        for key, value in overrides.get("logging", {}).items():
            setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "namespace": self.namespace,
            "anchors": {
                "path": self.anchors.path,
                "autosave": self.anchors.autosave,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


def get_default_config_template() -> str:
    """Return a YAML configuration template."""
    return (
        "# histree configuration\n"
        f"namespace: {DEFAULT_NAMESPACE}\n"
        "anchors:\n"
        "  path: ~/.config/histree/anchors.json\n"
        "  autosave: true\n"
        "logging:\n"
        "  level: INFO\n"
        "  file: null\n"
    )


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
