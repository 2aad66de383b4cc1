"""
Runtime Configuration Module

Provides configuration loading and management for histree.
"""

from .runtime import (
    DEFAULT_NAMESPACE,
    AnchorStoreConfig,
    LoggingConfig,
    RuntimeConfig,
    get_default_config,
    get_default_config_template,
    set_default_config,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "AnchorStoreConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "get_default_config",
    "get_default_config_template",
    "set_default_config",
]
