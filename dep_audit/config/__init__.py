"""Configuration handling for dep-audit."""
from __future__ import annotations

from dep_audit.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from dep_audit.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
    save_config,
    update_config,
)
from dep_audit.models.config import AuditConfig

__all__ = [
    "AuditConfig",
    "DEFAULT_CONFIG_NAMES",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
    "save_config",
    "update_config",
]
