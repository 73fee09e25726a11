"""Default configuration values for dep-audit."""

from __future__ import annotations

from dep_audit.models.config import AuditConfig

# Configuration file names to search for, in precedence order.
# The first name is also where a new configuration is written.
DEFAULT_CONFIG_NAMES = [".dep-audit.json", ".dep-audit.yaml", ".dep-audit.yml"]


def get_default_config() -> AuditConfig:
    """Get the default configuration.

    Returns:
        AuditConfig with no ignored packages and the default allow-list.
    """
    return AuditConfig()
