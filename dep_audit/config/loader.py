"""Configuration file discovery, loading and saving for dep-audit."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml
from pydantic import ValidationError

from dep_audit.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from dep_audit.exceptions import ConfigurationError
from dep_audit.models.config import AuditConfig

log = structlog.get_logger("dep_audit.config")


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in (".yaml", ".yml")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file in the specified directory.

    Searches for `.dep-audit.json`, then `.dep-audit.yaml`, then
    `.dep-audit.yml`.

    Args:
        start_dir: Directory to search. Defaults to current working directory.

    Returns:
        Path to the configuration file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        config_path = search_dir / name
        if config_path.exists():
            return config_path
    return None


def load_config_file(path: Path) -> AuditConfig:
    """Load and validate configuration from a JSON or YAML file.

    Args:
        path: Path to the configuration file.

    Returns:
        Validated AuditConfig instance.

    Raises:
        ConfigurationError: If file cannot be read, has invalid syntax,
            or fails Pydantic validation.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e

    # Handle empty files - return default config
    if not content.strip():
        return get_default_config()

    data: Any
    if _is_yaml(path):
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e
    else:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON syntax in '{path}': {e}") from e

    # YAML that parses to None (just comments)
    if data is None:
        return get_default_config()

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )

    try:
        return AuditConfig.model_validate(data)
    except ValidationError as e:
        error_messages = _format_validation_errors(e)
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {error_messages}"
        ) from e


def _format_validation_errors(error: ValidationError) -> str:
    """Format Pydantic validation errors into a readable string.

    Args:
        error: The Pydantic ValidationError.

    Returns:
        Formatted error message string.
    """
    messages: list[str] = []
    for err in error.errors():
        loc = ".".join(str(x) for x in err["loc"]) if err["loc"] else "root"
        msg = err["msg"]
        messages.append(f"{loc}: {msg}")
    return "; ".join(messages)


def load_config(
    project_dir: Path | None = None, config_path: str | None = None
) -> AuditConfig:
    """Load configuration, falling back to defaults.

    Never raises: a missing, unreadable or invalid file yields the
    default configuration.

    Args:
        project_dir: Directory to search. Defaults to current working directory.
        config_path: Optional explicit configuration file path.

    Returns:
        AuditConfig with loaded or default values.
    """
    path = Path(config_path) if config_path else find_config_file(project_dir)
    if path is None or not path.exists():
        return get_default_config()

    try:
        return load_config_file(path)
    except ConfigurationError as e:
        log.warning("config_invalid_using_defaults", path=str(path), error=str(e))
        return get_default_config()


def save_config(
    config: AuditConfig,
    project_dir: Path | None = None,
    path: Path | None = None,
) -> Path:
    """Persist the full configuration, overwriting any previous file.

    Writes to the existing configuration file when one is found, keeping
    its format, otherwise to `.dep-audit.json`.

    Args:
        config: Configuration to persist.
        project_dir: Project directory. Defaults to current working directory.
        path: Optional explicit file path.

    Returns:
        Path the configuration was written to.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    target = path or find_config_file(project_dir)
    if target is None:
        target = (project_dir or Path.cwd()) / DEFAULT_CONFIG_NAMES[0]

    document = config.to_document()
    if _is_yaml(target):
        content = yaml.safe_dump(document, sort_keys=False)
    else:
        content = json.dumps(document, indent=2) + "\n"

    try:
        target.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot write configuration file '{target}': {e}"
        ) from e

    log.debug("config_saved", path=str(target))
    return target


def update_config(
    ignore: Optional[str] = None,
    add_license: Optional[str] = None,
    project_dir: Path | None = None,
) -> AuditConfig:
    """Load the configuration, append the given values and save it.

    With neither value given this is a plain re-save of the current
    configuration.

    Args:
        ignore: Package name to add to the ignored packages.
        add_license: License identifier to add to the allow-list.
        project_dir: Project directory. Defaults to current working directory.

    Returns:
        The configuration that was saved.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    config = load_config(project_dir)
    if ignore:
        config = config.with_ignored(ignore)
    if add_license:
        config = config.with_license(add_license)
    save_config(config, project_dir)
    return config
