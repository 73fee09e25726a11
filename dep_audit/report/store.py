"""Persistence of the audit report file."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

import structlog
from pydantic import TypeAdapter, ValidationError

from dep_audit.constants import REPORT_FILE
from dep_audit.exceptions import ConfigurationError
from dep_audit.models.scan import AuditReport, DependencyVerdict

log = structlog.get_logger("dep_audit.report")

_VERDICTS_ADAPTER = TypeAdapter(list[DependencyVerdict])


def report_path(project_dir: Path | None = None) -> Path:
    """Location of the report file for a project directory."""
    return (project_dir or Path.cwd()) / REPORT_FILE


def save_report(
    verdicts: Iterable[DependencyVerdict], project_dir: Path | None = None
) -> Path:
    """Persist the full ordered verdicts, overwriting any previous report.

    Args:
        verdicts: Verdicts in declaration order.
        project_dir: Project directory. Defaults to current working directory.

    Returns:
        Path of the written report file.

    Raises:
        ConfigurationError: If the report file cannot be written.
    """
    path = report_path(project_dir)
    report = AuditReport(verdicts=list(verdicts))
    content = json.dumps(report.to_document(), indent=2) + "\n"

    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write report file '{path}': {e}") from e

    log.debug("report_saved", path=str(path), verdicts=len(report.verdicts))
    return path


def load_report(project_dir: Path | None = None) -> AuditReport:
    """Load the persisted report.

    Never raises: a missing, unreadable or invalid report file yields an
    empty report.

    Args:
        project_dir: Project directory. Defaults to current working directory.

    Returns:
        AuditReport with the persisted verdicts in their saved order.
    """
    path = report_path(project_dir)
    if not path.exists():
        return AuditReport()

    try:
        content = path.read_text(encoding="utf-8")
        verdicts = _VERDICTS_ADAPTER.validate_json(content)
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        log.warning("report_unreadable", path=str(path), error=str(e))
        return AuditReport()

    return AuditReport(verdicts=verdicts)
