"""Vulnerability source backed by `npm audit --json`."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Optional, Sequence

import structlog

from dep_audit.constants import AUDIT_COMMAND, AUDIT_TIMEOUT_SECONDS
from dep_audit.models.scan import VulnerabilityInfo
from dep_audit.resolvers.base import BaseVulnerabilitySource

log = structlog.get_logger("dep_audit.resolvers.audit")


def _severity(entry: Any) -> Optional[str]:
    if not isinstance(entry, dict):
        return None
    severity = entry.get("severity")
    if isinstance(severity, str) and severity:
        return severity
    return None


def parse_audit_output(output: str) -> VulnerabilityInfo:
    """Parse npm audit JSON output into a name to severity mapping.

    Understands the npm 7+ ``vulnerabilities`` section and the npm 6
    ``advisories`` section. Entries without a severity are skipped.

    Args:
        output: Raw stdout of the audit command.

    Returns:
        Mapping of package name to severity. Empty if the output is not a
        JSON object.
    """
    try:
        document = json.loads(output)
    except ValueError:
        return {}
    if not isinstance(document, dict):
        return {}

    result: VulnerabilityInfo = {}

    advisories = document.get("advisories")
    if isinstance(advisories, dict):
        for advisory in advisories.values():
            severity = _severity(advisory)
            if severity is None:
                continue
            module = advisory.get("module_name")
            if isinstance(module, str) and module:
                result[module] = severity

    vulnerabilities = document.get("vulnerabilities")
    if isinstance(vulnerabilities, dict):
        for name, entry in vulnerabilities.items():
            severity = _severity(entry)
            if severity:
                result[name] = severity

    return result


class NpmAuditSource(BaseVulnerabilitySource):
    """Runs the audit command in a project directory and parses its report."""

    def __init__(
        self,
        project_dir: Optional[Path] = None,
        command: Sequence[str] = AUDIT_COMMAND,
        timeout: float = AUDIT_TIMEOUT_SECONDS,
    ) -> None:
        self._project_dir = project_dir or Path.cwd()
        self._command = list(command)
        self._timeout = timeout

    def fetch_all(self) -> VulnerabilityInfo:
        """Run the audit command and return the vulnerable packages.

        npm audit exits non-zero when it finds vulnerabilities, so stdout is
        parsed regardless of the exit code.

        Returns:
            Mapping of package name to severity, empty on any failure.
        """
        try:
            proc = subprocess.run(
                self._command,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                cwd=str(self._project_dir),
                check=False,
            )
        except FileNotFoundError:
            log.warning("audit_tool_missing", command=self._command[0])
            return {}
        except subprocess.TimeoutExpired:
            log.warning("audit_timeout", timeout=self._timeout)
            return {}
        except OSError as e:
            log.warning("audit_failed", error=str(e))
            return {}

        if not proc.stdout or not proc.stdout.strip():
            log.warning(
                "audit_no_output",
                returncode=proc.returncode,
                stderr=(proc.stderr or "").strip()[:200],
            )
            return {}

        vulnerabilities = parse_audit_output(proc.stdout)
        log.debug("audit_parsed", vulnerable=len(vulnerabilities))
        return vulnerabilities


class NullVulnerabilitySource(BaseVulnerabilitySource):
    """Source used when auditing is disabled; reports nothing."""

    def fetch_all(self) -> VulnerabilityInfo:
        return {}
