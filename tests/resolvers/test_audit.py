"""Tests for the npm audit vulnerability source."""
import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from dep_audit.resolvers.audit import (
    NpmAuditSource,
    NullVulnerabilitySource,
    parse_audit_output,
)

NPM7_OUTPUT = json.dumps(
    {
        "auditReportVersion": 2,
        "vulnerabilities": {
            "badlib": {"name": "badlib", "severity": "high", "via": []},
            "minimist": {"name": "minimist", "severity": "critical", "via": []},
        },
        "metadata": {"vulnerabilities": {"high": 1, "critical": 1}},
    }
)

NPM6_OUTPUT = json.dumps(
    {
        "advisories": {
            "1179": {"module_name": "minimist", "severity": "low"},
            "1500": {"module_name": "yargs-parser", "severity": "moderate"},
        }
    }
)


def _completed(stdout: str, returncode: int = 0) -> MagicMock:
    proc = MagicMock()
    proc.stdout = stdout
    proc.stderr = ""
    proc.returncode = returncode
    return proc


class TestParseAuditOutput:
    """Tests for parse_audit_output function."""

    def test_parses_vulnerabilities_section(self) -> None:
        assert parse_audit_output(NPM7_OUTPUT) == {
            "badlib": "high",
            "minimist": "critical",
        }

    def test_parses_legacy_advisories(self) -> None:
        assert parse_audit_output(NPM6_OUTPUT) == {
            "minimist": "low",
            "yargs-parser": "moderate",
        }

    def test_vulnerabilities_section_wins(self) -> None:
        """Test that the npm 7 section overrides legacy advisories per name."""
        output = json.dumps(
            {
                "advisories": {"1": {"module_name": "a", "severity": "low"}},
                "vulnerabilities": {"a": {"severity": "high"}},
            }
        )

        assert parse_audit_output(output) == {"a": "high"}

    def test_entries_without_severity_skipped(self) -> None:
        output = json.dumps({"vulnerabilities": {"a": {"name": "a"}, "b": "high"}})

        assert parse_audit_output(output) == {}

    def test_no_vulnerabilities_section(self) -> None:
        assert parse_audit_output(json.dumps({"metadata": {}})) == {}

    def test_invalid_json(self) -> None:
        assert parse_audit_output("npm ERR! code ENOLOCK") == {}

    def test_non_object_document(self) -> None:
        assert parse_audit_output("[]") == {}


class TestNpmAuditSource:
    """Tests for NpmAuditSource."""

    def test_runs_in_project_dir(self, tmp_path: Path) -> None:
        """Test that the audit command runs against the project directory."""
        with patch(
            "dep_audit.resolvers.audit.subprocess.run",
            return_value=_completed(NPM7_OUTPUT),
        ) as mock_run:
            result = NpmAuditSource(tmp_path).fetch_all()

        assert result["badlib"] == "high"
        args, kwargs = mock_run.call_args
        assert args[0] == ["npm", "audit", "--json"]
        assert kwargs["cwd"] == str(tmp_path)

    def test_nonzero_exit_with_output_is_parsed(self, tmp_path: Path) -> None:
        """Test that npm audit's non-zero exit on findings is not a failure."""
        with patch(
            "dep_audit.resolvers.audit.subprocess.run",
            return_value=_completed(NPM7_OUTPUT, returncode=1),
        ):
            result = NpmAuditSource(tmp_path).fetch_all()

        assert result == {"badlib": "high", "minimist": "critical"}

    def test_nonzero_exit_without_output(self, tmp_path: Path) -> None:
        with patch(
            "dep_audit.resolvers.audit.subprocess.run",
            return_value=_completed("", returncode=1),
        ):
            assert NpmAuditSource(tmp_path).fetch_all() == {}

    def test_missing_tool(self, tmp_path: Path) -> None:
        """Test that a missing npm executable yields an empty mapping."""
        with patch(
            "dep_audit.resolvers.audit.subprocess.run",
            side_effect=FileNotFoundError("npm"),
        ):
            assert NpmAuditSource(tmp_path).fetch_all() == {}

    def test_timeout(self, tmp_path: Path) -> None:
        with patch(
            "dep_audit.resolvers.audit.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="npm", timeout=1),
        ):
            assert NpmAuditSource(tmp_path, timeout=1).fetch_all() == {}

    def test_custom_command(self, tmp_path: Path) -> None:
        with patch(
            "dep_audit.resolvers.audit.subprocess.run",
            return_value=_completed("{}"),
        ) as mock_run:
            NpmAuditSource(tmp_path, command=("pnpm", "audit", "--json")).fetch_all()

        assert mock_run.call_args[0][0] == ["pnpm", "audit", "--json"]


def test_null_source_reports_nothing() -> None:
    assert NullVulnerabilitySource().fetch_all() == {}
