"""Tests for Markdown report formatter."""
from datetime import datetime, timezone

from dep_audit.models.scan import AuditReport, DependencyVerdict
from dep_audit.output.report_markdown import ReportMarkdownFormatter

GENERATED_AT = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


def _verdict(name: str, **overrides: object) -> DependencyVerdict:
    data: dict[str, object] = {
        "name": name,
        "declared_version": "1.0.0",
        "latest_version": "1.0.0",
        "is_outdated": False,
        "vulnerability_severity": None,
        "license": "MIT",
        "is_license_allowed": True,
    }
    data.update(overrides)
    return DependencyVerdict(**data)  # type: ignore[arg-type]


class TestReportMarkdownFormatter:
    """Tests for ReportMarkdownFormatter class."""

    def test_full_document(self) -> None:
        """Test the complete document for a two-dependency report."""
        report = AuditReport(
            verdicts=[
                _verdict("lodash", declared_version="4.17.0", latest_version="4.17.21", is_outdated=True),
                _verdict("badlib", vulnerability_severity="high", license="GPL-3.0", is_license_allowed=False),
            ]
        )

        output = ReportMarkdownFormatter().format_report(report, generated_at=GENERATED_AT)

        assert output == (
            "# Dependency Audit Report\n"
            "\n"
            "Generated: 2024-05-01T12:30:00Z\n"
            "\n"
            "## Summary\n"
            "\n"
            "- Total Dependencies: 2\n"
            "- Outdated: 1\n"
            "- Vulnerabilities: 1\n"
            "- Non-Compliant Licenses: 1\n"
            "\n"
            "## Details\n"
            "\n"
            "### lodash@4.17.0\n"
            "\n"
            "- Latest: 4.17.21\n"
            "- Vulnerability: None\n"
            "- License: MIT (Allowed)\n"
            "\n"
            "### badlib@1.0.0\n"
            "\n"
            "- Latest: 1.0.0\n"
            "- Vulnerability: high\n"
            "- License: GPL-3.0 (Not Allowed)\n"
        )

    def test_empty_report(self) -> None:
        output = ReportMarkdownFormatter().format_report(AuditReport(), GENERATED_AT)

        assert "- Total Dependencies: 0" in output
        assert "*No dependencies audited.*" in output

    def test_default_timestamp_is_utc_iso(self) -> None:
        output = ReportMarkdownFormatter().format_report(AuditReport())

        generated = output.splitlines()[2]
        assert generated.startswith("Generated: ")
        assert generated.endswith("Z")
