"""Tests for report persistence."""
import json
from pathlib import Path

import pytest

from dep_audit.exceptions import ConfigurationError
from dep_audit.models.scan import AuditReport, DependencyVerdict
from dep_audit.report.store import load_report, report_path, save_report


def _verdict(name: str, **overrides: object) -> DependencyVerdict:
    data: dict[str, object] = {
        "name": name,
        "declared_version": "1.0.0",
        "latest_version": "2.0.0",
        "is_outdated": True,
        "vulnerability_severity": None,
        "license": "MIT",
        "is_license_allowed": True,
    }
    data.update(overrides)
    return DependencyVerdict(**data)  # type: ignore[arg-type]


class TestSaveReport:
    """Tests for save_report function."""

    def test_writes_camel_case_array(self, tmp_path: Path) -> None:
        """Test the on-disk report shape."""
        path = save_report([_verdict("lodash", vulnerability_severity="low")], tmp_path)

        assert path == tmp_path / "dependency-audit-report.json"
        assert json.loads(path.read_text()) == [
            {
                "name": "lodash",
                "declaredVersion": "1.0.0",
                "latestVersion": "2.0.0",
                "isOutdated": True,
                "vulnerabilitySeverity": "low",
                "license": "MIT",
                "isLicenseAllowed": True,
            }
        ]

    def test_overwrites_previous_report(self, tmp_path: Path) -> None:
        save_report([_verdict("a"), _verdict("b")], tmp_path)
        save_report([_verdict("c")], tmp_path)

        assert [v.name for v in load_report(tmp_path).verdicts] == ["c"]

    def test_unwritable_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot write report"):
            save_report([], tmp_path / "does-not-exist")


class TestLoadReport:
    """Tests for load_report function."""

    def test_round_trip_preserves_order(self, tmp_path: Path) -> None:
        verdicts = [_verdict("z"), _verdict("a"), _verdict("m")]
        save_report(verdicts, tmp_path)

        report = load_report(tmp_path)

        assert report.verdicts == verdicts

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_report(tmp_path) == AuditReport()

    def test_corrupt_file_is_empty(self, tmp_path: Path) -> None:
        report_path(tmp_path).write_text("{not json")

        assert load_report(tmp_path) == AuditReport()

    def test_wrong_shape_is_empty(self, tmp_path: Path) -> None:
        report_path(tmp_path).write_text(json.dumps([{"name": "a"}]))

        assert load_report(tmp_path) == AuditReport()

    def test_defaults_to_cwd(self, project_dir: Path) -> None:
        save_report([_verdict("a")])

        assert (project_dir / "dependency-audit-report.json").exists()
        assert len(load_report().verdicts) == 1
