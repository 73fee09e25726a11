"""Scan-related Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

# Mapping of package name to audit severity
VulnerabilityInfo = dict[str, str]


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"


class DependencyVerdict(BaseModel):
    """Classification of one declaration after cross-referencing.

    Serialized with the camelCase field names used in the report file.
    """

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    name: str = Field(description="Package name")
    declared_version: str = Field(
        alias="declaredVersion", description="Version declared in the manifest"
    )
    latest_version: str = Field(
        alias="latestVersion", description="Latest registry version or Unknown"
    )
    is_outdated: bool = Field(
        alias="isOutdated", description="Declared version differs from latest"
    )
    vulnerability_severity: Optional[str] = Field(
        default=None,
        alias="vulnerabilitySeverity",
        description="Audit severity, None when no known vulnerability",
    )
    license: str = Field(description="Declared license or Unknown")
    is_license_allowed: bool = Field(
        alias="isLicenseAllowed", description="License is in the allow-list"
    )

    @property
    def is_vulnerable(self) -> bool:
        """Check if the audit reported a vulnerability for this package."""
        return bool(self.vulnerability_severity)


class AuditSummary(BaseModel):
    """Summary counts for an audit report."""

    model_config = {"frozen": True, "extra": "forbid"}

    total: int = Field(default=0, description="Dependencies audited")
    outdated: int = Field(default=0, description="Outdated dependencies")
    vulnerable: int = Field(default=0, description="Dependencies with vulnerabilities")
    non_compliant: int = Field(default=0, description="Non-compliant licenses")


class AuditReport(BaseModel):
    """The ordered verdicts produced by one scan."""

    model_config = {"frozen": True, "extra": "forbid"}

    verdicts: list[DependencyVerdict] = Field(
        default_factory=list,
        description="Verdicts in declaration order",
    )

    @property
    def outdated(self) -> list[DependencyVerdict]:
        return [v for v in self.verdicts if v.is_outdated]

    @property
    def vulnerable(self) -> list[DependencyVerdict]:
        return [v for v in self.verdicts if v.is_vulnerable]

    @property
    def non_compliant(self) -> list[DependencyVerdict]:
        return [v for v in self.verdicts if not v.is_license_allowed]

    @property
    def summary(self) -> AuditSummary:
        """Count verdicts per flagged condition.

        Returns:
            AuditSummary with total, outdated, vulnerable and
            non-compliant counts.
        """
        return AuditSummary(
            total=len(self.verdicts),
            outdated=len(self.outdated),
            vulnerable=len(self.vulnerable),
            non_compliant=len(self.non_compliant),
        )

    def to_document(self) -> list[dict[str, object]]:
        """Serialize to the persisted report shape."""
        return [v.model_dump(by_alias=True, mode="json") for v in self.verdicts]


class ScanOutcome(BaseModel):
    """Result of a scan run: the report plus packages skipped by config."""

    model_config = {"frozen": True, "extra": "forbid"}

    report: AuditReport = Field(default_factory=AuditReport)
    ignored_names: list[str] = Field(
        default_factory=list,
        description="Declared packages skipped because they are ignored",
    )
