"""Pydantic data models for dep-audit."""

from dep_audit.models.config import AuditConfig
from dep_audit.models.dependency import DependencyDeclaration, PackageMetadata
from dep_audit.models.scan import (
    AuditReport,
    AuditSummary,
    DependencyVerdict,
    ScanOutcome,
    Verbosity,
    VulnerabilityInfo,
)

__all__ = [
    "AuditConfig",
    "AuditReport",
    "AuditSummary",
    "DependencyDeclaration",
    "DependencyVerdict",
    "PackageMetadata",
    "ScanOutcome",
    "Verbosity",
    "VulnerabilityInfo",
]
