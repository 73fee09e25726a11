"""Configuration Pydantic models for dep-audit."""
from __future__ import annotations

from pydantic import BaseModel, Field

from dep_audit.constants import DEFAULT_ALLOWED_LICENSES


def _append_unique(values: tuple[str, ...], value: str) -> tuple[str, ...]:
    if value in values:
        return values
    return (*values, value)


class AuditConfig(BaseModel):
    """User preferences for dependency audits.

    Persisted as ``{"ignored": [...], "allowedLicenses": [...]}``. A key
    missing from the persisted document takes its default; unknown keys
    are ignored.
    """

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    ignored_packages: tuple[str, ...] = Field(
        default=(),
        alias="ignored",
        description="Package names to skip during scanning.",
    )
    allowed_licenses: tuple[str, ...] = Field(
        default=DEFAULT_ALLOWED_LICENSES,
        alias="allowedLicenses",
        description="License identifiers considered compliant.",
    )

    def with_ignored(self, package_name: str) -> AuditConfig:
        """Return a copy with package_name added to the ignored packages."""
        return self.model_copy(
            update={
                "ignored_packages": _append_unique(self.ignored_packages, package_name)
            }
        )

    def with_license(self, license_id: str) -> AuditConfig:
        """Return a copy with license_id added to the allowed licenses."""
        return self.model_copy(
            update={
                "allowed_licenses": _append_unique(self.allowed_licenses, license_id)
            }
        )

    def to_document(self) -> dict[str, list[str]]:
        """Serialize to the persisted document shape."""
        return self.model_dump(by_alias=True, mode="json")
