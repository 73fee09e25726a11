"""Declaration and registry metadata models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from dep_audit.constants import UNKNOWN


class DependencyDeclaration(BaseModel):
    """A name/version pair as recorded in the project manifest."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    name: str = Field(min_length=1, description="Package name")
    declared_version: str = Field(
        min_length=1,
        alias="declaredVersion",
        description="Version string exactly as declared in the manifest",
    )


class PackageMetadata(BaseModel):
    """Registry metadata for one declaration.

    ``UNKNOWN`` is a valid terminal value for either field, not an error.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    latest_version: str = Field(
        default=UNKNOWN, description="Version the registry's latest tag points to"
    )
    license: str = Field(
        default=UNKNOWN, description="License declared by the requested version"
    )

    @classmethod
    def unresolved(cls) -> PackageMetadata:
        """Metadata for a package the registry could not resolve."""
        return cls(latest_version=UNKNOWN, license=UNKNOWN)

    @property
    def is_resolved(self) -> bool:
        """Check whether the registry resolved a latest version.

        Returns:
            True if latest_version is known, False otherwise.
        """
        return self.latest_version != UNKNOWN
