"""Base fetcher interfaces."""

from abc import ABC, abstractmethod

from dep_audit.models.dependency import PackageMetadata
from dep_audit.models.scan import VulnerabilityInfo


class BaseMetadataFetcher(ABC):
    """Abstract base class for registry metadata fetchers.

    Fetchers are best-effort: any failure is reported through
    PackageMetadata.unresolved() rather than an exception.
    """

    @abstractmethod
    async def fetch(self, package_name: str, declared_version: str) -> PackageMetadata:
        """Fetch registry metadata for a declared package.

        Args:
            package_name: The package name to look up.
            declared_version: The version declared in the manifest.

        Returns:
            PackageMetadata, unresolved if the registry could not answer.
        """


class BaseVulnerabilitySource(ABC):
    """Abstract base class for vulnerability sources."""

    @abstractmethod
    def fetch_all(self) -> VulnerabilityInfo:
        """Return a mapping of package name to severity.

        Returns:
            Mapping of package name to severity string, empty on failure.
        """
