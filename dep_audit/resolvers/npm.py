"""npm registry metadata fetcher."""

from __future__ import annotations

import os
from typing import Any, Optional
from urllib.parse import quote

import httpx
import structlog

from dep_audit.constants import (
    DEFAULT_REGISTRY_URL,
    REGISTRY_TIMEOUT_SECONDS,
    REGISTRY_URL_ENV,
    UNKNOWN,
)
from dep_audit.exceptions import NetworkError
from dep_audit.models.dependency import PackageMetadata
from dep_audit.resolvers.base import BaseMetadataFetcher

log = structlog.get_logger("dep_audit.resolvers.npm")


def default_registry_url() -> str:
    """Registry base URL, overridable through DEP_AUDIT_REGISTRY_URL."""
    return os.environ.get(REGISTRY_URL_ENV) or DEFAULT_REGISTRY_URL


def package_url(registry_url: str, package_name: str) -> str:
    """Build the packument URL for a package.

    Scoped names keep their leading ``@`` and have the ``/`` encoded,
    e.g. ``@types/node`` becomes ``@types%2Fnode``.
    """
    return f"{registry_url.rstrip('/')}/{quote(package_name, safe='@')}"


async def fetch_packument(
    package_name: str,
    client: httpx.AsyncClient,
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> Optional[dict[str, Any]]:
    """Fetch the registry document for a package.

    Args:
        package_name: The package name to fetch.
        client: httpx.AsyncClient to use.
        registry_url: Registry base URL.

    Returns:
        Registry document dict, or None if the package was not found or the
        response was not a JSON object.

    Raises:
        NetworkError: If the network request fails or the
            registry URL is malformed.
    """
    url = package_url(registry_url, package_name)
    try:
        response = await client.get(
            url, timeout=httpx.Timeout(REGISTRY_TIMEOUT_SECONDS)
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError:
        return None
    except ValueError:
        # Body was not JSON
        return None
    except httpx.InvalidURL as e:
        raise NetworkError(f"Invalid registry URL '{url}': {e}") from e
    except httpx.RequestError as e:
        raise NetworkError(f"Failed to fetch {package_name}: {e}") from e

    return data if isinstance(data, dict) else None


def extract_license(version_entry: Any) -> str:
    """Extract the license identifier from a registry version entry.

    Handles the ``license`` string, the legacy ``{"type": ...}`` object and
    the legacy ``licenses`` list.

    Args:
        version_entry: The registry's metadata for one version.

    Returns:
        License identifier, or UNKNOWN if none is declared.
    """
    if not isinstance(version_entry, dict):
        return UNKNOWN

    candidates: list[Any] = [version_entry.get("license")]
    legacy = version_entry.get("licenses")
    if isinstance(legacy, list):
        candidates.extend(legacy)

    for candidate in candidates:
        if isinstance(candidate, dict):
            candidate = candidate.get("type")
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return UNKNOWN


def extract_metadata(
    packument: Optional[dict[str, Any]], declared_version: str
) -> PackageMetadata:
    """Resolve latest version and declared-version license from a packument.

    Args:
        packument: Registry document for the package.
        declared_version: The version declared in the manifest.

    Returns:
        PackageMetadata, unresolved when the document lacks a latest tag or
        does not list the declared version.
    """
    if not packument:
        return PackageMetadata.unresolved()

    dist_tags = packument.get("dist-tags")
    latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
    versions = packument.get("versions")

    if not isinstance(latest, str) or not latest:
        return PackageMetadata.unresolved()
    if not isinstance(versions, dict) or declared_version not in versions:
        return PackageMetadata.unresolved()

    return PackageMetadata(
        latest_version=latest,
        license=extract_license(versions[declared_version]),
    )


class NpmRegistryFetcher(BaseMetadataFetcher):
    """Fetcher that reads package metadata from the npm registry."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        registry_url: Optional[str] = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Optional shared httpx.AsyncClient. If not provided, a
                client is created per fetch.
            registry_url: Registry base URL. Defaults to the npm registry.
        """
        self._client = client
        self._registry_url = registry_url or default_registry_url()

    async def fetch(self, package_name: str, declared_version: str) -> PackageMetadata:
        """Fetch latest version and license for a declared package.

        Args:
            package_name: The package name to look up.
            declared_version: The version declared in the manifest.

        Returns:
            PackageMetadata, unresolved on any network or lookup failure.
        """
        try:
            if self._client is not None:
                packument = await fetch_packument(
                    package_name, self._client, self._registry_url
                )
            else:
                async with httpx.AsyncClient() as client:
                    packument = await fetch_packument(
                        package_name, client, self._registry_url
                    )
        except NetworkError as e:
            log.debug("registry_unreachable", package=package_name, error=str(e))
            return PackageMetadata.unresolved()

        metadata = extract_metadata(packument, declared_version)
        if not metadata.is_resolved:
            log.debug(
                "registry_metadata_unresolved",
                package=package_name,
                version=declared_version,
            )
        return metadata
