"""Shared fixtures for dep-audit tests."""

import asyncio
import json
from pathlib import Path
from typing import Callable, Optional

import pytest
from click.testing import CliRunner

from dep_audit.models.dependency import PackageMetadata
from dep_audit.models.scan import VulnerabilityInfo
from dep_audit.resolvers.base import BaseMetadataFetcher, BaseVulnerabilitySource


class StubFetcher(BaseMetadataFetcher):
    """Fetcher returning canned metadata, unresolved for unknown names."""

    def __init__(
        self,
        metadata: Optional[dict[str, PackageMetadata]] = None,
        delays: Optional[dict[str, float]] = None,
    ) -> None:
        self.metadata = metadata or {}
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []

    async def fetch(self, package_name: str, declared_version: str) -> PackageMetadata:
        self.calls.append((package_name, declared_version))
        delay = self.delays.get(package_name)
        if delay:
            await asyncio.sleep(delay)
        return self.metadata.get(package_name, PackageMetadata.unresolved())


class StubAuditSource(BaseVulnerabilitySource):
    """Vulnerability source returning a canned mapping."""

    def __init__(self, vulnerabilities: Optional[VulnerabilityInfo] = None) -> None:
        self.vulnerabilities = vulnerabilities or {}
        self.calls = 0

    def fetch_all(self) -> VulnerabilityInfo:
        self.calls += 1
        return dict(self.vulnerabilities)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide an empty project directory as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_manifest(project_dir: Path) -> Callable[..., Path]:
    """Write a package.json into the project directory."""

    def _write(
        dependencies: Optional[dict[str, object]] = None,
        dev_dependencies: Optional[dict[str, object]] = None,
    ) -> Path:
        manifest: dict[str, object] = {"name": "sample-app", "version": "1.0.0"}
        if dependencies is not None:
            manifest["dependencies"] = dependencies
        if dev_dependencies is not None:
            manifest["devDependencies"] = dev_dependencies
        path = project_dir / "package.json"
        path.write_text(json.dumps(manifest), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def stub_fetcher_cls() -> type[StubFetcher]:
    return StubFetcher


@pytest.fixture
def stub_audit_cls() -> type[StubAuditSource]:
    return StubAuditSource
