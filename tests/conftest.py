"""Shared fixtures for launchkit tests."""

from pathlib import Path

import pytest

from launchkit.models import LaunchConfig, ProjectIdentity

from fakes import FakeRunner


@pytest.fixture
def runner() -> FakeRunner:
    """Runner for a brand-new project: no GitHub repo, nothing deployed."""
    fake = FakeRunner()
    fake.set("gh", "repo", "view", returncode=1, stderr="GraphQL: Could not resolve to a Repository")
    fake.set("vercel", "ls", stdout="No deployments found.\n")
    return fake


@pytest.fixture
def config() -> LaunchConfig:
    return LaunchConfig()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "dev" / "nextjs" / "my-app"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def identity(project_dir: Path) -> ProjectIdentity:
    return ProjectIdentity(name="my-app", root_path=project_dir)
