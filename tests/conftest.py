"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from tests.helpers.fakes import FakeDestination, FakeLogger, FakeSource

if typ.TYPE_CHECKING:
    import types

_ENV_VARS = (
    "GITHUB_USERNAME",
    "GITHUB_TOKEN",
    "GITEA_URL",
    "GITEA_TOKEN",
    "GITEA_ORGANIZATION",
    "GITEA_ORG_VISIBILITY",
    "GITEA_STARRED_ORGANIZATION",
    "MIRROR_PRIVATE_REPOSITORIES",
    "MIRROR_ISSUES",
    "MIRROR_STARRED",
    "MIRROR_ORGANIZATIONS",
    "USE_SPECIFIC_USER",
    "SINGLE_REPO",
    "INCLUDE_ORGS",
    "EXCLUDE_ORGS",
    "PRESERVE_ORG_STRUCTURE",
    "SKIP_STARRED_ISSUES",
    "SKIP_FORKS",
    "DRY_RUN",
    "DELAY",
    "INCLUDE",
    "EXCLUDE",
    "SINGLE_RUN",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every mirror variable from the environment."""
    for variable in _ENV_VARS:
        monkeypatch.delenv(variable, raising=False)
    return monkeypatch


@pytest.fixture
def source() -> FakeSource:
    """Provide an empty in-memory source client."""
    return FakeSource()


@pytest.fixture
def destination() -> FakeDestination:
    """Provide an empty in-memory destination."""
    return FakeDestination()


@pytest.fixture
def capture_logs(
    monkeypatch: pytest.MonkeyPatch,
) -> typ.Callable[[types.ModuleType], FakeLogger]:
    """Return a function replacing a module's logger with a recorder."""

    def _capture(module: types.ModuleType) -> FakeLogger:
        fake = FakeLogger()
        monkeypatch.setattr(module, "logger", fake)
        return fake

    return _capture
