"""Unit tests for environment configuration loading."""

from __future__ import annotations

import pytest

from gitea_mirror.config import REDACTED, MirrorConfig, split_and_trim
from gitea_mirror.errors import ConfigurationError


@pytest.fixture
def base_env(clean_env: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Set the three mandatory variables."""
    clean_env.setenv("GITHUB_USERNAME", "octo")
    clean_env.setenv("GITEA_URL", "https://gitea.test/")
    clean_env.setenv("GITEA_TOKEN", "gt-token")
    return clean_env


def test_defaults_apply_when_only_mandatory_variables_set(
    base_env: pytest.MonkeyPatch,
) -> None:
    """Optional settings fall back to their documented defaults."""
    del base_env
    config = MirrorConfig.from_env()

    assert config.github.username == "octo"
    assert config.github.token == ""
    assert config.gitea.url == "https://gitea.test", "Trailing slash stripped"
    assert config.gitea.visibility == "public"
    assert config.gitea.starred_repos_org == "github"
    assert config.delay == 3600
    assert config.include == ("*",)
    assert config.exclude == ()
    assert config.dry_run is False
    assert config.single_run is False


@pytest.mark.parametrize(
    "variable", ["GITHUB_USERNAME", "GITEA_URL", "GITEA_TOKEN"]
)
def test_missing_mandatory_variable_is_rejected(
    base_env: pytest.MonkeyPatch, variable: str
) -> None:
    """Each mandatory variable must be present."""
    base_env.delenv(variable)

    with pytest.raises(ConfigurationError, match=variable):
        MirrorConfig.from_env()


def test_private_mirroring_requires_token(base_env: pytest.MonkeyPatch) -> None:
    """Private repositories cannot be listed anonymously."""
    base_env.setenv("MIRROR_PRIVATE_REPOSITORIES", "true")

    with pytest.raises(ConfigurationError, match="private repositories"):
        MirrorConfig.from_env()


@pytest.mark.parametrize(
    ("variable", "value"),
    [
        ("MIRROR_ISSUES", "true"),
        ("MIRROR_STARRED", "TRUE"),
        ("MIRROR_ORGANIZATIONS", "1"),
        ("SINGLE_REPO", "octo/reef"),
    ],
)
def test_token_only_features_require_token(
    base_env: pytest.MonkeyPatch, variable: str, value: str
) -> None:
    """Issue, star, organization, and single-repo modes need a token."""
    base_env.setenv(variable, value)

    with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
        MirrorConfig.from_env()


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("TRUE", True), ("1", True), ("True", False), ("yes", False)],
)
def test_boolean_variables_accept_fixed_spellings(
    base_env: pytest.MonkeyPatch,
    value: str,
    expected: bool,  # noqa: FBT001
) -> None:
    """Only true, TRUE, and 1 enable a flag."""
    base_env.setenv("DRY_RUN", value)

    assert MirrorConfig.from_env().dry_run is expected


def test_lists_and_feature_flags_are_parsed(base_env: pytest.MonkeyPatch) -> None:
    """Comma lists are trimmed and feature flags read."""
    base_env.setenv("GITHUB_TOKEN", "gh-token")
    base_env.setenv("MIRROR_ORGANIZATIONS", "true")
    base_env.setenv("INCLUDE_ORGS", " acme , ,tools")
    base_env.setenv("EXCLUDE_ORGS", "legacy")
    base_env.setenv("INCLUDE", "lib-*,app")
    base_env.setenv("EXCLUDE", "lib-old")
    base_env.setenv("DELAY", "60")
    base_env.setenv("GITEA_ORG_VISIBILITY", "private")
    base_env.setenv("GITEA_STARRED_ORGANIZATION", "stars")

    config = MirrorConfig.from_env()

    assert config.github.include_orgs == ("acme", "tools")
    assert config.github.exclude_orgs == ("legacy",)
    assert config.include == ("lib-*", "app")
    assert config.exclude == ("lib-old",)
    assert config.delay == 60
    assert config.gitea.visibility == "private"
    assert config.gitea.starred_repos_org == "stars"
    options = config.fetch_options()
    assert options.mirror_organizations is True
    assert options.include_orgs == ("acme", "tools")


def test_unparseable_delay_falls_back_to_default(
    base_env: pytest.MonkeyPatch,
) -> None:
    """A non-numeric DELAY keeps the hourly default."""
    base_env.setenv("DELAY", "soon")

    assert MirrorConfig.from_env().delay == 3600


def test_visibility_is_passed_through_verbatim(base_env: pytest.MonkeyPatch) -> None:
    """Organization visibility is left for Gitea to validate."""
    base_env.setenv("GITEA_ORG_VISIBILITY", "secret")

    assert MirrorConfig.from_env().gitea.visibility == "secret"


def test_malformed_single_repo_is_rejected(base_env: pytest.MonkeyPatch) -> None:
    """SINGLE_REPO must reduce to owner/name."""
    base_env.setenv("GITHUB_TOKEN", "gh-token")
    base_env.setenv("SINGLE_REPO", "https://github.com/octo")

    with pytest.raises(ConfigurationError, match="invalid repository URL"):
        MirrorConfig.from_env()


def test_redacted_view_hides_tokens(base_env: pytest.MonkeyPatch) -> None:
    """Tokens never appear in the loggable configuration view."""
    base_env.setenv("GITHUB_TOKEN", "gh-token")

    view = MirrorConfig.from_env().redacted()

    assert view["github"]["token"] == REDACTED
    assert view["gitea"]["token"] == REDACTED
    assert view["github"]["username"] == "octo"
    assert "gh-token" not in repr(view)
    assert "gt-token" not in repr(view)


def test_split_and_trim_drops_blank_entries() -> None:
    """Whitespace-only entries are removed."""
    assert split_and_trim("") == ()
    assert split_and_trim(" a, b ,,") == ("a", "b")
