"""Run configuration loaded from environment variables.

A :class:`MirrorConfig` is an immutable snapshot built once per run and passed
explicitly to every component. Variable names match the container image's
documented interface, so existing deployments keep working.
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ

from gitea_mirror.common.slug import parse_single_repo
from gitea_mirror.discovery.models import FetchOptions
from gitea_mirror.errors import ConfigurationError

_DEFAULT_DELAY_S = 3600
_DEFAULT_INCLUDE = "*"
_DEFAULT_STARRED_ORG = "github"
_DEFAULT_VISIBILITY = "public"
_TRUE_VALUES = frozenset({"true", "TRUE", "1"})

REDACTED = "[REDACTED]"


def _read(variable: str) -> str:
    return os.environ.get(variable, "")


def _read_required(variable: str) -> str:
    value = _read(variable)
    if not value:
        raise ConfigurationError.missing(variable)
    return value


def _read_bool(variable: str) -> bool:
    return _read(variable) in _TRUE_VALUES


def _read_int(variable: str, default: int) -> int:
    raw = _read(variable)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def split_and_trim(value: str) -> tuple[str, ...]:
    """Split a comma-separated list, dropping blank entries.

    Examples
    --------
    >>> split_and_trim(" lib-*, ,app ")
    ('lib-*', 'app')

    """
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubSettings:
    """Source account settings."""

    username: str
    token: str = ""
    skip_forks: bool = False
    private_repositories: bool = False
    mirror_issues: bool = False
    mirror_starred: bool = False
    mirror_organizations: bool = False
    use_specific_user: bool = False
    single_repo: str = ""
    include_orgs: tuple[str, ...] = ()
    exclude_orgs: tuple[str, ...] = ()
    preserve_org_structure: bool = False
    skip_starred_issues: bool = False


@dataclasses.dataclass(frozen=True, slots=True)
class GiteaSettings:
    """Destination instance settings."""

    url: str
    token: str
    organization: str = ""
    visibility: str = _DEFAULT_VISIBILITY
    starred_repos_org: str = _DEFAULT_STARRED_ORG


@dataclasses.dataclass(frozen=True, slots=True)
class MirrorConfig:
    """Immutable configuration snapshot for one mirror run.

    Attributes
    ----------
    github
        Source account identity, credential, and collection toggles.
    gitea
        Destination URL, credential, and organization settings.
    dry_run
        Log intended mutations without issuing them.
    delay
        Seconds to wait between runs when looping.
    include
        Repository name globs; a repository must match at least one.
    exclude
        Repository name globs; a repository matching any is dropped.
    single_run
        Stop after one run instead of looping.

    """

    github: GitHubSettings
    gitea: GiteaSettings
    dry_run: bool = False
    delay: int = _DEFAULT_DELAY_S
    include: tuple[str, ...] = (_DEFAULT_INCLUDE,)
    exclude: tuple[str, ...] = ()
    single_run: bool = False

    @classmethod
    def from_env(cls) -> MirrorConfig:
        """Build configuration from environment variables.

        Raises
        ------
        ConfigurationError
            If a mandatory variable is missing, a feature needs a
            ``GITHUB_TOKEN`` that is not set, or a value is malformed.

        """
        username = _read_required("GITHUB_USERNAME")
        gitea_url = _read_required("GITEA_URL")
        gitea_token = _read_required("GITEA_TOKEN")

        github = GitHubSettings(
            username=username,
            token=_read("GITHUB_TOKEN"),
            skip_forks=_read_bool("SKIP_FORKS"),
            private_repositories=_read_bool("MIRROR_PRIVATE_REPOSITORIES"),
            mirror_issues=_read_bool("MIRROR_ISSUES"),
            mirror_starred=_read_bool("MIRROR_STARRED"),
            mirror_organizations=_read_bool("MIRROR_ORGANIZATIONS"),
            use_specific_user=_read_bool("USE_SPECIFIC_USER"),
            single_repo=_read("SINGLE_REPO").strip(),
            include_orgs=split_and_trim(_read("INCLUDE_ORGS")),
            exclude_orgs=split_and_trim(_read("EXCLUDE_ORGS")),
            preserve_org_structure=_read_bool("PRESERVE_ORG_STRUCTURE"),
            skip_starred_issues=_read_bool("SKIP_STARRED_ISSUES"),
        )
        _validate_github(github)

        visibility = _read("GITEA_ORG_VISIBILITY") or _DEFAULT_VISIBILITY

        gitea = GiteaSettings(
            url=gitea_url.rstrip("/"),
            token=gitea_token,
            organization=_read("GITEA_ORGANIZATION"),
            visibility=visibility,
            starred_repos_org=_read("GITEA_STARRED_ORGANIZATION")
            or _DEFAULT_STARRED_ORG,
        )

        return cls(
            github=github,
            gitea=gitea,
            dry_run=_read_bool("DRY_RUN"),
            delay=_read_int("DELAY", _DEFAULT_DELAY_S),
            include=split_and_trim(_read("INCLUDE") or _DEFAULT_INCLUDE),
            exclude=split_and_trim(_read("EXCLUDE")),
            single_run=_read_bool("SINGLE_RUN"),
        )

    def fetch_options(self) -> FetchOptions:
        """Return the source collection options for this run."""
        return FetchOptions(
            username=self.github.username,
            private_repositories=self.github.private_repositories,
            skip_forks=self.github.skip_forks,
            mirror_starred=self.github.mirror_starred,
            mirror_organizations=self.github.mirror_organizations,
            single_repo=self.github.single_repo,
            include_orgs=self.github.include_orgs,
            exclude_orgs=self.github.exclude_orgs,
            preserve_org_structure=self.github.preserve_org_structure,
            use_specific_user=self.github.use_specific_user,
        )

    def redacted(self) -> dict[str, typ.Any]:
        """Return a JSON-ready view of the configuration with tokens hidden."""
        view = dataclasses.asdict(self)
        view["github"]["token"] = REDACTED
        view["gitea"]["token"] = REDACTED
        return view


def _validate_github(github: GitHubSettings) -> None:
    if github.private_repositories and not github.token:
        raise ConfigurationError.token_required_for_private()

    needs_token = (
        github.mirror_issues
        or github.mirror_starred
        or github.mirror_organizations
        or bool(github.single_repo)
    )
    if needs_token and not github.token:
        raise ConfigurationError.token_required_for_features()

    if github.single_repo:
        try:
            parse_single_repo(github.single_repo)
        except ValueError as exc:
            raise ConfigurationError.invalid_repository(github.single_repo) from exc
