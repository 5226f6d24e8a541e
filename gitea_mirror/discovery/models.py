"""Data transfer objects for repository discovery."""

from __future__ import annotations

import dataclasses

from gitea_mirror.common.slug import repo_slug


@dataclasses.dataclass(frozen=True, slots=True)
class Repository:
    """Normalized view of one source repository.

    ``clone_url`` is the identity key used for deduplication. ``starred``
    marks records that arrived through the starred collection, and
    ``organization`` is only set when organization structure is preserved.
    """

    name: str
    clone_url: str
    owner: str
    full_name: str
    private: bool = False
    is_fork: bool = False
    has_issues: bool = False
    organization: str | None = None
    starred: bool = False

    @property
    def slug(self) -> str:
        """Return owner/name for log and API paths."""
        return repo_slug(self.owner, self.name)


@dataclasses.dataclass(frozen=True, slots=True)
class FetchOptions:
    """Options controlling which source collections are gathered.

    Attributes
    ----------
    username
        Source account whose public repositories are listed.
    private_repositories
        Include private repositories owned by the authenticated identity and
        search organizations for private repositories too.
    skip_forks
        Drop forks after deduplication.
    mirror_starred
        Include starred repositories.
    mirror_organizations
        Include repositories of organizations visible to the account.
    single_repo
        ``owner/name`` or URL override; short-circuits every other mode.
    include_orgs
        When non-empty, only these organizations are processed.
    exclude_orgs
        Organizations always skipped, even when included.
    preserve_org_structure
        Tag organization repositories with their source organization.
    use_specific_user
        List stars and organizations of ``username`` rather than of the
        authenticated identity.

    """

    username: str
    private_repositories: bool = False
    skip_forks: bool = False
    mirror_starred: bool = False
    mirror_organizations: bool = False
    single_repo: str = ""
    include_orgs: tuple[str, ...] = ()
    exclude_orgs: tuple[str, ...] = ()
    preserve_org_structure: bool = False
    use_specific_user: bool = False
