"""Typed GitHub REST payloads and the issue records derived from them."""

from __future__ import annotations

import dataclasses
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    import datetime as dt


class OwnerPayload(msgspec.Struct, kw_only=True):
    """Account reference embedded in repository and issue payloads."""

    login: str = ""


class RepositoryPayload(msgspec.Struct, kw_only=True):
    """Subset of the REST repository object used for mirroring."""

    name: str
    full_name: str
    clone_url: str
    private: bool = False
    fork: bool = False
    has_issues: bool = False
    owner: OwnerPayload = msgspec.field(default_factory=OwnerPayload)


class SearchRepositoriesPayload(msgspec.Struct, kw_only=True):
    """Envelope returned by ``GET /search/repositories``."""

    items: list[RepositoryPayload] = msgspec.field(default_factory=list)


class OrganizationPayload(msgspec.Struct, kw_only=True):
    """Organization summary returned by organization listings."""

    login: str


class LabelPayload(msgspec.Struct, kw_only=True):
    """Issue label reference."""

    name: str


class IssuePayload(msgspec.Struct, kw_only=True):
    """Subset of the REST issue object used for replication.

    The issues endpoint also lists pull requests; those carry a
    ``pull_request`` member.
    """

    number: int
    title: str
    state: str
    created_at: str
    body: str | None = None
    user: OwnerPayload | None = None
    labels: list[LabelPayload] = msgspec.field(default_factory=list)
    pull_request: dict[str, typ.Any] | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubIssue:
    """Source issue ready for replication."""

    number: int
    title: str
    body: str
    state: str
    author_login: str
    created_at: dt.datetime
    labels: tuple[str, ...] = ()

    @property
    def closed(self) -> bool:
        """Return True when the source issue is closed."""
        return self.state == "closed"
