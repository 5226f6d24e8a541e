"""Destination targets and typed Gitea request bodies.

Each endpoint that accepts a body has its own ``msgspec.Struct``; optional
members default to ``None`` and are left out of the encoded JSON.
"""

from __future__ import annotations

import dataclasses
import enum

import msgspec


class TargetKind(enum.StrEnum):
    """Kind of destination container owning a mirror."""

    USER = "user"
    ORGANIZATION = "organization"


@dataclasses.dataclass(frozen=True, slots=True)
class Target:
    """Destination container reference resolved for the current run."""

    id: int
    name: str
    kind: TargetKind


class AccountPayload(msgspec.Struct, kw_only=True):
    """User or organization returned by ``/user`` and ``/orgs/{name}``."""

    id: int
    username: str = ""


class IssueCreatedPayload(msgspec.Struct, kw_only=True):
    """Response body of a created issue."""

    number: int


class CreateOrganizationRequest(msgspec.Struct, kw_only=True):
    """Body for ``POST /api/v1/orgs``."""

    username: str
    visibility: str = "public"


class MigrateRepositoryRequest(msgspec.Struct, kw_only=True, omit_defaults=True):
    """Body for ``POST /api/v1/repos/migrate`` creating a pull mirror."""

    clone_addr: str
    repo_name: str
    uid: int
    mirror: bool
    private: bool
    auth_token: str | None = None


class CreateIssueRequest(msgspec.Struct, kw_only=True):
    """Body for ``POST /api/v1/repos/{owner}/{repo}/issues``."""

    title: str
    body: str
    closed: bool = False


class CreateLabelRequest(msgspec.Struct, kw_only=True):
    """Body for ``POST /api/v1/repos/{owner}/{repo}/labels``."""

    name: str
    color: str


class IssueLabelsRequest(msgspec.Struct, kw_only=True):
    """Body for ``POST /api/v1/repos/{owner}/{repo}/issues/{index}/labels``."""

    labels: list[str]
