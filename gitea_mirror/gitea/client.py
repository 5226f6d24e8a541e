"""Gitea REST client used to create and update mirrors."""

from __future__ import annotations

import dataclasses
import typing as typ
from http import HTTPStatus

import httpx
import msgspec

T = typ.TypeVar("T")

from gitea_mirror.logging import get_logger, log_info

from .errors import GiteaAPIError
from .models import (
    AccountPayload,
    CreateOrganizationRequest,
    IssueCreatedPayload,
    Target,
    TargetKind,
)

if typ.TYPE_CHECKING:
    from .models import (
        CreateIssueRequest,
        CreateLabelRequest,
        IssueLabelsRequest,
        MigrateRepositoryRequest,
    )

logger = get_logger(__name__)

_API_PREFIX = "/api/v1"
# Gitea answers 409 or 422 when a label name is already taken.
_LABEL_EXISTS_STATUSES = frozenset(
    {HTTPStatus.CONFLICT, HTTPStatus.UNPROCESSABLE_ENTITY}
)


class GiteaDestination(typ.Protocol):
    """Interface for the destination API consumed by the mirror workflow."""

    async def get_user(self) -> Target:
        """Return the authenticated user as a target."""
        ...

    async def get_organization(self, name: str) -> Target:
        """Return an existing organization as a target."""
        ...

    async def create_organization(self, name: str, visibility: str) -> None:
        """Create an organization unless it already exists."""
        ...

    async def repository_exists(self, target: Target, name: str) -> bool:
        """Return True when ``target`` already owns a repository named ``name``."""
        ...

    async def migrate_repository(self, request: MigrateRepositoryRequest) -> None:
        """Create a pull mirror."""
        ...

    async def star_repository(self, target: Target, name: str) -> None:
        """Star a repository as the authenticated user."""
        ...

    async def create_issue(
        self, target: Target, repo_name: str, request: CreateIssueRequest
    ) -> int:
        """Create an issue and return its number."""
        ...

    async def create_label(
        self, target: Target, repo_name: str, request: CreateLabelRequest
    ) -> None:
        """Create a repository label, tolerating an existing one."""
        ...

    async def add_issue_labels(
        self,
        target: Target,
        repo_name: str,
        number: int,
        request: IssueLabelsRequest,
    ) -> None:
        """Attach labels to an issue by name."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GiteaConfig:
    """Configuration for the Gitea REST client."""

    url: str
    token: str
    timeout_s: float = 30.0
    user_agent: str = "gitea-mirror/0.1"


class GiteaClient:
    """Gitea REST implementation of :class:`GiteaDestination`."""

    def __init__(
        self,
        config: GiteaConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={
                "Authorization": f"token {config.token}",
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def get_user(self) -> Target:
        """Return the authenticated user as a target."""
        action = "get user"
        response = await self._request("GET", "/user", action=action)
        _expect(response, action, HTTPStatus.OK)
        account = _decode(response, AccountPayload, action)
        return Target(id=account.id, name=account.username, kind=TargetKind.USER)

    async def get_organization(self, name: str) -> Target:
        """Return an existing organization as a target."""
        action = f"get organization {name}"
        response = await self._request("GET", f"/orgs/{name}", action=action)
        _expect(response, action, HTTPStatus.OK)
        account = _decode(response, AccountPayload, action)
        return Target(id=account.id, name=name, kind=TargetKind.ORGANIZATION)

    async def create_organization(self, name: str, visibility: str) -> None:
        """Create an organization; an existing one is not an error."""
        action = f"create organization {name}"
        existing = await self._request("GET", f"/orgs/{name}", action=action)
        if existing.status_code == HTTPStatus.OK:
            log_info(logger, "Organization %s already exists", name)
            return

        response = await self._request(
            "POST",
            "/orgs",
            action=action,
            body=CreateOrganizationRequest(username=name, visibility=visibility),
        )
        _expect(response, action, HTTPStatus.CREATED, HTTPStatus.UNPROCESSABLE_ENTITY)
        log_info(logger, "Created organization: %s", name)

    async def repository_exists(self, target: Target, name: str) -> bool:
        """Return True when ``target`` already owns a repository named ``name``."""
        action = f"check repository {target.name}/{name}"
        response = await self._request(
            "GET", f"/repos/{target.name}/{name}", action=action
        )
        if response.status_code == HTTPStatus.NOT_FOUND:
            return False
        _expect(response, action, HTTPStatus.OK)
        return True

    async def migrate_repository(self, request: MigrateRepositoryRequest) -> None:
        """Create a pull mirror from ``request.clone_addr``."""
        action = f"mirror repository {request.repo_name}"
        response = await self._request(
            "POST", "/repos/migrate", action=action, body=request
        )
        _expect(response, action, HTTPStatus.CREATED)
        log_info(logger, "Successfully mirrored: %s", request.repo_name)

    async def star_repository(self, target: Target, name: str) -> None:
        """Star ``target/name``; starring twice is a no-op at Gitea."""
        action = f"star repository {target.name}/{name}"
        response = await self._request(
            "PUT", f"/user/starred/{target.name}/{name}", action=action
        )
        _expect(response, action, HTTPStatus.NO_CONTENT)
        log_info(
            logger,
            "Successfully starred repository in Gitea: %s/%s",
            target.name,
            name,
        )

    async def create_issue(
        self, target: Target, repo_name: str, request: CreateIssueRequest
    ) -> int:
        """Create an issue and return its destination number."""
        action = f"create issue {request.title!r}"
        response = await self._request(
            "POST",
            f"/repos/{target.name}/{repo_name}/issues",
            action=action,
            body=request,
        )
        _expect(response, action, HTTPStatus.CREATED)
        return _decode(response, IssueCreatedPayload, action).number

    async def create_label(
        self, target: Target, repo_name: str, request: CreateLabelRequest
    ) -> None:
        """Create a repository label, tolerating an existing one."""
        action = f"create label {request.name}"
        response = await self._request(
            "POST",
            f"/repos/{target.name}/{repo_name}/labels",
            action=action,
            body=request,
        )
        if response.status_code in _LABEL_EXISTS_STATUSES:
            return
        _expect(response, action, HTTPStatus.CREATED)

    async def add_issue_labels(
        self,
        target: Target,
        repo_name: str,
        number: int,
        request: IssueLabelsRequest,
    ) -> None:
        """Attach labels to issue ``number`` by name."""
        action = f"add labels to issue #{number}"
        response = await self._request(
            "POST",
            f"/repos/{target.name}/{repo_name}/issues/{number}/labels",
            action=action,
            body=request,
        )
        _expect(response, action, HTTPStatus.OK)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        body: msgspec.Struct | None = None,
    ) -> httpx.Response:
        url = f"{self._config.url.rstrip('/')}{_API_PREFIX}{path}"
        content = None if body is None else msgspec.json.encode(body)
        headers = None if body is None else {"Content-Type": "application/json"}
        try:
            return await self._client.request(
                method, url, content=content, headers=headers
            )
        except httpx.HTTPError as exc:
            raise GiteaAPIError.transport_error(action, str(exc)) from exc


def _expect(response: httpx.Response, action: str, *statuses: int) -> None:
    if response.status_code not in statuses:
        raise GiteaAPIError.unexpected_status(action, response.status_code)


def _decode(response: httpx.Response, payload_type: type[T], action: str) -> T:
    try:
        return msgspec.json.decode(response.content, type=payload_type)
    except msgspec.DecodeError as exc:
        raise GiteaAPIError.invalid_response(action, str(exc)) from exc
