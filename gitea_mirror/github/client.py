"""GitHub REST client used to discover repositories and issues."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import datetime as dt
import typing as typ

import httpx
import msgspec

from gitea_mirror.discovery.models import Repository

from .errors import GitHubAPIError, GitHubResponseShapeError
from .models import (
    GitHubIssue,
    IssuePayload,
    OrganizationPayload,
    RepositoryPayload,
    SearchRepositoriesPayload,
)

T = typ.TypeVar("T")
P = typ.TypeVar("P")

_HTTP_ERROR_STATUS_THRESHOLD = 400
_PER_PAGE = 100


class GitHubSourceClient(typ.Protocol):
    """Interface for the source API consumed by discovery and replication."""

    def iter_user_repositories(
        self, username: str
    ) -> cabc.AsyncIterator[Repository]:
        """Yield the public repositories of ``username``."""
        ...

    def iter_owned_private_repositories(self) -> cabc.AsyncIterator[Repository]:
        """Yield private repositories owned by the authenticated identity."""
        ...

    def iter_starred_repositories(
        self, username: str | None
    ) -> cabc.AsyncIterator[Repository]:
        """Yield starred repositories of ``username`` or the authenticated user."""
        ...

    def iter_organizations(self, username: str | None) -> cabc.AsyncIterator[str]:
        """Yield organization logins of ``username`` or the authenticated user."""
        ...

    def iter_organization_repositories(
        self, organization: str
    ) -> cabc.AsyncIterator[Repository]:
        """Yield the public repositories of an organization."""
        ...

    def iter_search_organization_repositories(
        self, organization: str
    ) -> cabc.AsyncIterator[Repository]:
        """Yield public and private repositories of an organization via search."""
        ...

    async def get_repository(self, owner: str, name: str) -> Repository:
        """Return a single repository."""
        ...

    def iter_issues(self, owner: str, name: str) -> cabc.AsyncIterator[GitHubIssue]:
        """Yield every issue of a repository, oldest first."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Configuration for the GitHub REST client.

    An empty ``token`` issues anonymous requests, which only suffice for
    public repository listings.
    """

    token: str = ""
    api_url: str = "https://api.github.com"
    timeout_s: float = 30.0
    user_agent: str = "gitea-mirror/0.1"


def _parse_github_datetime(value: str) -> dt.datetime:
    text = value.replace("Z", "+00:00")
    parsed = dt.datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        msg = f"GitHub datetime missing timezone: {value}"
        raise ValueError(msg)
    return parsed.astimezone(dt.UTC)


def repository_from_payload(
    payload: RepositoryPayload, *, starred: bool = False
) -> Repository:
    """Convert a REST repository payload into a :class:`Repository`."""
    return Repository(
        name=payload.name,
        clone_url=payload.clone_url,
        owner=payload.owner.login,
        full_name=payload.full_name,
        private=payload.private,
        is_fork=payload.fork,
        has_issues=payload.has_issues,
        starred=starred,
    )


def issue_from_payload(payload: IssuePayload) -> GitHubIssue:
    """Convert a REST issue payload into a :class:`GitHubIssue`."""
    return GitHubIssue(
        number=payload.number,
        title=payload.title,
        body=payload.body or "",
        state=payload.state,
        author_login=payload.user.login if payload.user else "",
        created_at=_parse_github_datetime(payload.created_at),
        labels=tuple(label.name for label in payload.labels),
    )


class GitHubRestClient:
    """GitHub REST implementation of :class:`GitHubSourceClient`.

    Listings follow the ``Link: rel="next"`` header one page at a time, so a
    single request is in flight at any moment.
    """

    def __init__(
        self,
        config: GitHubConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        self._config = config
        self._owns_client = http_client is None
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers=headers,
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def iter_user_repositories(
        self, username: str
    ) -> typ.AsyncIterator[Repository]:
        """Yield the public repositories of ``username``."""
        async for payload in self._paginate(
            f"/users/{username}/repos", list[RepositoryPayload]
        ):
            yield repository_from_payload(payload)

    async def iter_owned_private_repositories(self) -> typ.AsyncIterator[Repository]:
        """Yield private repositories owned by the authenticated identity."""
        async for payload in self._paginate(
            "/user/repos",
            list[RepositoryPayload],
            params={"affiliation": "owner", "visibility": "private"},
        ):
            yield repository_from_payload(payload)

    async def iter_starred_repositories(
        self, username: str | None
    ) -> typ.AsyncIterator[Repository]:
        """Yield starred repositories, each marked ``starred``."""
        path = f"/users/{username}/starred" if username else "/user/starred"
        async for payload in self._paginate(path, list[RepositoryPayload]):
            yield repository_from_payload(payload, starred=True)

    async def iter_organizations(self, username: str | None) -> typ.AsyncIterator[str]:
        """Yield organization logins visible to the account."""
        path = f"/users/{username}/orgs" if username else "/user/orgs"
        async for payload in self._paginate(path, list[OrganizationPayload]):
            yield payload.login

    async def iter_organization_repositories(
        self, organization: str
    ) -> typ.AsyncIterator[Repository]:
        """Yield the public repositories of an organization."""
        async for payload in self._paginate(
            f"/orgs/{organization}/repos", list[RepositoryPayload]
        ):
            yield repository_from_payload(payload)

    async def iter_search_organization_repositories(
        self, organization: str
    ) -> typ.AsyncIterator[Repository]:
        """Yield public and private organization repositories via search."""
        async for page in self._paginate_pages(
            "/search/repositories",
            SearchRepositoriesPayload,
            params={"q": f"org:{organization}"},
        ):
            for payload in page.items:
                yield repository_from_payload(payload)

    async def get_repository(self, owner: str, name: str) -> Repository:
        """Return a single repository by owner and name."""
        url = self._url(f"/repos/{owner}/{name}")
        response = await self._get(url, params=None)
        payload = _decode(response, RepositoryPayload)
        return repository_from_payload(payload)

    async def iter_issues(
        self, owner: str, name: str
    ) -> typ.AsyncIterator[GitHubIssue]:
        """Yield every issue in creation order, skipping pull requests."""
        path = f"/repos/{owner}/{name}/issues"
        async for payload in self._paginate(
            path,
            list[IssuePayload],
            params={"state": "all", "sort": "created", "direction": "asc"},
        ):
            if payload.pull_request is not None:
                continue
            try:
                issue = issue_from_payload(payload)
            except ValueError as exc:
                raise GitHubResponseShapeError.invalid(path, str(exc)) from exc
            yield issue

    async def _paginate(
        self,
        path: str,
        page_type: type[list[T]],
        *,
        params: dict[str, str] | None = None,
    ) -> typ.AsyncIterator[T]:
        async for page in self._paginate_pages(path, page_type, params=params):
            for item in page:
                yield item

    async def _paginate_pages(
        self,
        path: str,
        page_type: type[P],
        *,
        params: dict[str, str] | None = None,
    ) -> typ.AsyncIterator[P]:
        url: str | None = self._url(path)
        query: dict[str, str] | None = {**(params or {}), "per_page": str(_PER_PAGE)}
        while url is not None:
            response = await self._get(url, params=query)
            yield _decode(response, page_type)
            # The next link already carries the query string.
            url = response.links.get("next", {}).get("url")
            query = None

    def _url(self, path: str) -> str:
        return f"{self._config.api_url.rstrip('/')}{path}"

    async def _get(self, url: str, *, params: dict[str, str] | None) -> httpx.Response:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise GitHubAPIError.transport_error(url, str(exc)) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code, url)
        return response


def _decode(response: httpx.Response, payload_type: type[T]) -> T:
    try:
        return msgspec.json.decode(response.content, type=payload_type)
    except msgspec.DecodeError as exc:
        raise GitHubResponseShapeError.invalid(str(response.url), str(exc)) from exc
