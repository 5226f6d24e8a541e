"""Name-pattern, duplicate, and fork filters for collected repositories.

Patterns are shell-style globs matched case-sensitively against the
repository name, with ``{a,b}`` alternation, ``[!...]``/``[^...]`` negated
classes and ``\\`` escapes. Repository names never contain ``/``, so ``*``
and ``**`` both match any run of characters. A pattern with an unterminated
class, alternation or escape never matches.
"""

from __future__ import annotations

import typing as typ

from wcmatch import fnmatch

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Repository

DEFAULT_INCLUDE: tuple[str, ...] = ("*",)

_MATCH_FLAGS = fnmatch.BRACE | fnmatch.CASE


def _class_end(pattern: str, start: int) -> int | None:
    index = start + 1
    if index < len(pattern) and pattern[index] in "!^":
        index += 1
    # A leading ``]`` is a member of the class.
    if index < len(pattern) and pattern[index] == "]":
        index += 1
    while index < len(pattern):
        if pattern[index] == "\\":
            index += 2
            continue
        if pattern[index] == "]":
            return index
        index += 1
    return None


def is_malformed(pattern: str) -> bool:
    """Return True when ``pattern`` has an unterminated class, brace or escape."""
    depth = 0
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            if index + 1 == len(pattern):
                return True
            index += 2
            continue
        if char == "[":
            end = _class_end(pattern, index)
            if end is None:
                return True
            index = end + 1
            continue
        if char == "{":
            depth += 1
        elif char == "}" and depth:
            depth -= 1
        index += 1
    return depth > 0


def _matches(name: str, pattern: str) -> bool:
    if is_malformed(pattern):
        return False
    return fnmatch.fnmatch(name, pattern, flags=_MATCH_FLAGS)


def matches_any(name: str, patterns: cabc.Iterable[str]) -> bool:
    """Return True when ``name`` matches at least one glob pattern."""
    return any(_matches(name, pattern) for pattern in patterns)


def filter_repositories(
    repositories: cabc.Iterable[Repository],
    include: cabc.Sequence[str] = DEFAULT_INCLUDE,
    exclude: cabc.Sequence[str] = (),
) -> list[Repository]:
    """Retain repositories matching an include pattern and no exclude pattern.

    Parameters
    ----------
    repositories
        Collected repositories, in collection order.
    include
        Globs of which at least one must match the name.
    exclude
        Globs of which none may match the name. Exclusion wins over
        inclusion.

    Returns
    -------
    list[Repository]
        Retained repositories in their original order.

    """
    return [
        repo
        for repo in repositories
        if matches_any(repo.name, include) and not matches_any(repo.name, exclude)
    ]


def deduplicate(repositories: cabc.Iterable[Repository]) -> list[Repository]:
    """Keep the first-seen repository for each clone URL."""
    seen: set[str] = set()
    unique: list[Repository] = []
    for repo in repositories:
        if repo.clone_url in seen:
            continue
        seen.add(repo.clone_url)
        unique.append(repo)
    return unique


def without_forks(repositories: cabc.Iterable[Repository]) -> list[Repository]:
    """Drop forked repositories."""
    return [repo for repo in repositories if not repo.is_fork]


def select_organizations(
    names: cabc.Iterable[str],
    include: cabc.Collection[str],
    exclude: cabc.Collection[str],
) -> list[str]:
    """Apply exact-name include and exclude lists to organization logins.

    An empty include list admits every organization; the exclude list is
    applied afterwards and always wins.
    """
    return [
        name
        for name in names
        if (not include or name in include) and name not in exclude
    ]
