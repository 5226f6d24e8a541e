"""Repository slug utilities.

Repository slugs are GitHub identifiers in ``owner/name`` format. They are not
filesystem paths, even though they use ``/`` as a separator, so they should be
parsed using these helpers rather than ``pathlib``.
"""

from __future__ import annotations

_GITHUB_URL_PREFIX = "https://github.com/"
_GIT_SUFFIX = ".git"


def repo_slug(owner: str, name: str) -> str:
    """Build a repository slug from owner and name.

    Examples
    --------
    >>> repo_slug("jaedle", "mirror-to-gitea")
    'jaedle/mirror-to-gitea'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Parse a repository slug into owner and name.

    Parameters
    ----------
    slug:
        Repository slug in ``owner/name`` format.

    Returns
    -------
    tuple[str, str]
        ``(owner, name)``.

    Raises
    ------
    ValueError
        If the slug is not in ``owner/name`` format.

    """
    if slug.count("/") != 1:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    owner, name = slug.split("/")
    if not owner.strip() or not name.strip():
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    return owner, name


def parse_single_repo(token: str) -> tuple[str, str]:
    """Parse a single-repository override into owner and name.

    Accepts ``owner/name`` as well as the GitHub web URL, with or without a
    trailing ``.git``.

    Examples
    --------
    >>> parse_single_repo("https://github.com/jaedle/mirror-to-gitea.git")
    ('jaedle', 'mirror-to-gitea')

    """
    path = token.strip().removeprefix(_GITHUB_URL_PREFIX).removesuffix(_GIT_SUFFIX)
    return parse_repo_slug(path)
