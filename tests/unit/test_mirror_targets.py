"""Unit tests for destination target resolution."""

from __future__ import annotations

import typing as typ

import pytest

from gitea_mirror.gitea import Target, TargetKind
from gitea_mirror.mirror import (
    TargetResolver,
    ensure_organization,
    prepare_organization_targets,
)
from gitea_mirror.mirror import targets as targets_module
from tests.helpers.fakes import USER, FakeDestination, make_config, make_repo

if typ.TYPE_CHECKING:
    import types

    from tests.helpers.fakes import FakeLogger

_STARS = Target(id=20, name="github", kind=TargetKind.ORGANIZATION)
_DEFAULT_ORG = Target(id=21, name="mirrors", kind=TargetKind.ORGANIZATION)
_ACME = Target(id=22, name="acme", kind=TargetKind.ORGANIZATION)


def _resolver(
    destination: FakeDestination,
    organization_targets: dict[str, Target] | None = None,
    **config: typ.Any,  # noqa: ANN401
) -> TargetResolver:
    return TargetResolver(
        destination, make_config(**config), USER, organization_targets or {}
    )


@pytest.mark.asyncio
async def test_plain_repository_goes_to_user(destination: FakeDestination) -> None:
    """Without a configured organization the user owns the mirror."""
    resolver = _resolver(destination)

    assert await resolver.resolve(make_repo("reef")) == USER
    assert destination.calls == []


@pytest.mark.asyncio
async def test_configured_organization_is_default(
    destination: FakeDestination,
) -> None:
    """GITEA_ORGANIZATION becomes the default target."""
    destination.organizations = {"mirrors": _DEFAULT_ORG}
    resolver = _resolver(destination, gitea={"organization": "mirrors"})

    assert await resolver.resolve(make_repo("reef")) == _DEFAULT_ORG


@pytest.mark.asyncio
async def test_missing_default_organization_falls_back_to_user(
    destination: FakeDestination,
    capture_logs: typ.Callable[[types.ModuleType], FakeLogger],
) -> None:
    """An unresolvable default organization warns and uses the user."""
    logger = capture_logs(targets_module)
    resolver = _resolver(destination, gitea={"organization": "mirrors"})

    assert await resolver.resolve(make_repo("reef")) == USER
    assert any(
        "using user instead" in message for message in logger.messages("WARNING")
    )


@pytest.mark.asyncio
async def test_starred_repository_goes_to_starred_organization(
    destination: FakeDestination,
) -> None:
    """Starred repositories take precedence over every other rule."""
    destination.organizations = {"github": _STARS, "acme": _ACME}
    resolver = _resolver(
        destination,
        {"acme": _ACME},
        github={"preserve_org_structure": True},
    )
    repo = make_repo("tool", owner="acme", organization="acme", starred=True)

    assert await resolver.resolve(repo) == _STARS


@pytest.mark.asyncio
async def test_missing_starred_organization_falls_back_to_default(
    destination: FakeDestination,
    capture_logs: typ.Callable[[types.ModuleType], FakeLogger],
) -> None:
    """An unresolvable starred organization warns and uses the default rule."""
    logger = capture_logs(targets_module)
    destination.organizations = {"mirrors": _DEFAULT_ORG}
    resolver = _resolver(destination, gitea={"organization": "mirrors"})

    target = await resolver.resolve(make_repo("lamp", starred=True))

    assert target == _DEFAULT_ORG
    assert any(
        'Could not find organization "github"' in message
        for message in logger.messages("WARNING")
    )


@pytest.mark.asyncio
async def test_preserved_organization_uses_prepared_target(
    destination: FakeDestination,
) -> None:
    """Organization repositories use the prepared like-named target."""
    resolver = _resolver(
        destination, {"acme": _ACME}, github={"preserve_org_structure": True}
    )
    repo = make_repo("tool", owner="acme", organization="acme")

    assert await resolver.resolve(repo) == _ACME
    assert destination.calls == [], "Prepared targets need no lookup"


@pytest.mark.asyncio
async def test_unprepared_organization_falls_back_with_warning(
    destination: FakeDestination,
    capture_logs: typ.Callable[[types.ModuleType], FakeLogger],
) -> None:
    """A repository whose organization failed to prepare uses the default."""
    logger = capture_logs(targets_module)
    resolver = _resolver(destination, github={"preserve_org_structure": True})
    repo = make_repo("tool", owner="acme", organization="acme")

    assert await resolver.resolve(repo) == USER
    assert logger.messages("WARNING") == [
        "No Gitea organization found for acme, using default target"
    ]


@pytest.mark.asyncio
async def test_organization_ignored_without_preservation(
    destination: FakeDestination,
) -> None:
    """Organization tags are ignored unless structure is preserved."""
    resolver = _resolver(destination, {"acme": _ACME})
    repo = make_repo("tool", owner="acme", organization="acme")

    assert await resolver.resolve(repo) == USER


@pytest.mark.asyncio
async def test_prepare_creates_each_organization_once(
    destination: FakeDestination,
) -> None:
    """Each unique source organization is created and resolved once."""
    config = make_config(
        github={"preserve_org_structure": True}, gitea={"visibility": "private"}
    )
    repos = [
        make_repo("tool", owner="acme", organization="acme"),
        make_repo("kit", owner="acme", organization="acme"),
        make_repo("reef"),
        make_repo("lib", owner="tools", organization="tools"),
    ]

    targets = await prepare_organization_targets(destination, config, repos)

    assert sorted(targets) == ["acme", "tools"]
    created = [call for call in destination.calls if call[0] == "create_organization"]
    assert created == [
        ("create_organization", ("acme", "private")),
        ("create_organization", ("tools", "private")),
    ]


@pytest.mark.asyncio
async def test_prepare_skips_failing_organization(
    destination: FakeDestination,
) -> None:
    """An organization that cannot be created is left out of the map."""
    destination.failures = {"create_organization:acme"}
    config = make_config(github={"preserve_org_structure": True})
    repos = [
        make_repo("tool", owner="acme", organization="acme"),
        make_repo("lib", owner="tools", organization="tools"),
    ]

    targets = await prepare_organization_targets(destination, config, repos)

    assert list(targets) == ["tools"]


@pytest.mark.asyncio
async def test_prepare_is_empty_without_preservation(
    destination: FakeDestination,
) -> None:
    """Nothing is prepared unless organization structure is preserved."""
    repos = [make_repo("tool", owner="acme", organization="acme")]

    assert await prepare_organization_targets(destination, make_config(), repos) == {}
    assert destination.calls == []


@pytest.mark.asyncio
async def test_ensure_organization_in_dry_run_only_logs(
    destination: FakeDestination,
    capture_logs: typ.Callable[[types.ModuleType], FakeLogger],
) -> None:
    """Dry-run mode never creates organizations."""
    logger = capture_logs(targets_module)

    await ensure_organization(destination, "acme", "public", dry_run=True)

    assert destination.calls == []
    assert logger.messages() == [
        "DRY RUN: Would create Gitea organization: acme (public)"
    ]
