"""Command-line entry point for the mirror service.

Usage:
    gitea-mirror                # Same as ``gitea-mirror run``
    gitea-mirror run            # Mirror every DELAY seconds until stopped
    gitea-mirror run --once     # Mirror once and exit
    gitea-mirror show-config    # Print the effective configuration

All mirror settings are read from environment variables; see
:meth:`gitea_mirror.config.MirrorConfig.from_env`.
"""

from __future__ import annotations

import asyncio
import sys
import time
import typing as typ

import msgspec
from cyclopts import App, Parameter

from gitea_mirror.config import MirrorConfig
from gitea_mirror.errors import ConfigurationError, SourceFetchError
from gitea_mirror.gitea import GiteaAPIError
from gitea_mirror.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from gitea_mirror.run import execute

__version__ = "0.1.0"

logger = get_logger(__name__)

app = App(
    name="gitea-mirror",
    help="Mirror GitHub repositories into a Gitea instance",
    version=__version__,
)

_sleep = time.sleep


def _load_config() -> MirrorConfig | None:
    try:
        config = MirrorConfig.from_env()
    except ConfigurationError as exc:
        log_error(logger, "%s", exc)
        return None
    return config


@app.command
def run(
    *,
    once: bool = False,
    log_level: typ.Annotated[str, Parameter(env_var="LOG_LEVEL")] = "INFO",
) -> int:
    """Mirror repositories, repeating every ``DELAY`` seconds.

    Args:
        once: Perform a single run and exit, like ``SINGLE_RUN=true``.
        log_level: Minimum log level to emit.

    Returns:
        Exit code (0 for success, 1 for configuration or source errors).

    """
    _, invalid = configure_logging(log_level)
    if invalid:
        log_warning(logger, "Invalid LOG_LEVEL %r; defaulting to INFO", log_level)

    config = _load_config()
    if config is None:
        return 1
    log_info(
        logger,
        "Applied configuration: %s",
        msgspec.json.encode(config.redacted()).decode(),
    )

    while True:
        log_info(logger, "Starting to create mirrors...")
        try:
            asyncio.run(execute(config))
        except (ConfigurationError, SourceFetchError, GiteaAPIError) as exc:
            log_error(logger, "Mirror run failed: %s", exc)
            return 1

        if once or config.single_run:
            return 0
        log_info(logger, "Waiting for %d seconds...", config.delay)
        _sleep(config.delay)


# Container images start the service without a subcommand.
app.default(run)


@app.command(name="show-config")
def show_config() -> int:
    """Print the effective configuration with tokens redacted.

    Returns:
        Exit code (0 for success, 1 for configuration errors).

    """
    config = _load_config()
    if config is None:
        return 1
    print(msgspec.json.format(msgspec.json.encode(config.redacted())).decode())
    return 0


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
