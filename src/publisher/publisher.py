"""
Publisher Core Module.

This module provides the main entry point for the Mastodon toot action.
A run is one linear attempt:

1. Build the Configuration from MASTODON_URL and MASTODON_ACCESS_TOKEN
2. Read and validate the task inputs into a PostRequest
3. Open an authenticated Mastodon session
4. Create the status
5. Report the ts, url and id outputs, or the failure

Every failure ends the run. It is reported through the task I/O failure
signal and the process exits with status 1; no outputs are set.

Functions:
    publish(configuration, request) -> Result[PostResult]:
        Authenticate and create a single status.
    run(core) -> Result[PostResult]:
        Validate, publish and report through the task I/O capability.
    main() -> None:
        Entry point for the mastodon-toot console command.

Example:
    Run inside a GitHub Actions step:
        $ INPUT_MESSAGE="Hello" MASTODON_URL=https://example.social \\
          MASTODON_ACCESS_TOKEN=... mastodon-toot
        Toot successfully published!
"""
import argparse
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING

from config import Configuration, load_config
from . import __version__
from .errors import PublishError, RemoteError
from .result import Failure, Result, Success
from .validation import PostRequest, validate_configuration, validate_request

if TYPE_CHECKING:
    from action import TaskIO
    from social.base_client import SocialMediaClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostResult:
    """Outcome of a successful publish.

    Attributes:
        published_at: Local wall-clock time the call completed, human readable
        id: Id of the created status (or scheduled status)
        url: URL of the created status, None for scheduled statuses
        scheduled_at: ISO 8601 publication time of a scheduled status
    """
    published_at: str
    id: str
    url: Optional[str] = None
    scheduled_at: Optional[str] = None

    def outputs(self) -> Dict[str, str]:
        outputs = {"ts": self.published_at, "id": self.id}
        if self.url is not None:
            outputs["url"] = self.url
        if self.scheduled_at is not None:
            outputs["scheduled_at"] = self.scheduled_at
        return outputs


def format_timestamp(moment: datetime) -> str:
    """Format a local time like "14:03:12 GMT+0200 (CEST)"."""
    return moment.strftime("%H:%M:%S GMT%z (%Z)")


def _default_client_factory(configuration: Configuration) -> "SocialMediaClient":
    from social.mastodon_client import MastodonClient
    return MastodonClient.from_configuration(configuration)


def publish(
    configuration: Configuration,
    request: PostRequest,
    client_factory: Optional[Callable[[Configuration], "SocialMediaClient"]] = None
) -> Result[PostResult]:
    """Authenticate against the instance and create one status.

    Args:
        configuration: Instance URL, access token and timeout
        request: Validated status to publish
        client_factory: Builds an authenticated client (MastodonClient by default)

    Returns:
        Success(PostResult), or Failure(RemoteError) if the instance
        rejected the session or the status
    """
    factory = client_factory or _default_client_factory

    try:
        with factory(configuration) as client:
            status: Mapping[str, Any] = client.post(
                request.message,
                visibility=request.visibility.value,
                sensitive=request.sensitive,
                spoiler_text=request.spoiler_text,
                language=request.language,
                scheduled_at=request.scheduled_at
            )
    except RemoteError as e:
        return Failure(e)

    published_at = format_timestamp(datetime.now().astimezone())

    if request.scheduled_at is not None:
        scheduled_at = status["scheduled_at"]
        if isinstance(scheduled_at, datetime):
            scheduled_at = scheduled_at.isoformat()
        return Success(PostResult(
            published_at=published_at,
            id=str(status["id"]),
            scheduled_at=str(scheduled_at)
        ))

    return Success(PostResult(
        published_at=published_at,
        id=str(status["id"]),
        url=status["url"]
    ))


def run(
    core: "TaskIO",
    environ: Optional[Mapping[str, str]] = None,
    settings: Optional[Dict[str, Any]] = None,
    client_factory: Optional[Callable[[Configuration], "SocialMediaClient"]] = None
) -> Result[PostResult]:
    """Run one publish attempt and report its outcome through core.

    Outputs are only set when the status was created; any failure is
    passed to core.set_failed() instead.
    """
    if environ is None:
        environ = os.environ
    if settings is None:
        settings = load_config()

    try:
        result = _run(core, environ, settings, client_factory)
    except Exception as e:
        logger.exception("Unexpected error while publishing")
        result = Failure(PublishError(str(e) or e.__class__.__name__))

    if result.ok:
        try:
            core.set_outputs(result.value.outputs())
        except OSError as e:
            logger.error(f"Status {result.value.id} was created but its outputs could not be written: {e}")
            result = Failure(PublishError(f"Failed to write outputs: {e}"))

    if not result.ok:
        logger.debug(f"{result.error.__class__.__name__}: {result.message}")
        core.set_failed(result.message)
        return result

    if result.value.scheduled_at is not None:
        logger.info(f"Toot scheduled for {result.value.scheduled_at}")
    else:
        logger.info("Toot successfully published!")
    return result


def _run(core, environ, settings, client_factory) -> Result[PostResult]:
    configuration = validate_configuration(environ, settings)
    if not configuration.ok:
        return configuration

    request = validate_request(core, settings)
    if not request.ok:
        return request

    logger.debug(
        f"Publishing {len(request.value.message)} characters to "
        f"{configuration.value.instance_url} as {request.value.visibility.value}"
    )
    return publish(configuration.value, request.value, client_factory)


def configure_logging(debug: bool = False) -> None:
    """Send all log records to stdout, at DEBUG level when debugging."""
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def main(argv: Optional[list] = None) -> None:
    """Main entry point for the mastodon-toot console command.

    Debug logging is enabled with --debug, MASTODON_TOOT_DEBUG=true, or
    when the workflow runs with step debugging (RUNNER_DEBUG=1).
    """
    from action import ActionCore

    parser = argparse.ArgumentParser(
        prog="mastodon-toot",
        description="Post a status to a Mastodon instance from a GitHub Actions step."
    )
    parser.add_argument("--debug", action="store_true", help="Enable verbose logging")
    parser.add_argument("--config", help="Path to mastodon-toot.yml")
    args = parser.parse_args(argv)

    core = ActionCore()
    debug = (
        args.debug
        or os.environ.get("MASTODON_TOOT_DEBUG", "").lower() in ("true", "1", "yes")
        or core.is_debug()
    )
    configure_logging(debug)

    logger.info(f"Mastodon toot action version: {__version__}")
    run(core, settings=load_config(args.config))
    sys.exit(core.exit_code)


# Allow running as a script for development/testing
if __name__ == "__main__":
    main()
