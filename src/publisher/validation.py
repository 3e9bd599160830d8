"""
Validation steps for a single toot.

Each step returns Success or Failure (see publisher.result) and the steps
run in a fixed order: configuration, message, visibility, length, then the
optional status attributes. validate_request() stops at the first Failure.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING
from zoneinfo import ZoneInfo

from config import (
    Configuration,
    DEFAULT_MAX_POST_LENGTH,
    DEFAULT_REQUEST_TIMEOUT,
    get_timezone,
    read_secret_file,
)
from .errors import ConfigurationError, InputError
from .result import Failure, Result, Success

if TYPE_CHECKING:
    from action import TaskIO

logger = logging.getLogger(__name__)

ELLIPSIS = "…"

# Mastodon rejects scheduled statuses closer than this to the current time
MIN_SCHEDULE_LEAD = timedelta(minutes=5)
SCHEDULE_FORMAT = "%Y-%m-%d %H:%M"


class Visibility(str, Enum):
    """Audience of a status. Values are the Mastodon API names."""
    DIRECT = "direct"
    PUBLIC = "public"
    UNLISTED = "unlisted"
    FOLLOWERS_ONLY = "private"


ALLOWED_VISIBILITIES = ("direct", "public", "unlisted", "followers_only")

VISIBILITY_NAMES = {
    "direct": Visibility.DIRECT,
    "public": Visibility.PUBLIC,
    "unlisted": Visibility.UNLISTED,
    "followers_only": Visibility.FOLLOWERS_ONLY,
    "private": Visibility.FOLLOWERS_ONLY,
}


@dataclass(frozen=True)
class PostRequest:
    """A validated status, ready to be sent."""
    message: str
    visibility: Visibility = Visibility.PUBLIC
    sensitive: bool = False
    spoiler_text: Optional[str] = None
    language: Optional[str] = None
    scheduled_at: Optional[datetime] = None


def validate_configuration(environ: Mapping[str, str], settings: Dict[str, Any]) -> Result[Configuration]:
    """Build the Configuration from MASTODON_URL and MASTODON_ACCESS_TOKEN.

    MASTODON_ACCESS_TOKEN_FILE is read as a Docker secret when the token
    variable itself is unset.
    """
    instance_url = environ.get("MASTODON_URL", "").strip()
    access_token = environ.get("MASTODON_ACCESS_TOKEN", "").strip()

    if not access_token and environ.get("MASTODON_ACCESS_TOKEN_FILE"):
        access_token = read_secret_file(environ["MASTODON_ACCESS_TOKEN_FILE"]) or ""

    if not instance_url or not access_token:
        return Failure(ConfigurationError("Need to provide MASTODON_URL and MASTODON_ACCESS_TOKEN"))

    timeout = settings.get("mastodon", {}).get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
    return Success(Configuration(
        instance_url=instance_url,
        access_token=access_token,
        request_timeout=timeout
    ))


def resolve_visibility(value: Optional[str]) -> Result[Visibility]:
    """Map a visibility input to its Visibility, defaulting to public."""
    if not value:
        return Success(Visibility.PUBLIC)

    visibility = VISIBILITY_NAMES.get(value)
    if visibility is None:
        return Failure(InputError(
            "Visibility must be one of the following values: " + ", ".join(ALLOWED_VISIBILITIES)
        ))
    return Success(visibility)


def truncate_message(message: str, max_length: int = DEFAULT_MAX_POST_LENGTH) -> str:
    """Cut message to max_length characters, ending it with an ellipsis.

    Example:
        >>> truncate_message("abcdef", 4)
        'abc…'
    """
    if len(message) <= max_length:
        return message
    return message[:max_length - 1] + ELLIPSIS


def limit_message(message: str, settings: Dict[str, Any]) -> Result[str]:
    """Apply the configured length limit, truncating or rejecting."""
    mastodon_settings = settings.get("mastodon", {})
    max_length = mastodon_settings.get("max_post_length", DEFAULT_MAX_POST_LENGTH)

    if len(message) <= max_length:
        return Success(message)
    if not mastodon_settings.get("truncate", True):
        return Failure(InputError(
            f"Message is {len(message)} characters long, the limit is {max_length}"
        ))

    logger.warning(f"Message is {len(message)} characters long, truncating to {max_length}")
    return Success(truncate_message(message, max_length))


def parse_scheduled_at(value: str, tz: ZoneInfo, now: Optional[datetime] = None) -> Result[Optional[datetime]]:
    """Parse a "YYYY-MM-DD HH:MM" schedule in the given timezone.

    An empty value means "publish now" and yields Success(None).
    """
    if not value:
        return Success(None)

    try:
        scheduled_at = datetime.strptime(value, SCHEDULE_FORMAT).replace(tzinfo=tz)
    except ValueError as e:
        return Failure(InputError(f"Invalid scheduled_at date format, expected YYYY-MM-DD HH:MM: {e}"))

    if now is None:
        now = datetime.now(tz)
    if scheduled_at - now < MIN_SCHEDULE_LEAD:
        return Failure(InputError("Scheduled time must be at least 5 minutes in the future"))

    return Success(scheduled_at)


def validate_request(core: "TaskIO", settings: Dict[str, Any], now: Optional[datetime] = None) -> Result[PostRequest]:
    """Read and validate every task input into a PostRequest."""
    message = core.get_required_string("message")
    if not message.ok:
        return message

    visibility = resolve_visibility(core.get_optional_string("visibility"))
    if not visibility.ok:
        return visibility

    limited = limit_message(message.value, settings)
    if not limited.ok:
        return limited

    sensitive = core.get_boolean("sensitive")
    if not sensitive.ok:
        return sensitive

    scheduled_at = parse_scheduled_at(core.get_optional_string("scheduled_at"), get_timezone(settings), now)
    if not scheduled_at.ok:
        return scheduled_at

    return Success(PostRequest(
        message=limited.value,
        visibility=visibility.value,
        sensitive=sensitive.value,
        spoiler_text=core.get_optional_string("spoiler_text") or None,
        language=core.get_optional_string("language") or None,
        scheduled_at=scheduled_at.value
    ))
