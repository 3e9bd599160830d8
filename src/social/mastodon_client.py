"""
Mastodon Client for the Mastodon toot action.

This module provides functionality to post a single status to a Mastodon
account using the Mastodon.py library.

Usage:
    >>> from config import Configuration
    >>> configuration = Configuration("https://mastodon.social", "token")
    >>> with MastodonClient.from_configuration(configuration) as client:
    ...     result = client.post("Hello from the toot action!")
    ...     print(f"Posted: {result['url']}")

Authentication:
    You need an access token from your Mastodon instance. You can obtain one by:
    1. Going to your Mastodon instance settings
    2. Navigate to Development -> New Application
    3. Create a new application with "write:statuses" scope
    4. Copy the access token

Version Checking:
    Mastodon.py normally compares the server version against the features
    it knows about. Forks and newer servers report versions it cannot
    parse, so the check is disabled (version_check_mode="none").

API Reference:
    Mastodon API: https://docs.joinmastodon.org/api/
    Mastodon.py: https://mastodonpy.readthedocs.io/
"""
import logging
from datetime import datetime
from typing import Optional, Dict, Any
from mastodon import Mastodon, MastodonError

from publisher.errors import RemoteError
from social.base_client import SocialMediaClient

logger = logging.getLogger(__name__)


class MastodonClient(SocialMediaClient):
    """Client for posting to Mastodon instances.

    Attributes:
        account: Account information returned by credential verification

    Example:
        >>> client = MastodonClient(
        ...     instance_url="https://mastodon.social",
        ...     access_token="your_access_token"
        ... )
        >>> client.post("Hello Mastodon!")
    """

    def _initialize_api(self) -> None:
        """Initialize the Mastodon API client and verify the access token.

        Raises:
            RemoteError: If the client cannot be created or authentication fails
        """
        try:
            self.api = Mastodon(
                access_token=self.access_token,
                api_base_url=self.instance_url,
                request_timeout=self.request_timeout,
                version_check_mode="none",
                session=self.session
            )
        except MastodonError as e:
            raise RemoteError(f"Failed to connect to {self.instance_url}: {e}") from e

        self.account = self.verify_credentials()

    def post(
        self,
        content: str,
        visibility: str = "public",
        sensitive: bool = False,
        spoiler_text: Optional[str] = None,
        language: Optional[str] = None,
        scheduled_at: Optional[datetime] = None,
        **kwargs
    ) -> Dict[str, Any]:
        """Post content to Mastodon.

        Args:
            content: Text content of the status
            visibility: Post visibility ("public", "unlisted", "private", "direct")
            sensitive: Whether to mark the post as sensitive content
            spoiler_text: Content warning text (if provided, post will be hidden behind CW)
            language: ISO 639 language code of the status
            scheduled_at: Publish the status at this time instead of now

        Returns:
            The created status, or the scheduled status when scheduled_at is set

        Raises:
            RemoteError: If Mastodon rejects the status
        """
        try:
            result = self.api.status_post(
                status=content,
                visibility=visibility,
                sensitive=sensitive,
                spoiler_text=spoiler_text or None,
                language=language or None,
                scheduled_at=scheduled_at
            )
        except MastodonError as e:
            raise RemoteError(f"Failed to post status to Mastodon: {e}") from e

        if scheduled_at is not None:
            logger.debug(f"Scheduled status {result['id']} on {self.instance_url}")
        else:
            logger.debug(f"Posted status {result['id']} to {self.instance_url}")
        return result

    def verify_credentials(self) -> Dict[str, Any]:
        """Verify that the access token is valid and get account information.

        Returns:
            Dictionary containing account information

        Raises:
            RemoteError: If the instance rejects the token or cannot be reached
        """
        try:
            account = self.api.account_verify_credentials()
        except MastodonError as e:
            raise RemoteError(f"Authentication failed for {self.instance_url}: {e}") from e

        logger.info(f"Authenticated as @{account['username']}")
        return account
