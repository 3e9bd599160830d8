"""
Base Social Media Client for the Mastodon toot action.

This module provides a base class for social media clients with common
session and authentication handling that platform-specific implementations
(currently Mastodon) inherit.
"""
import logging
from typing import Optional, Dict, Any
from abc import ABC, abstractmethod
import requests

from config import Configuration, DEFAULT_REQUEST_TIMEOUT


logger = logging.getLogger(__name__)

USER_AGENT = "mastodon-toot-action"


class SocialMediaClient(ABC):
    """Abstract base class for social media clients.

    Creating a client opens an authenticated session right away, so a
    constructed client is always ready to post. Initialization failures
    propagate to the caller.

    Attributes:
        instance_url: URL of the social media instance/server
        access_token: Access token for authenticated API calls
        request_timeout: Timeout applied to every request, in seconds
        session: HTTP session shared by all API calls of this client
        api: Platform-specific API client instance

    Example:
        >>> class EchoClient(SocialMediaClient):
        ...     def _initialize_api(self):
        ...         self.api = self.session
        ...
        ...     def post(self, content, **kwargs):
        ...         return {"id": "1", "url": f"{self.instance_url}/1"}
        ...
        ...     def verify_credentials(self):
        ...         return {"username": "echo"}
    """

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    ):
        """Initialize social media client with credentials.

        Args:
            instance_url: URL of the social media instance (e.g., https://mastodon.social)
            access_token: Access token for API authentication
            request_timeout: Client-side timeout for every request, in seconds

        Raises:
            RemoteError: If the platform rejects the session
        """
        self.instance_url = instance_url
        self.access_token = access_token
        self.request_timeout = request_timeout
        self.api: Optional[Any] = None
        self.session = self._create_session()

        try:
            self._initialize_api()
        except Exception:
            self.close()
            raise
        logger.info(f"{self.__class__.__name__} initialized for {self.instance_url}")

    @classmethod
    def from_configuration(cls, configuration: Configuration) -> "SocialMediaClient":
        """Create a client from the run's Configuration value.

        Example:
            >>> client = MastodonClient.from_configuration(configuration)
            >>> client.post("Hello!")
        """
        return cls(
            instance_url=configuration.instance_url,
            access_token=configuration.access_token,
            request_timeout=configuration.request_timeout
        )

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = USER_AGENT
        return session

    def close(self) -> None:
        """Release the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @abstractmethod
    def _initialize_api(self) -> None:
        """Initialize the platform-specific API client.

        The implementation should set self.api to the initialized client
        and verify the credentials.

        Raises:
            RemoteError: If API initialization or authentication fails
        """

    @abstractmethod
    def post(
        self,
        content: str,
        **kwargs
    ) -> Dict[str, Any]:
        """Post content to the social media platform.

        Args:
            content: Text content to post
            **kwargs: Platform-specific options (visibility, sensitive, etc.)

        Returns:
            Dictionary containing the posted content information

        Raises:
            RemoteError: If the platform rejects the post
        """

    @abstractmethod
    def verify_credentials(self) -> Dict[str, Any]:
        """Verify that the access token is valid and get account information.

        Returns:
            Dictionary containing account information

        Raises:
            RemoteError: If verification failed
        """
