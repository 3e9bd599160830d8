"""
Tests for Mastodon Client Module.

This test suite validates session set-up, credential verification and
status posting against a mocked Mastodon.py API.

Test Coverage:
    - Session created with timeout and version checking disabled
    - Authentication failures raised as RemoteError
    - Posting immediate and scheduled statuses
    - Mastodon errors raised as RemoteError

Running Tests:
    $ pytest tests/test_mastodon.py -v
"""
import unittest
from datetime import datetime, timezone
from unittest.mock import patch, MagicMock

from mastodon import MastodonAPIError, MastodonNetworkError, MastodonUnauthorizedError

from config import Configuration
from publisher.errors import RemoteError
from social.base_client import SocialMediaClient, USER_AGENT
from social.mastodon_client import MastodonClient


class TestMastodonClient(unittest.TestCase):
    """Test suite for MastodonClient class."""

    def _mock_api(self, mock_mastodon):
        mock_api = MagicMock()
        mock_mastodon.return_value = mock_api
        mock_api.account_verify_credentials.return_value = {"id": "1", "username": "user"}
        return mock_api

    @patch("social.mastodon_client.Mastodon")
    def test_login_from_configuration(self, mock_mastodon):
        """Test the session is opened with the configured timeout and no version check."""
        mock_api = self._mock_api(mock_mastodon)

        client = MastodonClient.from_configuration(
            Configuration("https://example.social", "test_token", request_timeout=12)
        )

        mock_mastodon.assert_called_once_with(
            access_token="test_token",
            api_base_url="https://example.social",
            request_timeout=12,
            version_check_mode="none",
            session=client.session
        )
        mock_api.account_verify_credentials.assert_called_once()
        self.assertEqual(client.account["username"], "user")
        self.assertIs(client.api, mock_api)
        self.assertEqual(client.session.headers["User-Agent"], USER_AGENT)

    @patch("social.mastodon_client.Mastodon")
    def test_authentication_failure(self, mock_mastodon):
        """Test an invalid token raises RemoteError before any post."""
        mock_api = self._mock_api(mock_mastodon)
        mock_api.account_verify_credentials.side_effect = MastodonUnauthorizedError(
            "Mastodon API returned error", 401, "Unauthorized", "The access token is invalid"
        )

        with patch.object(SocialMediaClient, "close") as mock_close:
            with self.assertRaises(RemoteError) as ctx:
                MastodonClient(instance_url="https://example.social", access_token="bad")

        self.assertIn("Authentication failed", str(ctx.exception))
        self.assertIn("The access token is invalid", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, MastodonUnauthorizedError)
        mock_close.assert_called_once()
        mock_api.status_post.assert_not_called()

    @patch("social.mastodon_client.Mastodon")
    def test_post_status(self, mock_mastodon):
        """Test posting a status passes every attribute through."""
        mock_api = self._mock_api(mock_mastodon)
        mock_api.status_post.return_value = {
            "id": "123",
            "url": "https://example.social/@user/123",
            "content": "<p>Test post</p>"
        }

        client = MastodonClient(instance_url="https://example.social", access_token="test_token")
        result = client.post("Test post")

        mock_api.status_post.assert_called_once_with(
            status="Test post",
            visibility="public",
            sensitive=False,
            spoiler_text=None,
            language=None,
            scheduled_at=None
        )
        self.assertEqual(result["url"], "https://example.social/@user/123")

    @patch("social.mastodon_client.Mastodon")
    def test_post_with_content_warning(self, mock_mastodon):
        """Test sensitive posts carry their spoiler text and language."""
        mock_api = self._mock_api(mock_mastodon)
        mock_api.status_post.return_value = {"id": "124", "url": "https://example.social/@user/124"}

        client = MastodonClient(instance_url="https://example.social", access_token="test_token")
        client.post("Spoiler status", visibility="unlisted", sensitive=True,
                    spoiler_text="Spoiler alert!", language="en")

        status_args = mock_api.status_post.call_args[1]
        self.assertEqual(status_args["visibility"], "unlisted")
        self.assertTrue(status_args["sensitive"])
        self.assertEqual(status_args["spoiler_text"], "Spoiler alert!")
        self.assertEqual(status_args["language"], "en")

    @patch("social.mastodon_client.Mastodon")
    def test_post_scheduled_status(self, mock_mastodon):
        """Test a scheduled post returns the scheduled status."""
        mock_api = self._mock_api(mock_mastodon)
        when = datetime(2030, 1, 7, tzinfo=timezone.utc)
        mock_api.status_post.return_value = {"id": "129", "scheduled_at": when}

        client = MastodonClient(instance_url="https://example.social", access_token="test_token")
        result = client.post("Scheduled status", scheduled_at=when)

        self.assertEqual(mock_api.status_post.call_args[1]["scheduled_at"], when)
        self.assertEqual(result["id"], "129")

    @patch("social.mastodon_client.Mastodon")
    def test_post_rejected_by_server(self, mock_mastodon):
        """Test a server error is raised as RemoteError with its message."""
        mock_api = self._mock_api(mock_mastodon)
        mock_api.status_post.side_effect = MastodonAPIError(
            "Mastodon API returned error", 422, "Unprocessable Entity", "Validation failed: Text can't be blank"
        )

        client = MastodonClient(instance_url="https://example.social", access_token="test_token")

        with self.assertRaises(RemoteError) as ctx:
            client.post("Test post")
        self.assertIn("Validation failed", str(ctx.exception))

    @patch("social.mastodon_client.Mastodon")
    def test_post_network_failure(self, mock_mastodon):
        """Test a network error is raised as RemoteError."""
        mock_api = self._mock_api(mock_mastodon)
        mock_api.status_post.side_effect = MastodonNetworkError("Could not complete request: Connection refused")

        client = MastodonClient(instance_url="https://example.social", access_token="test_token")

        with self.assertRaises(RemoteError) as ctx:
            client.post("Test post")
        self.assertIn("Connection refused", str(ctx.exception))

    @patch("social.mastodon_client.Mastodon")
    def test_context_manager_closes_session(self, mock_mastodon):
        """Test the HTTP session is closed when the client is done."""
        self._mock_api(mock_mastodon)

        with MastodonClient(instance_url="https://example.social", access_token="test_token") as client:
            client.session = MagicMock()

        client.session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
