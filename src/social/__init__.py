"""
Social Media Integration Module for the Mastodon toot action.

This module provides the base client class and the Mastodon implementation.
"""

from .base_client import SocialMediaClient
from .mastodon_client import MastodonClient

__all__ = ['SocialMediaClient', 'MastodonClient']
