"""
Error taxonomy for the Mastodon toot action.

Every failure is fatal for the run. Validation steps return these as
Failure values; the Mastodon client raises RemoteError.
"""


class PublishError(Exception):
    """Base class for every error that ends a publish attempt."""


class ConfigurationError(PublishError):
    """Instance URL or access token is missing or empty."""


class InputError(PublishError):
    """A task input is missing or holds a value outside its allowed set."""


class RemoteError(PublishError):
    """Authentication or post creation failed on the Mastodon side."""
