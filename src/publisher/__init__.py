"""Mastodon Toot Action Package.

This package posts a single status ("toot") to a Mastodon instance from a
GitHub Actions step and reports the resulting timestamp and URL.

Modules:
    publisher: publish(), run() and the mastodon-toot console entry point
    validation: Input and configuration validation steps
    result: Success/Failure values returned by the validation steps
    errors: ConfigurationError, InputError and RemoteError
"""

__version__ = "1.0.0"
