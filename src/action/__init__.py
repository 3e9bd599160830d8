"""
Task I/O Module for the Mastodon toot action.

This module provides the two capabilities the publisher needs from its
task runner: reading named inputs and reporting outputs or failure.

Usage:
    >>> from action import ActionCore
    >>> core = ActionCore()
    >>> result = core.get_required_string("message")
    >>> if result.ok:
    ...     core.set_output("echo", result.value)
"""

from .core import ActionCore, TaskIO

__all__ = ["ActionCore", "TaskIO"]
