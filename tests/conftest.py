"""
Pytest configuration and shared fixtures for all tests.

This module provides shared fixtures for the test suite, including:
- Scrubbing runner and Mastodon variables from the real environment
- GitHub Actions output file handling
"""

import os
import re

import pytest


OUTPUT_RECORD = re.compile(r"^(?P<name>[^\n<]+)<<(?P<delim>\S+)\n(?P<value>.*?)\n(?P=delim)\n", re.S | re.M)


def parse_outputs(text):
    """Parse GITHUB_OUTPUT heredoc records into a dict."""
    return {m.group("name"): m.group("value") for m in OUTPUT_RECORD.finditer(text)}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove variables the action reads so the host runner cannot leak in.

    Tests run inside GitHub Actions themselves, where GITHUB_OUTPUT and
    RUNNER_DEBUG may already be set.
    """
    for key in list(os.environ):
        if key.startswith(("INPUT_", "MASTODON_")) or key in ("GITHUB_OUTPUT", "RUNNER_DEBUG"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def output_file(tmp_path):
    """Empty GITHUB_OUTPUT file."""
    path = tmp_path / "github_output"
    path.touch()
    return path


@pytest.fixture
def read_outputs(output_file):
    """Return a callable that parses the outputs written so far."""
    def _read():
        return parse_outputs(output_file.read_text(encoding="utf-8"))
    return _read
