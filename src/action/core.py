"""
GitHub Actions Task I/O for the Mastodon toot action.

This module implements the task I/O capability on top of the GitHub Actions
runner protocol, mirroring what @actions/core does for JavaScript actions.

Runner Protocol:
    - Inputs are exposed as INPUT_<NAME> environment variables, with spaces
      replaced by underscores and the name upper-cased
    - Outputs are appended to the file named by GITHUB_OUTPUT using the
      heredoc form (name<<delimiter / value / delimiter)
    - Self-hosted runners without GITHUB_OUTPUT fall back to the legacy
      ::set-output workflow command
    - Failure is reported with the ::error:: workflow command and a
      non-zero exit code

API Reference:
    Workflow commands: https://docs.github.com/actions/using-workflows/workflow-commands-for-github-actions
"""
import os
import sys
import uuid
import logging
from typing import Dict, Mapping, Optional, Protocol, TextIO

from publisher.errors import InputError
from publisher.result import Failure, Result, Success


logger = logging.getLogger(__name__)

# YAML 1.2 core schema booleans, as accepted by @actions/core getBooleanInput
TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


class TaskIO(Protocol):
    """Capability interface the publisher uses to talk to its task runner."""

    def get_required_string(self, name: str) -> Result[str]:
        ...

    def get_optional_string(self, name: str) -> str:
        ...

    def get_boolean(self, name: str, default: bool = False) -> Result[bool]:
        ...

    def set_output(self, name: str, value: str) -> None:
        ...

    def set_outputs(self, outputs: Dict[str, str]) -> None:
        ...

    def set_failed(self, message: str) -> None:
        ...


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionCore:
    """Task I/O backed by the GitHub Actions runner environment.

    Attributes:
        environ: Environment mapping inputs and GITHUB_OUTPUT are read from
        stream: Stream workflow commands are written to (stdout by default)
        exit_code: 0 until set_failed() is called, then 1

    Example:
        >>> core = ActionCore(environ={"INPUT_MESSAGE": "hello"})
        >>> core.get_required_string("message").value
        'hello'
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None, stream: Optional[TextIO] = None):
        self.environ = os.environ if environ is None else environ
        self.stream = stream
        self.exit_code = 0

    def _write(self, line: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def _input(self, name: str) -> str:
        key = "INPUT_" + name.replace(" ", "_").upper()
        return self.environ.get(key, "").strip()

    def get_required_string(self, name: str) -> Result[str]:
        """Read an input that must be supplied.

        Returns:
            Success with the trimmed value, or Failure(InputError) when the
            input is unset or blank
        """
        value = self._input(name)
        if not value:
            return Failure(InputError(f"Input required and not supplied: {name}"))
        return Success(value)

    def get_optional_string(self, name: str) -> str:
        """Read an optional input, returning an empty string when unset."""
        return self._input(name)

    def get_boolean(self, name: str, default: bool = False) -> Result[bool]:
        """Read an optional boolean input.

        Accepts true|True|TRUE|false|False|FALSE. An unset input yields
        the default.
        """
        value = self._input(name)
        if not value:
            return Success(default)
        if value in TRUE_VALUES:
            return Success(True)
        if value in FALSE_VALUES:
            return Success(False)
        return Failure(InputError(
            f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        ))

    def set_output(self, name: str, value: str) -> None:
        """Record a named output for later workflow steps."""
        self.set_outputs({name: value})

    def set_outputs(self, outputs: Dict[str, str]) -> None:
        """Record several outputs at once.

        With GITHUB_OUTPUT every record goes out in a single write, so a
        failing file leaves no partial set behind.

        Raises:
            OSError: If GITHUB_OUTPUT cannot be written
        """
        output_path = self.environ.get("GITHUB_OUTPUT")
        if not output_path:
            for name, value in outputs.items():
                self._write(f"::set-output name={_escape_property(name)}::{_escape_data(value)}")
            return

        records = []
        for name, value in outputs.items():
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            records.append(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        with open(output_path, "a", encoding="utf-8") as f:
            f.write("".join(records))
        logger.debug(f"Wrote outputs {', '.join(outputs)} to {output_path}")

    def set_failed(self, message: str) -> None:
        """Report the run as failed with the given message."""
        self.exit_code = 1
        self._write(f"::error::{_escape_data(message)}")

    def is_debug(self) -> bool:
        return self.environ.get("RUNNER_DEBUG") == "1"
