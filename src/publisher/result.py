"""
Tagged results for the validation pipeline.

Each validation step returns either Success(value) or Failure(error).
The publisher stops at the first Failure and reports its error.

Example:
    >>> result = Success("hello")
    >>> result.ok
    True
    >>> Failure(InputError("boom")).message
    'boom'
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .errors import PublishError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful step carrying its value."""
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed step carrying the error that stopped the run."""
    error: PublishError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)


Result = Union[Success[T], Failure]
