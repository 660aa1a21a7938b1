"""
Explicit success/failure variants returned by the service layer.

Services hand back ``Ok`` or ``Err`` so callers branch on each error kind
instead of relying on exceptions escaping from the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .exceptions import SalonBookError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome wrapping a value."""
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome wrapping one of the domain errors."""
    error: SalonBookError

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def kind(self) -> str:
        """Name of the error class, e.g. ``NotFoundError``."""
        return type(self.error).__name__

    def unwrap(self):
        """Re-raise the wrapped error."""
        raise self.error


Result = Union[Ok[T], Err]
