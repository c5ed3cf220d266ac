"""
Result type for collaborators whose failures are part of the contract.

Carrier adapters return ``Success`` with quotes or ``Failure`` with a
``ProviderError`` instead of raising, so callers can tell a rejected request
(render as 400) from an unavailable carrier (render as 5xx).

Example:
    >>> def parse_weight(raw: str) -> Result[Decimal, str]:
    ...     try:
    ...         return Success(Decimal(raw))
    ...     except InvalidOperation:
    ...         return Failure(f"Invalid weight: {raw}")
    ...
    >>> parse_weight("2.5").unwrap_or(Decimal("0"))
    Decimal('2.5')
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Never

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True, slots=True)
class Success[T]:
    """A successful outcome holding ``value``."""

    value: T

    def is_success(self) -> bool:
        """Return True."""
        return True

    def is_failure(self) -> bool:
        """Return False."""
        return False

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def unwrap_or(self, _default: T) -> T:
        """Return the contained value, ignoring the default."""
        return self.value

    def map[U](self, func: Callable[[T], U]) -> Success[U]:
        """
        Transform the contained value.

        Args:
            func: Function applied to the value.

        Returns:
            New Success wrapping the transformed value.
        """
        return Success(func(self.value))


@dataclass(frozen=True, slots=True)
class Failure[E]:
    """A failed outcome holding ``error``."""

    error: E

    def is_success(self) -> bool:
        """Return False."""
        return False

    def is_failure(self) -> bool:
        """Return True."""
        return True

    def unwrap(self) -> Never:
        """
        Refuse to unwrap a failure.

        Raises:
            ValueError: Always.
        """
        raise ValueError(f"Cannot unwrap Failure: {self.error}")

    def unwrap_or[T](self, default: T) -> T:
        """Return ``default``."""
        return default

    def map[T, U](self, _func: Callable[[T], U]) -> Failure[E]:
        """Return self; there is no value to transform."""
        return self


type Result[T, E] = Success[T] | Failure[E]


def success[T](value: T) -> Success[T]:
    """Wrap ``value`` in a Success."""
    return Success(value)


def failure[E](error: E) -> Failure[E]:
    """Wrap ``error`` in a Failure."""
    return Failure(error)
