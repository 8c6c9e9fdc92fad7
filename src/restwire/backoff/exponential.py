r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from restwire.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** attempt).

    This is the default strategy of restwire clients
    (``ClientConfig.use_exponential_backoff=True``).

    Args:
        base_delay: The delay of the first retry in seconds
            (default: 1.0).

    Example:
        ```pycon
        >>> from restwire.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5)
        >>> backoff.calculate(0)  # First retry
        0.5
        >>> backoff.calculate(1)  # Second retry
        1.0
        >>> backoff.calculate(2)  # Third retry
        2.0

        ```
    """

    def __init__(self, base_delay: float = 1.0) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_delay={self.base_delay})"

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The retry number (0-indexed).

        Returns:
            The calculated delay: base_delay * (2 ** attempt).
        """
        return self.base_delay * (2**attempt)
