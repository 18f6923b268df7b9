"""
Wait policy shared by every operation issued through one browser session.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import InvalidArgumentError


@dataclass(frozen=True)
class WaitPolicy:
    """
    Immutable wait configuration.

    Attributes:
        timeout: Maximum time to wait for a condition, in seconds
        poll_interval: Delay between two condition checks, in seconds
    """
    timeout: float = 30.0
    poll_interval: float = 0.25

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise InvalidArgumentError(f"Wait timeout must be positive, got {self.timeout}")
        if self.poll_interval <= 0:
            raise InvalidArgumentError(f"Poll interval must be positive, got {self.poll_interval}")

    @property
    def timeout_ms(self) -> int:
        """Timeout in milliseconds (Playwright units)."""
        return int(self.timeout * 1000)

    def with_timeout(self, timeout: float) -> "WaitPolicy":
        """Return a copy with a different timeout."""
        return WaitPolicy(timeout=timeout, poll_interval=self.poll_interval)


__all__ = ["WaitPolicy"]
