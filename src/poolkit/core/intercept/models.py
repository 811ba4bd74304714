"""Interception models: wrapper signature and retry configuration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

type Wrapper = Callable[..., Any]
"""Around-advice: `wrapper(original, *args, **kwargs) -> result`.

`original` is the next callable in the chain (the operation itself, or the
previously registered wrapper). A wrapper may run code before or after it,
or not call it at all.
"""


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Configuration for retrying a wrapped operation.

    Useful for wrappers with side effects that can fail transiently
    (persisting a pool after add(), notifying an external service).
    """

    max_attempts: int = 1
    """Maximum attempts (1 = no retry). Default: no retry."""

    backoff: Literal["none", "linear", "exponential"] = "none"
    """Backoff strategy between retries."""

    base_delay: float = 0.1
    """Base delay in seconds for backoff calculation."""

    on_exhausted: Literal["fail", "skip"] = "fail"
    """What to do when retries are exhausted: raise, or return None."""
