"""Ready-made wrappers for Interceptable.wrap().

Usage:
    # Retry a flaky side effect (requires tenacity: pip install poolkit[retry])
    policy = RetryPolicy(max_attempts=3, backoff="exponential")
    pool.wrap("add", retrying(policy))

    # Flag calls to an operation during a migration
    pool.wrap("delete", warn_on_call("delete() is going away, use remove()"))
"""

from __future__ import annotations

import warnings
from collections.abc import Callable
from typing import Any

from poolkit.core.intercept.models import RetryPolicy, Wrapper

# Optional tenacity import for retry functionality
try:
    import tenacity

    TENACITY_AVAILABLE = True
except ImportError:
    TENACITY_AVAILABLE = False


def _build_retryer(policy: RetryPolicy) -> tenacity.Retrying:
    """Build a tenacity retryer from RetryPolicy configuration."""
    stop = tenacity.stop_after_attempt(policy.max_attempts)

    wait: tenacity.wait.wait_base
    if policy.backoff == "exponential":
        wait = tenacity.wait_exponential(multiplier=policy.base_delay, min=policy.base_delay)
    elif policy.backoff == "linear":
        wait = tenacity.wait_incrementing(start=policy.base_delay, increment=policy.base_delay)
    else:
        wait = tenacity.wait_none()

    return tenacity.Retrying(
        stop=stop,
        wait=wait,
        reraise=False,
    )


def retrying(policy: RetryPolicy) -> Wrapper:
    """Create a wrapper that retries the wrapped operation per policy.

    With max_attempts <= 1 the wrapper simply delegates.

    Args:
        policy: Retry configuration.

    Returns:
        Wrapper suitable for Interceptable.wrap().

    Raises:
        ImportError: If retries are requested and tenacity is not installed.
    """
    if policy.max_attempts > 1 and not TENACITY_AVAILABLE:
        msg = "Retry policy requires tenacity. Install with: pip install poolkit[retry]"
        raise ImportError(msg)

    def wrapper(original: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        if policy.max_attempts <= 1:
            return original(*args, **kwargs)

        retryer = _build_retryer(policy)
        try:
            for attempt in retryer:
                with attempt:
                    return original(*args, **kwargs)
        except tenacity.RetryError as e:
            if policy.on_exhausted == "skip":
                return None
            name = getattr(getattr(original, "func", original), "__name__", "operation")
            msg = f"{name} failed after {policy.max_attempts} attempts"
            raise RuntimeError(msg) from e.last_attempt.exception()

        return None  # pragma: no cover

    return wrapper


def warn_on_call(message: str) -> Wrapper:
    """Create a wrapper that emits a UserWarning before delegating."""

    def wrapper(original: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        warnings.warn(message, stacklevel=3)
        return original(*args, **kwargs)

    return wrapper
