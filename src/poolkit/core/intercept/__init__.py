"""Interception functionality: method-wrapping middleware and stock wrappers."""

from poolkit.core.intercept.core import Interceptable, interceptable
from poolkit.core.intercept.models import RetryPolicy, Wrapper
from poolkit.core.intercept.wrappers import retrying, warn_on_call

__all__ = [
    # Core
    "Interceptable",
    "interceptable",
    # Models
    "Wrapper",
    "RetryPolicy",
    # Wrappers
    "retrying",
    "warn_on_call",
]
