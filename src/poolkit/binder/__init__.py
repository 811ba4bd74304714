"""Cross-pool selection."""

from poolkit.binder.binder import Binder

__all__ = [
    "Binder",
]
