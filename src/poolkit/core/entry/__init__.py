"""Entry functionality: the stored item model and field helpers."""

from poolkit.core.entry.models import MISSING, Entry, KeyStore
from poolkit.core.entry.operations import (
    MetadataCopyMode,
    compare_values,
    copy_entry,
    copy_metadata,
    has_field,
    make_key_fn,
    resolve_field,
    structurally_equal,
)

__all__ = [
    # Models
    "Entry",
    "MISSING",
    "KeyStore",
    # Operations
    "MetadataCopyMode",
    "resolve_field",
    "has_field",
    "make_key_fn",
    "compare_values",
    "structurally_equal",
    "copy_metadata",
    "copy_entry",
]
