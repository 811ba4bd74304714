"""Query functionality: query builder and pipeline operations."""

from poolkit.core.query.models import Query
from poolkit.core.query.operations import (
    any_of,
    apply_filters,
    clamp_count,
    data_field_comparator,
    field_comparator,
    meta_field_comparator,
    normalize_order,
    paginate,
    sort_entries,
)

__all__ = [
    # Models
    "Query",
    # Operations
    "any_of",
    "apply_filters",
    "sort_entries",
    "paginate",
    "clamp_count",
    "normalize_order",
    "field_comparator",
    "data_field_comparator",
    "meta_field_comparator",
]
