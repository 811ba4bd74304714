"""Core functionalities: entry model, selectors, query pipeline, events, interception.

Architecture Note:
    core/ holds the building blocks the Pool is assembled from. Apart from
    Query (which records a plan) and EventEmitter (which holds handler lists),
    everything here is a pure function or an immutable description.
    For the stateful container, see pool/; for cross-pool selection, binder/.
"""

from poolkit.core.entry import (
    MISSING,
    Entry,
    KeyStore,
    MetadataCopyMode,
    compare_values,
    copy_entry,
    copy_metadata,
    has_field,
    make_key_fn,
    resolve_field,
    structurally_equal,
)
from poolkit.core.events import EventEmitter, Handler, PoolEvent
from poolkit.core.intercept import (
    Interceptable,
    RetryPolicy,
    Wrapper,
    interceptable,
    retrying,
    warn_on_call,
)
from poolkit.core.query import Query
from poolkit.core.selector import (
    Selector,
    SelectorKind,
    Selectors,
    min_by,
    random_with,
    select_first,
    select_last,
    select_random,
    weighted,
)
from poolkit.core.types import (
    Comparator,
    CompareFn,
    Copy,
    DataPredicate,
    KeyFn,
    KeySpec,
    Predicate,
    SortOrder,
)

__all__ = [
    # Types
    "Copy",
    "Predicate",
    "DataPredicate",
    "Comparator",
    "CompareFn",
    "KeyFn",
    "KeySpec",
    "SortOrder",
    # Entry
    "Entry",
    "MISSING",
    "KeyStore",
    "MetadataCopyMode",
    "resolve_field",
    "has_field",
    "make_key_fn",
    "compare_values",
    "structurally_equal",
    "copy_metadata",
    "copy_entry",
    # Events
    "PoolEvent",
    "Handler",
    "EventEmitter",
    # Interception
    "Interceptable",
    "interceptable",
    "Wrapper",
    "RetryPolicy",
    "retrying",
    "warn_on_call",
    # Query
    "Query",
    # Selectors
    "Selector",
    "SelectorKind",
    "Selectors",
    "select_first",
    "select_last",
    "select_random",
    "random_with",
    "min_by",
    "weighted",
]
