"""Event models: names of the events a Pool emits."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any


class PoolEvent(StrEnum):
    """Events emitted by a Pool and its queries.

    Payloads:
        ADD: the new Entry.
        BATCH_ADD: list of new entries.
        GET: the Entry returned by get() or chosen by select().
        SET: the updated Entry.
        REMOVE: the removed Entry.
        BATCH_REMOVE: list of removed entries.
        BEFORE_SELECT: list of materialized candidate entries.
        AFTER_SELECT: the selected data, or None.
    """

    ADD = "add"
    BATCH_ADD = "batch_add"
    GET = "get"
    SET = "set"
    REMOVE = "remove"
    BATCH_REMOVE = "batch_remove"
    BEFORE_SELECT = "before_select"
    AFTER_SELECT = "after_select"


type Handler = Callable[..., Any]
"""Event handler; receives the event payload as positional arguments."""
