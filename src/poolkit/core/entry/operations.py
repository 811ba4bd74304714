"""Pure functions over entry data: field access, ordering, equality, copying.

Data stored in a pool can be a mapping, a dataclass, a Pydantic model or any
plain object. These helpers give the query pipeline, the selectors and the
combinators one way to read a field by name from any of them.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import asdict, is_dataclass
from typing import Any, Literal

from poolkit.core.entry.models import MISSING, Entry
from poolkit.core.types import Copy, KeyFn, KeySpec

MetadataCopyMode = Literal["shallow", "deep"]


def _is_pydantic(value: Any) -> bool:
    """Check if value is a Pydantic model instance without importing pydantic."""
    for base in type(value).__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def resolve_field(obj: Any, name: str) -> Any:
    """Read a field by name from a mapping or an object.

    Args:
        obj: Mapping (key lookup) or object (attribute lookup).
        name: Field name.

    Returns:
        The field value, or MISSING if the field is not defined.
    """
    if isinstance(obj, Mapping):
        return obj.get(name, MISSING)
    return getattr(obj, name, MISSING)


def has_field(obj: Any, name: str) -> bool:
    """Check whether a field is defined (present and not None)."""
    value = resolve_field(obj, name)
    return value is not MISSING and value is not None


def make_key_fn[T](key: KeySpec[T]) -> KeyFn[T]:
    """Normalize a field name or callable into a key extraction function.

    Raises:
        TypeError: If key is neither a string nor callable.
    """
    if isinstance(key, str):
        return lambda data: resolve_field(data, key)
    if callable(key):
        return key
    raise TypeError(f"Expected field name or callable, got {type(key).__name__}")


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison consistent with `<`.

    MISSING and None sort after every present value; two absent values are equal.

    Raises:
        TypeError: If the values are not mutually orderable.
    """
    a_absent = a is MISSING or a is None
    b_absent = b is MISSING or b is None
    if a_absent or b_absent:
        return int(a_absent) - int(b_absent)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def _normalize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if _is_pydantic(value):
        return value.model_dump()
    return value


def structurally_equal(a: Any, b: Any) -> bool:
    """Deep structural equality, the fallback comparator for set algebra.

    Dataclasses compare by their fields, Pydantic models by model_dump(),
    mappings by keys and values, sequences element-wise. Anything else uses ==.
    Strings and bytes are compared as scalars.
    """
    a, b = _normalize(a), _normalize(b)

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(structurally_equal(a[k], b[k]) for k in a)

    scalar = (str, bytes, bytearray)
    if (
        isinstance(a, Sequence)
        and isinstance(b, Sequence)
        and not isinstance(a, scalar)
        and not isinstance(b, scalar)
    ):
        if len(a) != len(b):
            return False
        return all(structurally_equal(x, y) for x, y in zip(a, b, strict=True))

    # bool is an int subclass, but True and 1 are different values
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b

    return bool(a == b)


def copy_metadata(
    metadata: Mapping[str, Any], mode: MetadataCopyMode = "shallow"
) -> Copy[dict[str, Any]]:
    """Copy a metadata mapping.

    Args:
        metadata: Source metadata.
        mode: "shallow" creates a new top-level dict (nested values shared),
            "deep" uses copy.deepcopy.

    Returns:
        A new dict independent of the source at the chosen depth.
    """
    if mode == "deep":
        return copy.deepcopy(dict(metadata))
    return dict(metadata)


def copy_entry[T](entry: Entry[T], mode: MetadataCopyMode = "shallow") -> Copy[Entry[T]]:
    """New entry sharing data by reference, with copied metadata."""
    return Entry(data=entry.data, metadata=copy_metadata(entry.metadata, mode))
