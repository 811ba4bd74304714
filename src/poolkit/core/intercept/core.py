"""Method interception as explicit middleware.

Operations marked with @interceptable consult a per-instance list of
wrappers before running. Registering a wrapper never reassigns the method.

Usage:
    def log_adds(original, data, metadata=None):
        print("adding", data)
        return original(data, metadata)

    pool.wrap("add", log_adds)
    pool.add({"id": 1})      # prints, then adds
    pool.unwrap("add")
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

from poolkit.core.intercept.models import Wrapper

_MARKER = "__interceptable__"


def interceptable[F: Callable[..., Any]](fn: F) -> F:
    """Mark a method as wrappable through Interceptable.wrap()."""

    @functools.wraps(fn)
    def method(self: Interceptable, *args: Any, **kwargs: Any) -> Any:
        wrappers = self._wrappers.get(fn.__name__) if self._wrappers else None
        if not wrappers:
            return fn(self, *args, **kwargs)

        call: Callable[..., Any] = functools.partial(fn, self)
        for wrapper in wrappers:
            call = functools.partial(wrapper, call)
        return call(*args, **kwargs)

    setattr(method, _MARKER, True)
    return method  # type: ignore[return-value]


class Interceptable:
    """Mixin giving instances a wrap()/unwrap() registry for marked methods.

    Wrappers for one name run outermost-last-registered: wrapping twice means
    the second wrapper receives the first wrapper as `original`.
    """

    _wrappers: dict[str, list[Wrapper]] | None = None

    @classmethod
    def interceptable_methods(cls) -> frozenset[str]:
        """Names of all methods that can be wrapped on this class."""
        return frozenset(
            name
            for klass in cls.__mro__
            for name, attr in vars(klass).items()
            if getattr(attr, _MARKER, False)
        )

    def wrap(self, method: str, wrapper: Wrapper) -> None:
        """Register around-advice for a named operation.

        Args:
            method: Name of an interceptable method.
            wrapper: Callable receiving `(original, *args, **kwargs)`.

        Raises:
            AttributeError: If the method does not exist or cannot be wrapped.
        """
        if method not in self.interceptable_methods():
            raise AttributeError(f"{type(self).__name__}.{method} cannot be wrapped")
        if self._wrappers is None:
            self._wrappers = {}
        self._wrappers.setdefault(method, []).append(wrapper)

    def unwrap(self, method: str) -> None:
        """Remove every wrapper registered for a named operation."""
        if self._wrappers:
            self._wrappers.pop(method, None)

    def wrapped_methods(self) -> list[str]:
        """Names of methods that currently have wrappers."""
        return [name for name, wrappers in (self._wrappers or {}).items() if wrappers]
