from __future__ import annotations

import functools
from typing import Any, Callable, Generic, TypeVar, cast

_T = TypeVar("_T")


def exactly_one(**kwargs: Any) -> None:
    """
    Verify arguments; exactly one of all keyword arguments must not be None.

    Example:
        >>> exactly_one(filename=filename, file=file, text=text, url=url)
    """
    if sum([(arg is not None and arg != "") for arg in kwargs.values()]) != 1:
        names = list(kwargs.keys())
        if len(names) > 1:
            message = f"Exactly one of {', '.join(names[:-1])} and {names[-1]} must be specified."
        else:
            message = f"{names[0]} must be specified."
        raise ValueError(message)


class lazyproperty(Generic[_T]):
    """Decorator like @property, but evaluated only on first access.

    The decorated method runs once per instance; its result is stored in the instance `__dict__`
    under the method's name and returned on every later access. Like @property it can only wrap a
    method taking `self` alone.

    A lazyproperty is read-only: it is a *data descriptor*, so `__get__()` runs on every access
    (shadowing the cached `__dict__` item) and assignment raises `AttributeError`. This keeps the
    cached value immutable and idempotent.

    Usage::

        class Obj(object)

            @lazyproperty
            def fget(self):
                return 'some result'
    """

    def __init__(self, fget: Callable[..., _T]) -> None:
        self._fget = fget
        self._name = fget.__name__
        functools.update_wrapper(self, fget)  # pyright: ignore

    def __get__(self, obj: Any, type: Any = None) -> _T:
        # --- accessed on the class, e.g. Obj.fget, return the descriptor itself ---
        if obj is None:
            return self  # type: ignore

        value = obj.__dict__.get(self._name)
        if value is None:
            value = self._fget(obj)
            obj.__dict__[self._name] = value
        return cast(_T, value)

    def __set__(self, obj: Any, value: Any) -> None:
        """Raises unconditionally, to preserve read-only behavior."""
        raise AttributeError("can't set attribute")
