from __future__ import annotations

import functools
import inspect

from typing_extensions import Self


class _CachedValue:
    _cache_dict_name = "__cached_value_dict__"

    def __init__(self, func=None) -> None:
        self._func = None
        self._is_async = False
        self.__name__ = ""
        if func is not None:
            self(func)

    def __call__(self, func) -> Self:
        functools.update_wrapper(self, func)
        self._func = func
        self._is_async = inspect.iscoroutinefunction(func)
        return self

    def _get_cache_dict(self, obj) -> dict:
        return obj.__dict__.setdefault(self._cache_dict_name, dict())

    def reset_cache(self, obj) -> None:
        self._get_cache_dict(obj).pop(self.__name__, None)


class cached_property(_CachedValue):  # noqa
    """The value is calculated on the first access and replaces the property in the object."""

    def __get__(self, obj, cls):
        if obj is None:
            return self

        value = obj.__dict__[self.__name__] = self._func(obj)
        return value


class cached_method(_CachedValue):  # noqa
    """Method without arguments, the result of the first call is returned forever.

    Works for coroutines too: the awaited result is kept, not the coroutine object.
    """

    def __get__(self, obj, cls):
        if obj is None:
            return self

        if self._is_async:

            async def _async_wrapper():
                value = await self._func(obj)

                async def _get_value():
                    return value

                obj.__dict__[self.__name__] = _get_value
                return value

            return _async_wrapper

        def _wrapper():
            value = self._func(obj)
            obj.__dict__[self.__name__] = lambda: value
            return value

        return _wrapper


class reset_cached_method(_CachedValue):  # noqa
    """Method without arguments, the cached result lives till reset_cache(obj) is called."""

    def __get__(self, obj, cls):
        if obj is None:
            return self
        assert not self._is_async, "coroutines aren't supported"

        def _wrapper():
            cache_dict = self._get_cache_dict(obj)
            if self.__name__ not in cache_dict:
                cache_dict[self.__name__] = self._func(obj)
            return cache_dict[self.__name__]

        _wrapper.reset_cache = self.reset_cache
        return _wrapper
