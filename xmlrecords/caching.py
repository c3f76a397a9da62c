#
# Copyright (c), 2016-2026, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from threading import Lock
from collections.abc import Callable
from typing import Any, Generic, TypeVar
from weakref import WeakKeyDictionary

from xmlrecords.exceptions import XMLRecordsTypeError

KT = TypeVar('KT')
VT = TypeVar('VT')


class ComputeOnceCache(Generic[KT, VT]):
    """
    A cache of values computed from keys by a pure function. Values are computed
    outside the lock and published once: an entry is never replaced, so a race
    between two computations for the same key is benign and the first published
    value wins. Keys are kept by weak references.

    :param func: the function that computes a value from a key.
    :param enabled: if `False` the values are computed at each call.
    """
    __slots__ = ('_func', '_enabled', '_cache', '_lock')

    def __init__(self, func: Callable[[KT], VT], enabled: bool = True) -> None:
        if not callable(func):
            raise XMLRecordsTypeError(f"{func!r} is not callable")
        self._func = func
        self._enabled = enabled
        self._cache: WeakKeyDictionary[Any, VT] = WeakKeyDictionary()
        self._lock = Lock()

    def __repr__(self) -> str:
        return '%s(%r, enabled=%r)' % (self.__class__.__name__, self._func, self._enabled)

    def __call__(self, key: KT) -> VT:
        if not self._enabled:
            return self._func(key)

        try:
            return self._cache[key]
        except KeyError:
            value = self._func(key)
            with self._lock:
                return self._cache.setdefault(key, value)

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._cache
        except TypeError:
            return False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        if value is not self._enabled:
            self._enabled = value
            self.clear()

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
