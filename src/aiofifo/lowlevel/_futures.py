#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar, final

from ._waiters import create_async_waiter

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Generator
    else:
        from typing import Generator

_T = TypeVar("_T")


class InvalidStateError(RuntimeError):
    """
    Raised when the outcome of a pending future is requested.
    """


@final
class Future(Generic[_T]):
    """
    A single-assignment cell that any number of tasks may await.

    It is created pending and settled at most once, either with a value
    (:meth:`set_result`) or with an exception (:meth:`set_exception`). Every
    task awaiting it is woken on settlement; awaiting a settled future returns
    the value (or raises the exception) without suspending.

    A task that is cancelled while awaiting simply stops observing the future;
    the future itself stays pending. This is what allows primitives to decide
    for themselves how to roll back on cancellation.

    Example:
      >>> fut = Future()
      >>> fut.done()
      False
      >>> fut.set_result('spam')
      True
      >>> fut.set_result('eggs')  # already settled
      False
      >>> fut.result()
      'spam'
    """

    __slots__ = (
        "__weakref__",
        "_exception",
        "_pending",
        "_result",
        "_waiters",
    )

    def __init__(self, /) -> None:
        self._exception = None
        self._pending = True
        self._result = None
        self._waiters = deque()

    def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
        bcs = Future
        bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

        msg = f"type '{bcs_repr}' is not an acceptable base type"
        raise TypeError(msg)

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._pending:
            extra = f"pending, waiting={len(self._waiters)}"
        elif self._exception is not None:
            extra = f"failed, exception={self._exception!r}"
        else:
            extra = f"done, result={self._result!r}"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    def __await__(self, /) -> Generator[Any, Any, _T]:
        if self._pending:
            waiter = create_async_waiter()

            self._waiters.append(waiter)

            try:
                yield from waiter.__await__()
            finally:
                if self._pending:  # cancelled
                    try:
                        self._waiters.remove(waiter)
                    except ValueError:
                        pass

        return self.result()

    def _settle(self, /) -> None:
        self._pending = False

        waiters = self._waiters

        while waiters:
            waiters.popleft().wake()

    def set_result(self, /, result: _T) -> bool:
        """
        Settle the future with *result*.

        Returns :data:`True` if the future was pending, :data:`False` if it
        was already settled (in which case nothing changes).
        """

        if not self._pending:
            return False

        self._result = result
        self._settle()

        return True

    def set_exception(self, /, exception: BaseException) -> bool:
        """
        Settle the future with *exception*.

        Returns :data:`True` if the future was pending, :data:`False` if it
        was already settled (in which case nothing changes).
        """

        if not self._pending:
            return False

        self._exception = exception
        self._settle()

        return True

    def done(self, /) -> bool:
        """
        Return :data:`True` if the future is settled.
        """

        return not self._pending

    def result(self, /) -> _T:
        """
        Return the value of the settled future, or raise its exception.

        Raises:
          InvalidStateError:
            if the future is still pending.
        """

        if self._pending:
            msg = "the future is still pending"
            raise InvalidStateError(msg)

        if self._exception is not None:
            raise self._exception

        return self._result

    def exception(self, /) -> BaseException | None:
        """
        Return the exception of the settled future, or :data:`None` if it was
        settled with a value.

        Raises:
          InvalidStateError:
            if the future is still pending.
        """

        if self._pending:
            msg = "the future is still pending"
            raise InvalidStateError(msg)

        return self._exception

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks suspended on the future.
        """

        return len(self._waiters)
