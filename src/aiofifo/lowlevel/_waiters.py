#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Any, Literal, NoReturn, Protocol, final

from ._libraries import current_async_library

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Generator
    else:
        from typing import Generator


class AsyncWaiter(Protocol):
    """
    A one-shot handle that suspends exactly one task until woken.

    It is bound to the task and the event loop that created it, and must be
    awaited by that task only. Waking before awaiting is not supported; the
    caller tracks settlement itself (see :class:`aiofifo.lowlevel.Future`).
    """

    __slots__ = ()

    def __await__(self, /) -> Generator[Any, Any, bool]:
        """..."""

    def wake(self, /) -> None:
        """..."""


def _get_asyncio_waiter_class() -> type[AsyncWaiter]:
    from asyncio import InvalidStateError, get_running_loop

    @final
    class _AsyncioWaiter(AsyncWaiter):
        __slots__ = (
            "__future",
            "__loop",
        )

        def __init__(self, /) -> None:
            self.__future = None
            self.__loop = get_running_loop()

        def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
            bcs = _AsyncioWaiter
            bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

            msg = f"type '{bcs_repr}' is not an acceptable base type"
            raise TypeError(msg)

        def __reduce__(self, /) -> NoReturn:
            msg = f"cannot reduce {self!r}"
            raise TypeError(msg)

        def __await__(self, /) -> Generator[Any, Any, bool]:
            self.__future = self.__loop.create_future()

            try:
                yield from self.__future.__await__()
            finally:
                self.__future = None

            return True

        def wake(self, /) -> None:
            if self.__future is not None:
                try:
                    self.__future.set_result(True)
                except InvalidStateError:  # task is cancelled
                    pass

    return _AsyncioWaiter


def _get_trio_waiter_class() -> type[AsyncWaiter]:
    from trio.lowlevel import (
        Abort,
        current_task,
        reschedule,
        wait_task_rescheduled,
    )

    @final
    class _TrioWaiter(AsyncWaiter):
        __slots__ = ("__task",)

        def __init__(self, /) -> None:
            self.__task = None

        def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
            bcs = _TrioWaiter
            bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

            msg = f"type '{bcs_repr}' is not an acceptable base type"
            raise TypeError(msg)

        def __reduce__(self, /) -> NoReturn:
            msg = f"cannot reduce {self!r}"
            raise TypeError(msg)

        def __await__(self, /) -> Generator[Any, Any, bool]:
            self.__task = current_task()

            try:
                yield from wait_task_rescheduled(self.__abort).__await__()
            finally:
                self.__task = None

            return True

        def __abort(self, /, raise_cancel: Any) -> Literal[Abort.SUCCEEDED]:
            # the task is no longer suspended, so it must not be rescheduled
            self.__task = None

            return Abort.SUCCEEDED

        def wake(self, /) -> None:
            if (task := self.__task) is not None:
                self.__task = None

                reschedule(task)

    return _TrioWaiter


def _create_asyncio_waiter() -> AsyncWaiter:
    global _create_asyncio_waiter

    _create_asyncio_waiter = _get_asyncio_waiter_class()

    return _create_asyncio_waiter()


def _create_trio_waiter() -> AsyncWaiter:
    global _create_trio_waiter

    _create_trio_waiter = _get_trio_waiter_class()

    return _create_trio_waiter()


def create_async_waiter() -> AsyncWaiter:
    """
    Create a waiter for the current task of the current async library.

    Raises:
      AsyncLibraryNotFoundError:
        if there is no current async library.
      RuntimeError:
        if the current async library is not supported.
    """

    library = current_async_library()

    if library == "asyncio":
        return _create_asyncio_waiter()

    if library == "trio":
        return _create_trio_waiter()

    msg = f"unsupported async library {library!r}"
    raise RuntimeError(msg)
