#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Any

from .lowlevel import Future, async_checkpoint

if TYPE_CHECKING:
    import sys

    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self


class Mutex:
    """
    A mutual exclusion primitive that grants access in strict arrival order.

    It does not track its owner: :meth:`release` must be called exactly once
    per successful :meth:`acquire`, by the task that acquired it. Releasing an
    unlocked mutex does nothing; any other misuse (a double release, a release
    on behalf of another task) is undefined behavior.

    Example:
      .. code:: python

        mutex = Mutex()

        async def increment():
            await mutex.acquire()
            try:
                value = await storage.get()
                await storage.set(value + 1)
            finally:
                mutex.release()
    """

    __slots__ = (
        "__weakref__",
        "_waiters",
    )

    def __new__(cls, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._waiters = deque()

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Returns arguments that can be used to create new instances with the
        same initial values.

        Used by:

        * The :mod:`pickle` module for pickling.
        * The :mod:`copy` module for copying.

        The current state does not affect the arguments.

        Example:
            >>> orig = Mutex()
            >>> copy = Mutex(*orig.__getnewargs__())
        """

        return ()

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        return self.__class__()

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}()"

        if self._waiters:
            extra = f"locked, waiting={self.waiting}"
        else:
            extra = "unlocked"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the mutex is locked.

        Used by the standard :ref:`truth testing procedure <truth>`.
        """

        return bool(self._waiters)

    async def __aenter__(self, /) -> Self:
        """..."""

        await self.acquire()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """..."""

        self.release()

    async def acquire(self, /) -> None:
        """
        Suspend the current task until it holds the mutex.

        Each call takes a snapshot of the entries ahead of it, then appends its
        own entry. The mutex is held once every entry of the snapshot has been
        settled, and entries are only settled by :meth:`release` from the
        front, so no task can overtake one that arrived earlier.

        If the current task is cancelled while waiting, its entry is withdrawn
        (or, if the mutex has already been handed over, released), and the
        cancellation propagates.
        """

        waiters = self._waiters

        predecessors = tuple(waiters)
        waiters.append(future := Future())

        if not predecessors:
            try:
                await async_checkpoint()
            except BaseException:
                self.release()
                raise

            return

        try:
            # the nearest one settles last, so the rest return at once
            for predecessor in reversed(predecessors):
                await predecessor
        except BaseException:
            if waiters[0] is future:  # already handed over
                self.release()
            else:
                waiters.remove(future)
                future.set_result(None)

            raise

    def release(self, /) -> None:
        """
        Hand the mutex over to the next waiting task, if any.

        Does nothing if the mutex is unlocked.
        """

        if waiters := self._waiters:
            waiters.popleft().set_result(None)

    @property
    def locked(self, /) -> bool:
        """
        :data:`True` if at least one acquisition is outstanding.
        """

        return bool(self._waiters)

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks waiting to acquire.

        It does not include the current holder.
        """

        return max(len(self._waiters) - 1, 0)
