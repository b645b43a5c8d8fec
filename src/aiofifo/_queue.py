#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._cancellation import Cancelled, CancellationToken
from .lowlevel import Future, async_checkpoint
from .meta import MISSING, MissingType

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

    if sys.version_info >= (3, 9):
        from collections.abc import Iterable
    else:
        from typing import Iterable

_T = TypeVar("_T")


class Queue(Generic[_T]):
    """
    An unbounded FIFO queue whose consumers are served in arrival order.

    :meth:`push` never blocks: it hands the item directly to the earliest
    waiting consumer, or buffers it if there is none. :meth:`pop` returns the
    next buffered item, or waits for one, optionally until a cancellation
    token is triggered.

    Example:
      .. code:: python

        queue = Queue()

        async def consumer(token):
            while True:
                try:
                    item = await queue.pop(cancellation_token=token)
                except Cancelled:
                    break

                await handle(item)
    """

    __slots__ = (
        "__weakref__",
        "_consumers",
        "_data",
    )

    def __new__(cls, items: Iterable[_T] | MissingType = MISSING, /) -> Self:
        """..."""

        self = object.__new__(cls)

        if items is not MISSING:
            self._data = deque(items)
        else:
            self._data = deque()

        self._consumers = deque()

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Returns arguments that can be used to create new instances with the
        same state.

        Used by:

        * The :mod:`pickle` module for pickling.
        * The :mod:`copy` module for copying.

        The buffered items affect the arguments; waiting consumers do not.

        Example:
            >>> orig = Queue('items')
            >>> copy = Queue(*orig.__getnewargs__())
            >>> len(copy)
            5
        """

        if not self._data:
            return ()

        return (tuple(self._data),)

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        if not self._data:
            return self.__class__()

        return self.__class__(self._data.copy())

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}({list(self._data)!r})"

        length = len(self._data)

        if length > 0:
            extra = f"length={length}"
        else:
            extra = f"length={length}, waiting={len(self._consumers)}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the queue has buffered items.

        Used by the standard :ref:`truth testing procedure <truth>`.
        """

        return bool(self._data)

    def __len__(self, /) -> int:
        """
        Returns the number of buffered items.

        Used by the built-in function :func:`len`.
        """

        return len(self._data)

    def copy(self, /) -> Self:
        """..."""

        return self.__copy__()

    def _hand_over(self, /, item: _T) -> bool:
        if consumers := self._consumers:
            future, registration = consumers.popleft()

            if registration is not None:
                registration.dispose()

            future.set_result(item)

            return True

        return False

    def _withdraw(self, /, consumer: tuple[Future[_T], Any]) -> None:
        try:
            self._consumers.remove(consumer)
        except ValueError:  # already served
            return

        future, registration = consumer

        if registration is not None:
            registration.dispose()

        future.set_exception(Cancelled())

    def push(self, /, item: _T) -> None:
        """
        Hand *item* over to the earliest waiting consumer, or buffer it if no
        consumer is waiting. Never blocks.
        """

        if not self._hand_over(item):
            self._data.append(item)

    async def pop(
        self,
        /,
        *,
        cancellation_token: CancellationToken | None = None,
    ) -> _T:
        """
        Remove and return the next item, waiting for one if necessary.

        A buffered item is returned without looking at *cancellation_token*.
        Otherwise the call waits until an item is pushed or the token is
        triggered, whichever happens first.

        Raises:
          Cancelled:
            if *cancellation_token* was triggered before an item became
            available (including before the call).
        """

        if self._data:
            item = self._data.popleft()

            try:
                await async_checkpoint()
            except BaseException:
                if not self._hand_over(item):
                    self._data.appendleft(item)

                raise

            return item

        if cancellation_token is not None:
            cancellation_token.raise_if_cancelled()

            future = Future()
            registration = cancellation_token.subscribe(
                lambda: self._withdraw(consumer),
            )
        else:
            future = Future()
            registration = None

        self._consumers.append(consumer := (future, registration))

        try:
            return await future
        except BaseException:
            if not future.done():  # the task itself is cancelled
                try:
                    self._consumers.remove(consumer)
                except ValueError:
                    pass
            elif future.exception() is None:  # served, but too late
                item = future.result()

                if not self._hand_over(item):
                    self._data.appendleft(item)

            raise
        finally:
            if registration is not None:
                registration.dispose()

    @property
    def waiting(self, /) -> int:
        """
        The current number of consumers waiting for an item.

        It represents the length of the waiting queue and thus changes
        immediately.
        """

        return len(self._consumers)
