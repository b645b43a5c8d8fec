#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from logging import Logger, getLogger
from typing import TYPE_CHECKING, Any, Final

from .lowlevel import Future, async_sleep

if TYPE_CHECKING:
    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

    if sys.version_info >= (3, 9):
        from collections.abc import Callable
    else:
        from typing import Callable

LOGGER: Final[Logger] = getLogger(__name__)


class Cancelled(Exception):
    """
    Raised by an operation whose cancellation token was triggered before the
    operation could complete.
    """


class CancellationRegistration:
    """
    A disposable subscription to a :class:`CancellationToken`.

    Disposing it unsubscribes the callback; disposing twice (or after the
    callback has been invoked) does nothing. It can be used as a context
    manager, in which case it is disposed on exit.
    """

    __slots__ = (
        "__weakref__",
        "_token",
    )

    def __init__(self, /, token: CancellationToken | None) -> None:
        self._token = token

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self.active:
            extra = "active"
        else:
            extra = "disposed"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    def __enter__(self, /) -> Self:
        return self

    def __exit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose()

    def dispose(self, /) -> None:
        """
        Unsubscribe the callback if it has not been invoked yet.
        """

        if (token := self._token) is not None:
            self._token = None

            token._callbacks.pop(self, None)

    @property
    def active(self, /) -> bool:
        """
        :data:`True` while the callback can still be invoked.
        """

        return (
            self._token is not None and self in self._token._callbacks
        )


class CancellationToken:
    """
    A read-only view of a cancellation request.

    Tokens are obtained from :attr:`CancellationSource.token` and passed to
    operations that support cooperative cancellation, such as
    :meth:`aiofifo.Queue.pop`. An operation can either check the
    :attr:`cancelled` state or :meth:`subscribe` to be notified once the
    request is made.

    Example:
      >>> source = CancellationSource()
      >>> token = source.token
      >>> registration = token.subscribe(lambda: print('cancelled!'))
      >>> source.cancel()
      cancelled!
      True
      >>> token.cancelled
      True
    """

    __slots__ = (
        "__weakref__",
        "_callbacks",
        "_cancelled",
    )

    def __init__(self, /) -> None:
        self._callbacks = {}
        self._cancelled = False

    @classmethod
    def none(cls, /) -> Self:
        """
        Return a token that is never cancelled.

        Subscribing to it invokes nothing and returns an inert registration,
        so the token never holds on to callbacks.
        """

        self = cls()
        self._callbacks = None  # never cancelled

        return self

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._cancelled:
            extra = "cancelled"
        else:
            extra = f"not cancelled, callbacks={len(self._callbacks or ())}"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if cancellation has been requested.
        """

        return self._cancelled

    def _cancel(self, /) -> bool:
        if self._cancelled:
            return False

        self._cancelled = True

        callbacks = self._callbacks

        # one at a time, so that a callback may dispose the later ones
        while callbacks:
            registration = next(iter(callbacks))
            callback = callbacks.pop(registration)

            registration._token = None

            try:
                callback()
            except Exception:
                LOGGER.exception(
                    "exception calling callback for %r",
                    self,
                )

        return True

    def subscribe(
        self,
        /,
        callback: Callable[[], Any],
    ) -> CancellationRegistration:
        """
        Arrange for *callback* to be called (once, synchronously) when
        cancellation is requested.

        Callbacks are invoked in subscription order. An exception raised by a
        callback is logged and does not prevent the remaining ones from being
        called.

        If cancellation has already been requested, *callback* is not called
        and the returned registration is inert. Check :attr:`cancelled` first
        to handle that case.
        """

        if self._cancelled or self._callbacks is None:
            return CancellationRegistration(None)

        registration = CancellationRegistration(self)

        self._callbacks[registration] = callback

        return registration

    def raise_if_cancelled(self, /) -> None:
        """
        Raise :exc:`Cancelled` if cancellation has been requested.
        """

        if self._cancelled:
            raise Cancelled

    async def wait(self, /) -> None:
        """
        Suspend the current task until cancellation is requested.
        """

        if self._cancelled:
            return

        future = Future()

        with self.subscribe(lambda: future.set_result(None)):
            await future

    @property
    def cancelled(self, /) -> bool:
        """
        :data:`True` if cancellation has been requested.
        """

        return self._cancelled


class CancellationSource:
    """
    The producer side of a cancellation request.

    Example:
      >>> source = CancellationSource()
      >>> source.cancel()
      True
      >>> source.cancel()  # already cancelled
      False
    """

    __slots__ = (
        "__weakref__",
        "_token",
    )

    def __init__(self, /) -> None:
        self._token = CancellationToken()

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._token._cancelled:
            extra = "cancelled"
        else:
            extra = "not cancelled"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    def cancel(self, /) -> bool:
        """
        Request cancellation, invoking all subscribed callbacks.

        Returns :data:`True` on the first call, :data:`False` afterwards.
        """

        return self._token._cancel()

    async def cancel_after(self, /, seconds: float) -> bool:
        """
        Sleep for *seconds*, then request cancellation.

        Run it in a separate task to put a deadline on an operation that
        accepts the :attr:`token`.
        """

        await async_sleep(seconds)

        return self.cancel()

    @property
    def token(self, /) -> CancellationToken:
        """
        The token observing this source.
        """

        return self._token

    @property
    def cancelled(self, /) -> bool:
        """
        :data:`True` if cancellation has been requested.
        """

        return self._token._cancelled
