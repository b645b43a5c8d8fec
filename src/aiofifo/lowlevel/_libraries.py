#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import Literal

from sniffio import (
    AsyncLibraryNotFoundError as AsyncLibraryNotFoundError,
    thread_local as current_async_library_tlocal,
)
from wrapt import when_imported

from aiofifo.meta import replaces

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload


def _asyncio_running() -> bool:
    return False


@when_imported("asyncio")
def _(_):
    @replaces(globals())
    def _asyncio_running():
        # asyncio.get_running_loop() raises a RuntimeError when there is no
        # running loop, and handling it is relatively slow, so we use the
        # non-public asyncio._get_running_loop(), which returns None instead.

        from asyncio import _get_running_loop

        @replaces(globals())
        def _asyncio_running():
            return _get_running_loop() is not None

        return _asyncio_running()


@overload
def current_async_library(*, failsafe: Literal[False] = False) -> str: ...
@overload
def current_async_library(*, failsafe: Literal[True]) -> str | None: ...
def current_async_library(*, failsafe=False):
    """
    Detect which async library is currently running.

    Args:
      failsafe:
        Unless set to :data:`True`, the function will raise an exception when
        there is no current async library. Otherwise the function returns
        :data:`None` in that case.

    Returns:
      ``"asyncio"``, ``"trio"``, or :data:`None`.

    Raises:
      AsyncLibraryNotFoundError:
        if the current async library was not recognized.
    """

    # trio (and anyio on top of it) announces itself via sniffio
    if (name := current_async_library_tlocal.name) is not None:
        return name

    if _asyncio_running():
        return "asyncio"

    if failsafe:
        return None

    msg = "unknown async library, or not in async context"
    raise AsyncLibraryNotFoundError(msg)
