#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import os

from typing import Final

from ._libraries import current_async_library

_ASYNCIO_CHECKPOINTS_ENABLED_BY_DEFAULT: Final[bool] = bool(
    os.getenv(
        "AIOFIFO_ASYNCIO_CHECKPOINTS",
        os.getenv(
            "AIOFIFO_ASYNC_CHECKPOINTS",
            "",
        ),
    )
)
_TRIO_CHECKPOINTS_ENABLED_BY_DEFAULT: Final[bool] = bool(
    os.getenv(
        "AIOFIFO_TRIO_CHECKPOINTS",
        os.getenv(
            "AIOFIFO_ASYNC_CHECKPOINTS",
            "1",
        ),
    )
)


async def _asyncio_checkpoint() -> None:
    from types import coroutine

    @coroutine
    def _asyncio_checkpoint():
        yield

    await _asyncio_checkpoint()


async def _trio_checkpoint() -> None:
    global _trio_checkpoint

    from trio.lowlevel import checkpoint as _trio_checkpoint

    await _trio_checkpoint()


def async_checkpoint_enabled() -> bool:
    """
    Return :data:`True` if async checkpoints are enabled for the current
    async library, :data:`False` otherwise (including outside of any).
    """

    library = current_async_library(failsafe=True)

    if library == "asyncio":
        return _ASYNCIO_CHECKPOINTS_ENABLED_BY_DEFAULT

    if library == "trio":
        return _TRIO_CHECKPOINTS_ENABLED_BY_DEFAULT

    return False


async def async_checkpoint(*, force: bool = False) -> None:
    """
    A pure async checkpoint.

    It checks for cancellation and allows the scheduler to switch to another
    task. Whether it does anything is controlled by the environment (read once
    at import time):

    * ``AIOFIFO_ASYNC_CHECKPOINTS`` set to any non-empty value enables
      checkpoints for all async libraries. The empty value has the opposite
      effect.
    * ``AIOFIFO_<ASYNC_LIBRARY>_CHECKPOINTS`` (``ASYNCIO`` or ``TRIO``) does
      the same for the specified async library only, and takes precedence.
    * Pass ``force=True`` to force a checkpoint.

    The primitives call it on their non-blocking paths, so that every
    ``await mutex.acquire()`` and ``await queue.pop()`` is exactly one
    checkpoint when enabled.

    By default, async checkpoints are enabled for Trio only.
    """

    library = current_async_library(failsafe=True)

    if library == "asyncio":
        if force or _ASYNCIO_CHECKPOINTS_ENABLED_BY_DEFAULT:
            await _asyncio_checkpoint()
    elif library == "trio":
        if force or _TRIO_CHECKPOINTS_ENABLED_BY_DEFAULT:
            await _trio_checkpoint()
