#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from math import inf, isinf, isnan
from typing import NoReturn

from ._futures import Future
from ._libraries import current_async_library


async def _asyncio_sleep(seconds: float, /) -> None:
    global _asyncio_sleep

    from asyncio import sleep as _asyncio_sleep

    await _asyncio_sleep(seconds)


async def _trio_sleep(seconds: float, /) -> None:
    global _trio_sleep

    from trio import sleep as _trio_sleep

    await _trio_sleep(seconds)


async def async_sleep_forever() -> NoReturn:
    """
    Suspend the current task until it is cancelled.
    """

    await Future()

    msg = "a never-settled future was settled"
    raise RuntimeError(msg)


async def async_sleep(seconds: float, /) -> None:
    """
    Suspend the current task for *seconds* using the current async library.

    Raises:
      ValueError:
        if *seconds* is NaN or negative.
      RuntimeError:
        if the current async library is not supported.
    """

    if isinstance(seconds, int):
        try:
            seconds = float(seconds)
        except OverflowError:
            seconds = (-1 if seconds < 0 else 1) * inf

    if isnan(seconds):
        msg = "seconds must not be NaN"
        raise ValueError(msg)

    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    if isinf(seconds):
        await async_sleep_forever()

    library = current_async_library()

    if library == "asyncio":
        await _asyncio_sleep(seconds)
    elif library == "trio":
        await _trio_sleep(seconds)
    else:
        msg = f"unsupported async library {library!r}"
        raise RuntimeError(msg)
