#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pytest

import aiofifo

ASYNC_BACKENDS = ("asyncio", "trio")


@pytest.fixture(params=ASYNC_BACKENDS)
def anyio_backend(request):
    pytest.importorskip(request.param)

    return request.param


@pytest.fixture
def spawn():
    """
    Start ``func(*args)`` in *task_group* and return a future that settles
    with its outcome, so that tests can check whether it is still pending.
    """

    def _spawn(task_group, func, /, *args):
        future = aiofifo.lowlevel.Future()

        async def _run():
            try:
                result = await func(*args)
            except Exception as exc:  # noqa: BLE001
                future.set_exception(exc)
            else:
                future.set_result(result)

        task_group.start_soon(_run)

        return future

    return _spawn
