#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
This package implements building blocks for top-level primitives: detection
of the running async library, per-library waiters, a settle-once future that
many tasks can await, checkpoints, and a library-agnostic sleep.

You can use its contents to create your own primitives.
"""

from ._checkpoints import (
    async_checkpoint as async_checkpoint,
    async_checkpoint_enabled as async_checkpoint_enabled,
)
from ._futures import (
    Future as Future,
    InvalidStateError as InvalidStateError,
)
from ._libraries import (
    AsyncLibraryNotFoundError as AsyncLibraryNotFoundError,
    current_async_library as current_async_library,
)
from ._time import (
    async_sleep as async_sleep,
    async_sleep_forever as async_sleep_forever,
)
from ._waiters import (
    AsyncWaiter as AsyncWaiter,
    create_async_waiter as create_async_waiter,
)
