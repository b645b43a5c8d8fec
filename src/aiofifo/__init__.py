#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
Fair coordination primitives for async Python

This package provides two primitives for tasks running on the same event loop
(asyncio or Trio, directly or via AnyIO):

* :class:`Mutex` grants exclusive access strictly in arrival order
* :class:`Queue` is an unbounded FIFO queue that serves consumers strictly in
  arrival order, with cooperative cancellation of waiting consumers via
  :class:`CancellationToken`

Neither primitive blocks the thread: waiting tasks are suspended and resumed
by the event loop.
"""

__author__: str = "Ilya Egorov <0x42005e1f@gmail.com>"
__version__: str = "0.1.0"

from . import (  # noqa: F401
    lowlevel,
    meta,
)
from ._cancellation import (
    CancellationRegistration as CancellationRegistration,
    CancellationSource as CancellationSource,
    CancellationToken as CancellationToken,
    Cancelled as Cancelled,
)
from ._mutex import (
    Mutex as Mutex,
)
from ._queue import (
    Queue as Queue,
)

# prepare for external use
meta.export(globals())
