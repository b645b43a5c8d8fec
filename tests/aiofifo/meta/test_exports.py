#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pickle

import pytest

import aiofifo


def test_package_exports():
    assert aiofifo.__all__ == (
        "CancellationRegistration",
        "CancellationSource",
        "CancellationToken",
        "Cancelled",
        "Mutex",
        "Queue",
    )

    for name in aiofifo.__all__:
        value = getattr(aiofifo, name)

        assert value.__module__ == "aiofifo"
        assert value.__qualname__ == name


def test_method_exports():
    assert aiofifo.Queue.pop.__module__ == "aiofifo"
    assert aiofifo.Queue.pop.__qualname__ == "Queue.pop"
    assert aiofifo.Mutex.locked.fget.__qualname__ == "Mutex.locked"


def test_subpackage_exports():
    assert "Future" in aiofifo.lowlevel.__all__
    assert "AsyncLibraryNotFoundError" in aiofifo.lowlevel.__all__
    assert aiofifo.lowlevel.Future.__module__ == "aiofifo.lowlevel"
    assert aiofifo.meta.export.__module__ == "aiofifo.meta"


def test_pickling_by_reference():
    exc = pickle.loads(pickle.dumps(aiofifo.Cancelled()))

    assert isinstance(exc, aiofifo.Cancelled)


def test_replaces():
    namespace = {}

    def sketch():
        return "parrot"

    namespace["sketch"] = sketch

    @aiofifo.meta.replaces(namespace)
    def sketch():
        return "ex-parrot"

    assert namespace["sketch"]() == "ex-parrot"
    assert not hasattr(namespace["sketch"], "__wrapped__")

    with pytest.raises(LookupError):

        @aiofifo.meta.replaces(namespace)
        def shrubbery():
            pass
