#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import logging

import anyio
import pytest

import aiofifo

pytestmark = pytest.mark.anyio


class TestCancellationSource:
    factory = aiofifo.CancellationSource

    def test_base(self, /):
        source = self.factory()

        assert not source.cancelled
        assert not source.token.cancelled
        assert not source.token
        assert repr(source).endswith("[not cancelled]>")
        assert repr(source.token).endswith("[not cancelled, callbacks=0]>")

        assert source.cancel()
        assert not source.cancel()

        assert source.cancelled
        assert source.token.cancelled
        assert source.token
        assert repr(source).endswith("[cancelled]>")
        assert repr(source.token).endswith("[cancelled]>")

    def test_token_identity(self, /):
        source = self.factory()

        assert source.token is source.token

    def test_callbacks_order(self, /):
        source = self.factory()
        calls = []

        source.token.subscribe(lambda: calls.append(1))
        source.token.subscribe(lambda: calls.append(2))
        source.token.subscribe(lambda: calls.append(3))

        assert calls == []

        source.cancel()

        assert calls == [1, 2, 3]

        source.cancel()

        assert calls == [1, 2, 3]

    def test_dispose(self, /):
        source = self.factory()
        calls = []

        registration = source.token.subscribe(lambda: calls.append(1))

        assert registration.active
        assert repr(registration).endswith("[active]>")

        registration.dispose()
        registration.dispose()

        assert not registration.active
        assert repr(registration).endswith("[disposed]>")

        source.cancel()

        assert calls == []

    def test_dispose_after_call(self, /):
        source = self.factory()
        calls = []

        registration = source.token.subscribe(lambda: calls.append(1))

        source.cancel()

        assert not registration.active

        registration.dispose()

        assert calls == [1]

    def test_dispose_during_cancellation(self, /):
        source = self.factory()
        calls = []

        source.token.subscribe(lambda: later.dispose())
        later = source.token.subscribe(lambda: calls.append(1))

        source.cancel()

        assert calls == []

    def test_context_manager(self, /):
        source = self.factory()
        calls = []

        with source.token.subscribe(lambda: calls.append(1)) as registration:
            assert registration.active

        assert not registration.active

        source.cancel()

        assert calls == []

    def test_subscribe_after_cancel(self, /):
        source = self.factory()
        calls = []

        source.cancel()

        registration = source.token.subscribe(lambda: calls.append(1))

        assert not registration.active
        assert calls == []

    def test_failing_callback(self, /, caplog):
        source = self.factory()
        calls = []

        def fail():
            msg = "boom"
            raise ValueError(msg)

        source.token.subscribe(fail)
        source.token.subscribe(lambda: calls.append(1))

        with caplog.at_level(logging.ERROR, logger="aiofifo"):
            assert source.cancel()

        assert calls == [1]
        assert "exception calling callback" in caplog.text
        assert "boom" in caplog.text

    def test_raise_if_cancelled(self, /):
        source = self.factory()

        source.token.raise_if_cancelled()

        source.cancel()

        with pytest.raises(aiofifo.Cancelled):
            source.token.raise_if_cancelled()

    def test_none(self, /):
        token = aiofifo.CancellationToken.none()
        calls = []

        registration = token.subscribe(lambda: calls.append(1))

        assert not token.cancelled
        assert not registration.active
        assert repr(token).endswith("[not cancelled, callbacks=0]>")

        registration.dispose()
        token.raise_if_cancelled()

        assert calls == []

    async def test_none_wait(self, /):
        token = aiofifo.CancellationToken.none()

        with anyio.move_on_after(0.01) as scope:
            await token.wait()

        assert scope.cancelled_caught
        assert repr(token).endswith("[not cancelled, callbacks=0]>")

    async def test_wait(self, /, spawn):
        source = self.factory()

        async with anyio.create_task_group() as tg:
            future = spawn(tg, source.token.wait)

            await anyio.wait_all_tasks_blocked()

            assert not future.done()
            assert "callbacks=1" in repr(source.token)

            source.cancel()

            await anyio.wait_all_tasks_blocked()

            assert future.done()

        await source.token.wait()

    async def test_wait_cancelled_task(self, /):
        source = self.factory()

        with anyio.move_on_after(0.01):
            await source.token.wait()

        assert "callbacks=0" in repr(source.token)

    async def test_cancel_after(self, /):
        source = self.factory()

        assert await source.cancel_after(0)
        assert source.cancelled
        assert not await source.cancel_after(0)
