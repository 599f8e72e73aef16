"""延迟与回调工具测试"""

import asyncio

import pytest

from autopager.common.utils import maybe_await, sleep_ms


class TestSleepMs:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("delay", [0, None, -5])
    async def test_non_positive_delay_still_yields(self, delay):
        ran = []

        async def mark():
            ran.append(True)

        task = asyncio.ensure_future(mark())
        await sleep_ms(delay)

        assert ran == [True]
        await task

    @pytest.mark.asyncio
    async def test_cancellable_with_zero_delay(self):
        async def spin():
            while True:
                await sleep_ms(0)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(spin(), timeout=0.05)


class TestMaybeAwait:
    @pytest.mark.asyncio
    async def test_plain_and_coroutine_values(self):
        async def value():
            return 42

        assert await maybe_await(7) == 7
        assert await maybe_await(value()) == 42
