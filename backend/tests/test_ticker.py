import asyncio
import threading

from fittrack.core.ticker import RestTicker


def test_ensure_is_idempotent_and_loop_stops_on_false():
    calls = []

    def tick():
        calls.append(1)
        return len(calls) < 3

    async def scenario():
        ticker = RestTicker(interval=0.001)
        assert ticker.ensure("p1", tick) is True
        assert ticker.ensure("p1", tick) is False
        for _ in range(200):
            if not ticker.is_running("p1"):
                break
            await asyncio.sleep(0.005)
        return ticker

    ticker = asyncio.run(scenario())
    assert len(calls) == 3
    assert not ticker.is_running("p1")


def test_stop_cancels_before_the_next_tick():
    calls = []

    async def scenario():
        ticker = RestTicker(interval=0.05)
        ticker.ensure("p1", lambda: calls.append(1) or True)
        assert ticker.stop("p1") is True
        assert ticker.stop("p1") is False
        await asyncio.sleep(0.1)
        return ticker

    ticker = asyncio.run(scenario())
    assert calls == []
    assert not ticker.is_running("p1")


def test_failing_tick_ends_its_loop_only():
    async def scenario():
        ticker = RestTicker(interval=0.001)
        ticker.ensure("bad", lambda: 1 / 0)
        ticker.ensure("good", lambda: True)
        await asyncio.sleep(0.05)
        result = (ticker.is_running("bad"), ticker.is_running("good"))
        ticker.stop_all()
        return result

    assert asyncio.run(scenario()) == (False, True)


def test_ticks_run_off_the_event_loop_thread():
    seen = []

    async def scenario():
        loop_thread = threading.get_ident()
        ticker = RestTicker(interval=0.001)
        ticker.ensure("p1", lambda: seen.append(threading.get_ident()) and False)
        for _ in range(200):
            if not ticker.is_running("p1"):
                break
            await asyncio.sleep(0.005)
        return loop_thread

    loop_thread = asyncio.run(scenario())
    assert len(seen) == 1
    assert seen[0] != loop_thread
