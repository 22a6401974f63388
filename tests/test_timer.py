from __future__ import annotations

import asyncio

import pytest

from lastcall import DebounceConfigError, TimerOptions, debounce_promise

WAIT_S = 0.02


def run_async(coro):
    return asyncio.run(coro)


def test_burst_shares_one_future_and_one_execution():
    async def scenario() -> None:
        calls: list[tuple] = []

        async def echo(*args):
            calls.append(args)
            return args[-1]

        debounced = debounce_promise(echo, WAIT_S)
        futures = [debounced(1), debounced(2), debounced(3)]

        assert futures[0] is futures[1] is futures[2]
        assert debounced.pending
        assert await futures[0] == 3
        assert calls == [(3,)]
        assert not debounced.pending

    run_async(scenario())


def test_sync_function_results_are_accepted():
    async def scenario() -> None:
        debounced = debounce_promise(lambda value: value * 2, WAIT_S)
        assert await debounced(21) == 42

    run_async(scenario())


def test_each_call_restarts_quiet_period():
    async def scenario() -> None:
        calls: list[int] = []

        async def record(value: int) -> int:
            calls.append(value)
            return value

        debounced = debounce_promise(record, WAIT_S * 4)
        future = debounced(1)
        await asyncio.sleep(WAIT_S)
        debounced(2)
        await asyncio.sleep(WAIT_S)
        assert calls == []
        assert await future == 2
        assert calls == [2]

    run_async(scenario())


def test_leading_call_executes_immediately_then_trailing_burst():
    async def scenario() -> None:
        calls: list[int] = []

        async def record(value: int) -> int:
            calls.append(value)
            return value

        debounced = debounce_promise(record, WAIT_S, leading=True)
        leading = debounced(1)
        trailing = [debounced(2), debounced(3)]
        assert leading is not trailing[0]

        assert await leading == 1
        assert calls == [1]
        assert await trailing[0] == 3
        assert await trailing[1] == 3
        assert calls == [1, 3]

    run_async(scenario())


def test_accumulate_hands_each_caller_its_own_result():
    async def scenario() -> None:
        batches: list[list[tuple]] = []

        async def square_all(batch):
            batches.append(batch)
            return [args[0] ** 2 for args in batch]

        debounced = debounce_promise(square_all, WAIT_S, {"accumulate": True})
        results = await asyncio.gather(debounced(1), debounced(2), debounced(3))

        assert results == [1, 4, 9]
        assert batches == [[(1,), (2,), (3,)]]

    run_async(scenario())


def test_accumulate_length_mismatch_rejects_all_callers():
    async def scenario() -> None:
        async def short(batch):
            return [0]

        debounced = debounce_promise(short, WAIT_S, accumulate=True)
        outcomes = await asyncio.gather(
            debounced(1), debounced(2), return_exceptions=True
        )

        assert all(isinstance(outcome, ValueError) for outcome in outcomes)

    run_async(scenario())


def test_accumulate_rejects_keyword_arguments():
    async def scenario() -> None:
        debounced = debounce_promise(lambda batch: batch, WAIT_S, accumulate=True)
        with pytest.raises(TypeError):
            debounced(value=1)

    run_async(scenario())


def test_max_wait_flushes_a_continuous_burst():
    async def scenario() -> None:
        calls: list[int] = []

        async def record(value: int) -> int:
            calls.append(value)
            return value

        debounced = debounce_promise(record, WAIT_S * 5, max_wait_s=WAIT_S * 2)
        first = debounced(0)
        for value in range(1, 4):
            await asyncio.sleep(WAIT_S)
            debounced(value)
            if first.done():
                break

        assert first.done()
        assert calls and calls[0] == first.result()

    run_async(scenario())


def test_wait_may_be_a_callable():
    async def scenario() -> None:
        waits: list[float] = []

        def current_wait() -> float:
            waits.append(WAIT_S)
            return WAIT_S

        debounced = debounce_promise(lambda value: value, current_wait)
        debounced(1)
        assert await debounced(2) == 2
        assert len(waits) == 2

    run_async(scenario())


def test_failure_settles_shared_future_with_exception():
    async def scenario() -> None:
        async def fail(value: int) -> int:
            raise RuntimeError(f"failed {value}")

        debounced = debounce_promise(fail, WAIT_S)
        debounced(1)
        with pytest.raises(RuntimeError, match="failed 2"):
            await debounced(2)

    run_async(scenario())


def test_invalid_timer_configuration_is_rejected():
    with pytest.raises(DebounceConfigError):
        debounce_promise(lambda: None, -1)
    with pytest.raises(DebounceConfigError):
        debounce_promise(lambda: None, WAIT_S, max_wait_s=0)
    with pytest.raises(DebounceConfigError):
        debounce_promise(lambda: None, WAIT_S, trailing=False)
    assert debounce_promise(lambda: None, WAIT_S, TimerOptions(leading=True)).options.leading


def test_leading_call_invokes_function_before_returning():
    async def scenario() -> None:
        calls: list[int] = []

        async def record(value: int) -> int:
            calls.append(value)
            return value

        debounced = debounce_promise(record, WAIT_S, leading=True)
        leading = debounced(1)
        assert calls == [1]
        assert await leading == 1

    run_async(scenario())


def test_synchronous_failure_settles_burst_future():
    async def scenario() -> None:
        def explode(value: int) -> int:
            raise LookupError(value)

        leading = debounce_promise(explode, WAIT_S, leading=True)
        with pytest.raises(LookupError):
            await leading(1)

        trailing = debounce_promise(explode, WAIT_S)
        with pytest.raises(LookupError):
            await trailing(2)

    run_async(scenario())


@pytest.mark.parametrize("wait_s", [float("nan"), float("-inf"), "fast", None])
def test_non_numeric_or_non_finite_wait_is_rejected(wait_s):
    with pytest.raises(DebounceConfigError):
        debounce_promise(lambda: None, wait_s)
