from __future__ import annotations

import asyncio

from giftstep.domain.throttle import FixedDelay, NoDelay, SequentialTaskQueue
from tests.helpers.recipients import RecordingDelay


def test_queue_runs_items_in_order_with_delay_between() -> None:
    events: list[str] = []
    queue: SequentialTaskQueue[int, int] = SequentialTaskQueue(delay=RecordingDelay(events))
    queue.extend([1, 2])
    queue.submit(3)

    async def handler(item: int) -> int:
        events.append(f"run:{item}")
        await asyncio.sleep(0)
        events.append(f"done:{item}")
        return item * 10

    results = asyncio.run(queue.drain(handler))

    assert results == [10, 20, 30]
    assert events == ["run:1", "done:1", "delay", "run:2", "done:2", "delay", "run:3", "done:3"]
    assert len(queue) == 0


def test_empty_queue_never_waits() -> None:
    delay = RecordingDelay()
    queue: SequentialTaskQueue[int, int] = SequentialTaskQueue(delay=delay)

    async def handler(item: int) -> int:
        return item

    assert asyncio.run(queue.drain(handler)) == []
    assert delay.count == 0


def test_fixed_delay_uses_injected_sleep() -> None:
    slept: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    async def scenario() -> None:
        await FixedDelay(1.5, sleep=fake_sleep)()
        await FixedDelay(0, sleep=fake_sleep)()
        await NoDelay()()

    asyncio.run(scenario())

    assert slept == [1.5]
