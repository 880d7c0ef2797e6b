"""Sequential task execution with a pause between tasks."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


class Delay(Protocol):
    """Strategy awaited between two consecutive tasks."""

    async def __call__(self) -> None: ...


@dataclass(slots=True)
class FixedDelay:
    seconds: float
    sleep: Sleep = field(default=asyncio.sleep)

    async def __call__(self) -> None:
        if self.seconds > 0:
            await self.sleep(self.seconds)


@dataclass(slots=True)
class NoDelay:
    async def __call__(self) -> None:
        return None


class SequentialTaskQueue[TItem, TResult]:
    """FIFO queue drained by a single worker, one item at a time.

    Item ``n + 1`` is not started before the handler for item ``n`` has
    returned and the delay has elapsed.
    """

    def __init__(self, *, delay: Delay | None = None) -> None:
        self._delay: Delay = delay or NoDelay()
        self._pending: deque[TItem] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def submit(self, item: TItem) -> None:
        self._pending.append(item)

    def extend(self, items: Iterable[TItem]) -> None:
        self._pending.extend(items)

    async def drain(self, handler: Callable[[TItem], Awaitable[TResult]]) -> list[TResult]:
        results: list[TResult] = []
        first = True
        while self._pending:
            item = self._pending.popleft()
            if not first:
                await self._delay()
            first = False
            results.append(await handler(item))
        return results
