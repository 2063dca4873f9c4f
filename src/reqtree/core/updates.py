"""Update sources and the scheduler that re-runs a request on every trigger."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from .tasks import spawn

if TYPE_CHECKING:
    from .request import AnyRequest

logger = logging.getLogger(__name__)

_DONE = object()
_CLOSED = object()


@dataclass(frozen=True)
class _SourceFailed:
    error: BaseException


@dataclass(frozen=True)
class Interval:
    """
    Timer source ticking every ``seconds``, forever or ``count`` times.

    Each ``async for`` gets its own timer, so one Interval can drive any
    number of requests or calls.
    """

    seconds: float
    count: Optional[int] = None

    def __post_init__(self) -> None:
        if self.seconds <= 0:
            raise ValueError(f"Interval must be positive, got {self.seconds}")

    def __aiter__(self) -> AsyncIterator[float]:
        return self._ticks()

    async def _ticks(self) -> AsyncIterator[float]:
        loop = asyncio.get_running_loop()
        ticks = 0
        while self.count is None or ticks < self.count:
            await asyncio.sleep(self.seconds)
            ticks += 1
            yield loop.time()


def every(seconds: float, count: Optional[int] = None) -> Interval:
    """Timer update source, see ``Interval``."""
    return Interval(seconds, count)


class Signal:
    """
    Caller-driven update source.

    ``fire`` delivers one event to every current listener. Events fired
    while nobody is listening are dropped. ``close`` ends every listener's
    stream.

    Example:
        refresh = Signal()
        request.update(refresh).call()
        ...
        refresh.fire()
    """

    def __init__(self) -> None:
        self._listeners: set[asyncio.Queue] = set()
        self._closed = False

    @property
    def listeners(self) -> int:
        return len(self._listeners)

    def fire(self, value: Any = None) -> None:
        for queue in list(self._listeners):
            queue.put_nowait(value)

    def close(self) -> None:
        self._closed = True
        for queue in list(self._listeners):
            queue.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[Any]:
        # Subscribe now so events fired before the first __anext__ are kept
        queue: asyncio.Queue = asyncio.Queue()
        if self._closed:
            queue.put_nowait(_CLOSED)
        self._listeners.add(queue)
        return self._drain(queue)

    async def _drain(self, queue: asyncio.Queue) -> AsyncIterator[Any]:
        try:
            while True:
                value = await queue.get()
                if value is _CLOSED:
                    return
                yield value
        finally:
            self._listeners.discard(queue)


class MergedStream:
    """
    Fan-in of several async iterables into one.

    Events are delivered in arrival order with no ordering across sources.
    The stream ends once every source has ended; a failing source ends the
    whole stream with that source's exception. Sources are subscribed when
    the stream is created, and pumped from the first ``__anext__``.
    """

    def __init__(self, *sources: AsyncIterable[Any]) -> None:
        self._iterators = [source.__aiter__() for source in sources]
        self._queue: asyncio.Queue = asyncio.Queue()
        self._pumps: list[asyncio.Task] = []
        self._remaining = len(self._iterators)
        self._started = False

    def __aiter__(self) -> MergedStream:
        return self

    async def _pump(self, iterator: AsyncIterator[Any]) -> None:
        try:
            while True:
                try:
                    event = await iterator.__anext__()
                except StopAsyncIteration:
                    break
                self._queue.put_nowait(event)
        except Exception as e:
            self._queue.put_nowait(_SourceFailed(e))
        finally:
            self._queue.put_nowait(_DONE)

    async def __anext__(self) -> Any:
        if not self._started:
            self._started = True
            loop = asyncio.get_running_loop()
            self._pumps = [loop.create_task(self._pump(it)) for it in self._iterators]

        while self._remaining:
            item = await self._queue.get()
            if item is _DONE:
                self._remaining -= 1
                continue
            if isinstance(item, _SourceFailed):
                await self.aclose()
                raise item.error
            return item
        raise StopAsyncIteration

    async def aclose(self) -> None:
        """Stop pumping every source."""
        for pump in self._pumps:
            pump.cancel()
        await asyncio.gather(*self._pumps, return_exceptions=True)
        self._remaining = 0


def merge(*sources: AsyncIterable[Any]) -> MergedStream:
    """Merge update sources into a single event stream."""
    return MergedStream(*sources)


class UpdateScheduler:
    """
    Re-runs a request every time one of its update sources fires.

    Each event starts an independent ``perform`` that folds the tree again,
    so dynamic header values are re-read per trigger. In-flight calls are
    neither awaited before the next trigger nor cancelled by it: overlapping
    triggers each produce their own dispatch.

    Example:
        request = Request(Url("https://api.example.com/status")).update(every(30))
        task = UpdateScheduler(request).start()
        ...
        task.cancel()
    """

    def __init__(self, request: AnyRequest[Any]) -> None:
        self._request = request
        self._stream: Optional[MergedStream] = None
        self._in_flight: set[asyncio.Task] = set()
        self.triggers = 0

    def start(self) -> asyncio.Task:
        """Subscribe to the sources now and run the scheduler in the background."""
        self._stream = merge(*self._request.update_sources)
        return spawn(self.run(), name=f"reqtree-updates-{id(self):x}")

    async def run(self) -> None:
        """
        Consume the merged sources until they all end.

        Returns once the sources are exhausted and the calls they triggered
        have been dispatched.
        """
        stream = self._stream or merge(*self._request.update_sources)
        self._stream = None
        try:
            async for _ in stream:
                self.triggers += 1
                logger.debug(f"Update trigger #{self.triggers}")
                task = spawn(self._request.perform(), name=f"reqtree-update-{self.triggers}")
                self._in_flight.add(task)
                task.add_done_callback(self._in_flight.discard)
        finally:
            await stream.aclose()

        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)
