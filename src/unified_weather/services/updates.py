"""Polling stream of current weather."""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from ..core.errors import WeatherError
from ..models.weather import CurrentWeather

_DONE = object()


class WeatherUpdates:
    """Cancellable async iterator that polls current weather on an interval.

    The first fetch happens as soon as iteration starts, then once every
    ``interval`` seconds. Successful results are emitted in order; a poll that
    fails for any reason is logged and skipped. After ``cancel()`` no
    further fetch starts and nothing more is emitted.

    Example:
        >>> async def example(client, location):
        ...     async with client.weather_updates(location, interval_seconds=600) as updates:
        ...         async for weather in updates:
        ...             print(weather.temperature.formatted())
    """

    def __init__(self, fetch: Callable[[], Awaitable[CurrentWeather]], interval: float):
        self._fetch = fetch
        self._interval = interval
        self._queue: asyncio.Queue = asyncio.Queue()
        self._cancelled = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _start(self) -> None:
        if self._task is None and not self._cancelled.is_set():
            self._task = asyncio.get_running_loop().create_task(self._poll())

    async def _poll(self) -> None:
        try:
            while not self._cancelled.is_set():
                try:
                    weather = await self._fetch()
                except WeatherError as e:
                    logger.warning("Weather update failed, skipping", error=str(e))
                except Exception:
                    logger.exception("Unexpected error during weather update, skipping")
                else:
                    if not self._cancelled.is_set():
                        self._queue.put_nowait(weather)

                try:
                    await asyncio.wait_for(self._cancelled.wait(), timeout=self._interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            self._queue.put_nowait(_DONE)

    def cancel(self) -> None:
        """Stop polling; pending and future iteration ends without new items."""
        self._cancelled.set()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def aclose(self) -> None:
        self.cancel()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def __aiter__(self) -> "WeatherUpdates":
        return self

    async def __anext__(self) -> CurrentWeather:
        self._start()
        if self._cancelled.is_set():
            raise StopAsyncIteration
        if self._task is not None and self._task.done() and self._queue.empty():
            raise StopAsyncIteration

        item = await self._queue.get()
        if item is _DONE or self._cancelled.is_set():
            raise StopAsyncIteration
        return item

    async def __aenter__(self) -> "WeatherUpdates":
        self._start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
