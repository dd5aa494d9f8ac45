# ABOUTME: Refresh scheduler running fetch -> build -> publish on a fixed interval.
# ABOUTME: Startup failure is fatal; later failures are logged and the cycle skipped.

import asyncio
import contextlib
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from esqimo.errors import FetchError, StartupError
from esqimo.models import RawFeed, Snapshot
from esqimo.store.builder import build_snapshot

log = structlog.get_logger()

FetchFn = Callable[[], Sequence[RawFeed]]
PublishFn = Callable[[Snapshot], None]


class RefreshScheduler:
    """Drives the only writer path of the snapshot store.

    The fetch callable may block on network I/O; it runs on a dedicated
    single worker thread so the event loop keeps serving readers. A cycle
    that times out leaves its worker running; later cycles are skipped until
    it finishes.
    """

    def __init__(
        self,
        fetch: FetchFn,
        publish: PublishFn,
        interval_seconds: float = 600.0,
        timeout_seconds: float | None = None,
    ) -> None:
        self._fetch = fetch
        self._publish = publish
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="esqimo-refresh")
        self._inflight: Future[Snapshot] | None = None
        self.cycles = 0
        self.failures = 0

    def _fetch_and_build(self) -> Snapshot:
        return build_snapshot(self._fetch())

    async def run_cycle(self) -> Snapshot:
        """Fetch, build and publish one snapshot.

        Raises:
            FetchError: The fetch failed, the cycle exceeded the timeout, or a
                timed-out cycle is still running. Nothing is published then.
        """
        if self._inflight is not None and not self._inflight.done():
            raise FetchError("*", "previous refresh still running")

        started = time.monotonic()
        self._inflight = self._executor.submit(self._fetch_and_build)
        try:
            snapshot = await asyncio.wait_for(
                asyncio.wrap_future(self._inflight), timeout=self._timeout
            )
        except TimeoutError as e:
            raise FetchError("*", f"refresh timed out after {self._timeout}s") from e

        self._publish(snapshot)
        self.cycles += 1
        log.info(
            "refresh_cycle_complete",
            cycle=self.cycles,
            feeds=len(snapshot.feeds),
            items=snapshot.item_count,
            duration=round(time.monotonic() - started, 3),
        )
        return snapshot

    async def startup(self) -> Snapshot:
        """Run the first cycle. There is no previous snapshot to fall back on.

        Raises:
            StartupError: The first cycle failed.
        """
        try:
            return await self.run_cycle()
        except Exception as e:
            self.failures += 1
            log.error("refresh_startup_failed", error=str(e))
            raise StartupError(f"initial refresh failed: {e}") from e

    async def _wait_interval(self, stop: asyncio.Event) -> bool:
        """Sleep for one interval. Returns True if stop was requested."""
        if stop.is_set():
            return True
        try:
            await asyncio.wait_for(stop.wait(), timeout=self._interval)
        except TimeoutError:
            return False
        return True

    async def run(self, stop: asyncio.Event | None = None, max_cycles: int | None = None) -> None:
        """Refresh every interval until stop is set.

        Call after startup(). The interval runs from the end of one cycle to
        the start of the next, so slow cycles delay later ones instead of
        queueing them.

        Args:
            stop: Event that ends the loop; runs forever when omitted.
            max_cycles: Return after this many attempted cycles.
        """
        stop = stop or asyncio.Event()
        attempted = 0
        while max_cycles is None or attempted < max_cycles:
            if await self._wait_interval(stop):
                break
            attempted += 1
            try:
                await self.run_cycle()
            except Exception:
                # Keep serving the previous snapshot
                self.failures += 1
                log.exception("refresh_cycle_failed", failures=self.failures)

    def start(self) -> asyncio.Task[None]:
        """Start the refresh loop as a background task."""
        if self._task is not None:
            raise RuntimeError("refresh scheduler already started")
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run(self._stop_event))
        return self._task

    async def stop(self) -> None:
        """Stop the background refresh loop."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    def close(self, wait: bool = True) -> None:
        """Shut down the worker thread.

        With wait=False a cycle still blocked on I/O is abandoned instead of
        joined.
        """
        self._executor.shutdown(wait=wait, cancel_futures=True)
