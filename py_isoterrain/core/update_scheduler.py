"""
Throttled, batched redraw scheduling for terrain tiles.

Edited cells are collected into a pending set and redrawn in bounded
batches so a fast drag never stalls the frame loop. The scheduler never
blocks: it suspends only through deferred callbacks supplied by a
FrameScheduler (a throttle timer and a next-frame continuation).

State machine:
    IDLE -> SCHEDULED (throttle timer pending) -> DRAINING -> IDLE
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

import structlog

from ..config.terrain_settings import DEFAULT_TERRAIN_SETTINGS, TerrainSettings
from .grid import GridCell

logger = structlog.get_logger()

RedrawCallback = Callable[[int, int], None]


class Cancellable(Protocol):
    def cancel(self) -> Any:
        ...


class FrameScheduler(Protocol):
    """Deferred-callback services of the host platform."""

    def now_ms(self) -> float:
        """Monotonic clock in milliseconds."""
        ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Cancellable:
        """Run callback once after delay_ms."""
        ...

    def request_frame(self, callback: Callable[[], None]) -> Cancellable:
        """Run callback on the next animation frame."""
        ...


class AsyncioFrameScheduler:
    """FrameScheduler backed by an asyncio event loop.

    A "frame" is a fixed interval timer, 16 ms by default (about 60 fps).
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        frame_interval_ms: float = DEFAULT_TERRAIN_SETTINGS.frame_interval_ms,
    ):
        self._loop = loop
        self.frame_interval_ms = frame_interval_ms

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)

    def request_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.call_later(self.frame_interval_ms, callback)


class SchedulerState(Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    DRAINING = "draining"


class UpdateScheduler:
    """Collects touched cells and drives throttled, batched redraws."""

    def __init__(
        self,
        redraw: RedrawCallback,
        frame_scheduler: FrameScheduler,
        batch_size: Optional[int] = None,
        throttle_ms: Optional[float] = None,
        settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS,
    ):
        """
        Initialize the scheduler.

        Args:
            redraw: Per-cell redraw callback invoked with (x, y) at drain time
            frame_scheduler: Source of timers and next-frame callbacks
            batch_size: Maximum cells redrawn per drain step
            throttle_ms: Minimum time between the start of two drains
            settings: Terrain settings supplying the defaults
        """
        self.redraw = redraw
        self.frame_scheduler = frame_scheduler
        self.batch_size = batch_size if batch_size is not None else settings.batch_update_size
        self.throttle_ms = throttle_ms if throttle_ms is not None else settings.update_throttle_ms

        # Insertion-ordered set of pending cells
        self._pending: Dict[Tuple[int, int], None] = {}
        self._draining = False
        self._throttle_timer: Optional[Cancellable] = None
        self._frame_handle: Optional[Cancellable] = None
        self._last_drain_ms = float("-inf")

    @property
    def state(self) -> SchedulerState:
        if self._draining:
            return SchedulerState.DRAINING
        if self._throttle_timer is not None:
            return SchedulerState.SCHEDULED
        return SchedulerState.IDLE

    @property
    def pending(self) -> List[GridCell]:
        return [GridCell(x, y) for x, y in self._pending]

    def __len__(self) -> int:
        return len(self._pending)

    def enqueue(self, cells: Iterable[Tuple[int, int]]) -> None:
        """Merge cells into the pending set and attempt a drain."""
        for x, y in cells:
            self._pending[(int(x), int(y))] = None
        self.drain()

    def drain(self) -> None:
        """
        Redraw up to batch_size pending cells.

        Returns immediately while a drain is in progress. A call that comes
        too soon after the previous drain arms a single retry timer instead
        of being dropped. Leftover cells continue on the next frame.
        """
        if self._draining or not self._pending:
            return

        now = self.frame_scheduler.now_ms()
        elapsed = now - self._last_drain_ms
        if elapsed < self.throttle_ms:
            if self._throttle_timer is None:
                self._throttle_timer = self.frame_scheduler.call_later(
                    self.throttle_ms - elapsed, self._on_throttle_timer
                )
            return

        self._draining = True
        self._last_drain_ms = now
        processed = self._redraw_cells(list(self._pending)[: self.batch_size], stage="drain")

        logger.debug(
            "Terrain display update processed",
            processed=processed,
            remaining=len(self._pending),
        )

        if self._pending:
            # Stay in DRAINING until the continuation runs
            self._frame_handle = self.frame_scheduler.request_frame(self._on_frame)
        else:
            self._draining = False

    def flush_now(self) -> int:
        """
        Synchronously redraw every pending cell, ignoring batch and throttle.

        Cancels a pending throttle timer. If a drain is in progress this is a
        no-op and the running drain finishes the work.

        Returns:
            Number of cells redrawn
        """
        if self._throttle_timer is not None:
            self._throttle_timer.cancel()
            self._throttle_timer = None
        if self._draining:
            return 0

        self._draining = True
        try:
            processed = self._redraw_cells(list(self._pending), stage="flush")
        finally:
            self._draining = False
            self._last_drain_ms = self.frame_scheduler.now_ms()

        logger.debug("Terrain display flush complete", processed=processed, remaining=len(self._pending))
        return processed

    def _redraw_cells(self, cells: List[Tuple[int, int]], stage: str) -> int:
        """
        Redraw cells, removing each from the pending set first.

        A cell whose redraw raises is logged and dropped so the remaining
        cells still draw.

        Returns:
            Number of cells redrawn successfully
        """
        processed = 0
        for cell in cells:
            if cell not in self._pending:
                continue
            del self._pending[cell]
            try:
                self.redraw(*cell)
            except Exception:
                logger.error(
                    "Terrain redraw failed, cell dropped",
                    stage=stage,
                    cell={"x": cell[0], "y": cell[1]},
                    exc_info=True,
                )
                continue
            processed += 1
        return processed

    def discard(self, predicate: Callable[[int, int], bool]) -> int:
        """Drop pending cells matching predicate; returns how many were dropped."""
        doomed = [cell for cell in self._pending if predicate(*cell)]
        for cell in doomed:
            del self._pending[cell]
        return len(doomed)

    def clear(self) -> None:
        """Forget all pending cells and cancel outstanding callbacks."""
        for handle in (self._throttle_timer, self._frame_handle):
            if handle is not None:
                handle.cancel()
        self._throttle_timer = None
        self._frame_handle = None
        self._pending.clear()
        self._draining = False

    def _on_throttle_timer(self) -> None:
        self._throttle_timer = None
        self.drain()

    def _on_frame(self) -> None:
        self._frame_handle = None
        self._draining = False
        self.drain()

