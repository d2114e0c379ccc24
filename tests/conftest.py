"""
Shared test doubles for the terrain engine.
"""

import pytest

from py_isoterrain.config.terrain_settings import TerrainSettings


class FakeHandle:
    def __init__(self, scheduler, due_ms, callback):
        self.scheduler = scheduler
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True
        return True


class FakeFrameScheduler:
    """Manual clock: timers and frames run only when the test advances time."""

    def __init__(self, frame_interval_ms=16.0):
        self.now = 0.0
        self.frame_interval_ms = frame_interval_ms
        self.handles = []

    def now_ms(self):
        return self.now

    def call_later(self, delay_ms, callback):
        handle = FakeHandle(self, self.now + max(0.0, delay_ms), callback)
        self.handles.append(handle)
        return handle

    def request_frame(self, callback):
        return self.call_later(self.frame_interval_ms, callback)

    @property
    def scheduled(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ms):
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + ms
        while True:
            due = [h for h in self.scheduled if h.due_ms <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due_ms)
            self.handles.remove(handle)
            self.now = max(self.now, handle.due_ms)
            handle.callback()
        self.now = target

    def run_all(self, limit=1000):
        """Fire callbacks until nothing is scheduled."""
        for _ in range(limit):
            if not self.scheduled:
                return
            self.advance(min(h.due_ms for h in self.scheduled) - self.now)
        raise AssertionError("Scheduler did not settle")


class RecordingRenderer:
    """Collects every TileUpdate it is asked to draw."""

    def __init__(self):
        self.updates = []

    def redraw_cell(self, update):
        self.updates.append(update)

    @property
    def cells(self):
        return [(u.x, u.y) for u in self.updates]

    def clear(self):
        self.updates.clear()


@pytest.fixture
def frame_scheduler():
    return FakeFrameScheduler()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def settings():
    return TerrainSettings()
