import threading
import time
from typing import Callable, Optional


TickCallback = Callable[[int, int], None]
ExpireCallback = Callable[[int], None]


class TurnTimer:
    """Cancellable per-turn countdown.

    Every ``start`` hands out a new generation number and supersedes the
    previous countdown; a worker whose generation is no longer current
    exits on its next wake-up without calling back. Callbacks receive the
    generation so the owner can drop stale ones under its own lock.

    ``start_task`` and ``sleep`` are normally ``socketio.start_background_task``
    and ``socketio.sleep`` so the countdown cooperates with whatever async
    mode the server runs in.
    """

    def __init__(self, start_task: Callable, sleep: Callable[[float], None] = time.sleep,
                 tick_interval: float = 1.0):
        self._start_task = start_task
        self._sleep = sleep
        self.tick_interval = tick_interval
        self._lock = threading.Lock()
        self._generation = 0
        self._active: Optional[int] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._active is not None

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._active is not None and self._active == generation

    def start(self, duration: int, on_tick: TickCallback, on_expire: ExpireCallback) -> int:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._active = generation
        self._start_task(self._worker, generation, int(duration), on_tick, on_expire)
        return generation

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self._active = None

    def _worker(self, generation: int, duration: int, on_tick: TickCallback, on_expire: ExpireCallback):
        remaining = duration
        while remaining > 0:
            self._sleep(self.tick_interval)
            if not self.is_current(generation):
                return
            remaining -= 1
            on_tick(generation, remaining)
        if self.is_current(generation):
            on_expire(generation)
