# gaze_stream/scheduling.py
"""Deferred execution of work that must stay off the ingestion path.

Scheduled tasks are best effort: ``ingest`` never waits for them, they may
be cancelled by a reset, and a failing task is logged and dropped.
"""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List


logger = logging.getLogger(__name__)

Task = Callable[[], None]


def _run_task(task: Task) -> None:
    try:
        task()
    except Exception:
        logger.exception("Deferred task %r failed", task)


class DeferredScheduler(ABC):
    """Runs callables after a short delay."""

    @abstractmethod
    def schedule(self, delay_ms: float, task: Task) -> None:
        raise NotImplementedError

    @abstractmethod
    def cancel_all(self) -> None:
        """Drop every task that has not started yet."""
        raise NotImplementedError

    def shutdown(self) -> None:
        self.cancel_all()


class ThreadedTimerScheduler(DeferredScheduler):
    """One daemon ``threading.Timer`` per task."""

    def __init__(self) -> None:
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def schedule(self, delay_ms: float, task: Task) -> None:
        timer = threading.Timer(max(0.0, delay_ms) / 1000.0, _run_task, args=(task,))
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()

    def cancel_all(self) -> None:
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    def shutdown(self) -> None:
        """Cancel waiting timers and wait for the ones already running."""
        with self._lock:
            timers, self._timers = self._timers, []
        current = threading.current_thread()
        for timer in timers:
            timer.cancel()
            if timer is not current and timer.is_alive():
                timer.join()

    @property
    def active(self) -> int:
        with self._lock:
            return sum(1 for t in self._timers if t.is_alive())


class ManualScheduler(DeferredScheduler):
    """Queues tasks until :meth:`run_pending` is called.

    Used for deterministic tests and offline replay, where wall-clock delays
    carry no meaning.
    """

    def __init__(self) -> None:
        self._queue: List[Task] = []

    def schedule(self, delay_ms: float, task: Task) -> None:
        self._queue.append(task)

    def cancel_all(self) -> None:
        self._queue.clear()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """Run the queued tasks; tasks they schedule wait for the next call."""
        tasks, self._queue = self._queue, []
        for task in tasks:
            _run_task(task)
        return len(tasks)
