# gaze_stream/io/observers.py
"""
Observer pattern for line-advance and reading-speed notifications.

Decouples the detector from its consumers (visual cues, scoring, HUD,
replay recording). A channel delivers to zero or more observers; a failing
observer is logged and does not affect the others or the stream.

Example:
    >>> processor = GazeStreamProcessor()
    >>> recorder = EventRecorder()
    >>> processor.register_observer(recorder)
    >>> processor.register_observer(lambda event: print(event.line))
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Union

from ..domain.events import LineAdvanceEvent, SpeedLogEntry


logger = logging.getLogger(__name__)


class LineAdvanceObserver(ABC):
    """
    Abstract base class for stream observers.
    """

    @abstractmethod
    def on_line_advance(self, event: LineAdvanceEvent) -> None:
        """
        Called synchronously when the detector fires.

        Args:
            event: The fired line-advance event
        """
        pass

    def on_speed_update(self, entry: SpeedLogEntry) -> None:
        """
        Called from the deferred speed update when an event was accepted.

        Args:
            entry: New speed log entry (carries the updated WPM)
        """
        pass


class CallbackObserver(LineAdvanceObserver):
    """Adapts a plain ``callback(event)`` to the observer interface."""

    def __init__(self, callback: Callable[[LineAdvanceEvent], None]):
        self.callback = callback

    def on_line_advance(self, event: LineAdvanceEvent) -> None:
        self.callback(event)


class EventRecorder(LineAdvanceObserver):
    """Keeps every notification in memory (replay, tests)."""

    def __init__(self):
        self.events: List[LineAdvanceEvent] = []
        self.speed_updates: List[SpeedLogEntry] = []

    def on_line_advance(self, event: LineAdvanceEvent) -> None:
        self.events.append(event)

    def on_speed_update(self, entry: SpeedLogEntry) -> None:
        self.speed_updates.append(entry)


class ConsoleReporter(LineAdvanceObserver):
    """
    Prints events and speed updates to the console.

    Example:
        >>> reporter = ConsoleReporter(verbose=True)
        >>> processor.register_observer(reporter)
    """

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def on_line_advance(self, event: LineAdvanceEvent) -> None:
        if self.verbose:
            print(
                f"[Line] t={event.time} ms  line={event.line}  "
                f"trigger={event.trigger_kind.value}  v={event.velocity:.3f}"
            )

    def on_speed_update(self, entry: SpeedLogEntry) -> None:
        if self.verbose:
            print(f"[Speed] line={entry.line}  {entry.words} words / {entry.duration_ms:.0f} ms  -> {entry.wpm} wpm")


ObserverLike = Union[LineAdvanceObserver, Callable[[LineAdvanceEvent], None]]


class EventChannel:
    """Fan-out of detector output to registered observers."""

    def __init__(self):
        self._observers: List[LineAdvanceObserver] = []

    def __len__(self) -> int:
        return len(self._observers)

    def register(self, observer: ObserverLike) -> LineAdvanceObserver:
        """
        Register an observer or a plain callable.

        Returns:
            The registered observer (the wrapper for callables)
        """
        existing = self._find(observer)
        if existing is not None:
            return existing
        if not isinstance(observer, LineAdvanceObserver):
            if not callable(observer):
                raise TypeError(f"Observer must be a LineAdvanceObserver or callable, got {type(observer).__name__}")
            observer = CallbackObserver(observer)
        self._observers.append(observer)
        return observer

    def unregister(self, observer: ObserverLike) -> None:
        existing = self._find(observer)
        if existing is not None:
            self._observers.remove(existing)

    def _find(self, observer: ObserverLike):
        for registered in self._observers:
            if registered is observer:
                return registered
            if isinstance(registered, CallbackObserver) and registered.callback == observer:
                return registered
        return None

    def publish_line_advance(self, event: LineAdvanceEvent) -> None:
        for observer in list(self._observers):
            try:
                observer.on_line_advance(event)
            except Exception as e:
                logger.warning("Observer %s failed on line advance: %s", type(observer).__name__, e)

    def publish_speed_update(self, entry: SpeedLogEntry) -> None:
        for observer in list(self._observers):
            try:
                observer.on_speed_update(entry)
            except Exception as e:
                logger.warning("Observer %s failed on speed update: %s", type(observer).__name__, e)
