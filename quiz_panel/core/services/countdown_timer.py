"""Recurring one-second tick sources used by attempt sessions."""

from __future__ import annotations

import logging
from threading import Event, Thread
from typing import Callable, Protocol

from quiz_panel.constants.quiz_constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class CountdownTimer(Protocol):
    """Scheduled task that invokes a callback at a fixed interval until stopped."""

    def start(self, callback: TickCallback) -> None:
        ...

    def stop(self) -> None:
        ...

    def is_active(self) -> bool:
        ...


TimerFactory = Callable[[], CountdownTimer]


class ThreadingCountdownTimer:
    """Tick source backed by a daemon thread, used outside the Qt event loop."""

    def __init__(self, interval_seconds: float = TICK_INTERVAL_SECONDS, name: str = "QuizCountdown") -> None:
        self._interval_seconds = interval_seconds
        self._name = name
        self._stop_event = Event()
        self._thread: Thread | None = None

    def start(self, callback: TickCallback) -> None:
        if self.is_active():
            raise RuntimeError("Countdown timer is already running.")
        self._stop_event = Event()
        self._thread = Thread(
            target=self._run,
            args=(callback, self._stop_event),
            name=self._name,
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        # No join: stop() is called while the session lock is held, possibly from
        # the tick thread itself.
        self._stop_event.set()
        self._thread = None

    def is_active(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def _run(self, callback: TickCallback, stop_event: Event) -> None:
        while not stop_event.wait(self._interval_seconds):
            try:
                callback()
            except Exception:
                logger.exception("Countdown tick failed; stopping timer")
                stop_event.set()
                return
