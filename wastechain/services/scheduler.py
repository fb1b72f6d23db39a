"""
Simulation Scheduler

Owns the single repeating timer that drives the IoT simulation.
"""

import logging
import threading

from wastechain.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 30000


class SimulationScheduler:
    """Start, stop and run-once control over a repeating tick.

    ``tick`` is called with no arguments. ``thread_factory`` builds the loop
    thread and defaults to ``threading.Thread``.
    """

    def __init__(self, tick, thread_factory=threading.Thread, name='iot-simulation'):
        self._tick = tick
        self._thread_factory = thread_factory
        self._name = name
        self._lock = threading.Lock()
        self._stop_event = None
        self._thread = None
        self.interval_ms = None

    @property
    def is_running(self):
        with self._lock:
            return self._stop_event is not None and not self._stop_event.is_set()

    def run_once(self):
        return self._tick()

    def start(self, interval_ms=DEFAULT_INTERVAL_MS):
        """Run a tick now, then every ``interval_ms``.

        Any loop already running is cancelled first.
        """
        try:
            interval_ms = int(interval_ms)
        except (TypeError, ValueError):
            raise ValidationError('interval must be a number of milliseconds')
        if interval_ms <= 0:
            raise ValidationError('interval must be positive')

        self._safe_tick()

        with self._lock:
            self._cancel()
            stop_event = threading.Event()
            thread = self._thread_factory(
                target=self._loop,
                args=(stop_event, interval_ms / 1000.0),
                name=self._name,
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
            self.interval_ms = interval_ms
            thread.start()

        logger.info('IoT simulation started (updates every %s seconds)', interval_ms / 1000)

    def stop(self):
        """Cancel the loop; a tick already in progress is allowed to finish.

        Returns True if a loop was running.
        """
        with self._lock:
            was_running = self._cancel()
        if was_running:
            logger.info('IoT simulation stopped')
        return was_running

    def _cancel(self):
        if self._stop_event is None:
            return False
        self._stop_event.set()
        self._stop_event = None
        self._thread = None
        self.interval_ms = None
        return True

    def _loop(self, stop_event, interval_sec):
        while not stop_event.wait(timeout=interval_sec):
            self._safe_tick()

    def _safe_tick(self):
        try:
            return self._tick()
        except Exception:
            logger.exception('IoT simulation tick failed')
            return None
