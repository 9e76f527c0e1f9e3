"""Background processor that polls a collector periodically."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from nvgpu_collector._errors import NVGPUError
from nvgpu_collector._registry import Collector
from nvgpu_collector._types import Observation

logger = logging.getLogger("nvgpu_collector.processor")

ObservationHandler = Callable[[list[Observation]], None]


def _noop_handler(observations: list[Observation]) -> None:
    """Default handler that discards observations."""


class PollingProcessor:
    """Daemon thread that runs one poll per interval and hands off the batch.

    A failed poll hands off nothing for that cycle.
    """

    def __init__(
        self,
        collector: Collector,
        *,
        interval_ms: int = 15000,
        handler: ObservationHandler = _noop_handler,
    ) -> None:
        self._collector = collector
        self._interval_s = interval_ms / 1000.0
        self._handler = handler
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the background poll loop."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal stop and wait for the current poll to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(timeout=self._interval_s):
            self.poll_once()

    def poll_once(self) -> bool:
        """Run one poll and hand off the batch. Returns whether the poll succeeded."""
        try:
            batch = self._collector.update()
        except NVGPUError as exc:
            logger.warning("poll failed: %s", exc)
            return False
        except Exception:  # noqa: BLE001
            logger.error("poll failed unexpectedly", exc_info=True)
            return False
        try:
            self._handler(batch)
        except Exception:  # noqa: BLE001
            logger.debug("handler failed for %d observations", len(batch), exc_info=True)
        return True

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
