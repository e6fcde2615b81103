"""Polling refresh loop for the ``watch`` command.

No external scheduler library is required; it uses stdlib ``time`` and
``signal`` only.

Typical usage via the CLI::

    supply-dashboard watch --interval 60

Or import directly::

    from supply_dashboard.scheduler import RefreshLoop
    loop = RefreshLoop(refresh=print_insights, interval_seconds=60)
    loop.start()  # blocks until Ctrl-C

A failed refresh is logged but does not stop the loop; the next tick tries
again. Store outages therefore show up as repeated ERROR lines rather than
a dead watcher.
"""

from __future__ import annotations

import logging
import platform
import signal
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

log = logging.getLogger(__name__)


class RefreshLoop:
    """Calls ``refresh()`` every ``interval_seconds`` until stopped.

    Parameters
    ----------
    refresh:
        Zero-argument callable performing one refresh.
    interval_seconds:
        Seconds to wait after one refresh finishes before the next starts.
    max_runs:
        Stop after this many refreshes; ``None`` runs until a signal.
    sleep:
        Sleep function, injectable so tests do not actually wait.
    """

    def __init__(
        self,
        refresh: Callable[[], None],
        interval_seconds: float = 60,
        max_runs: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}.")
        self.refresh = refresh
        self.interval_seconds = interval_seconds
        self.max_runs = max_runs
        self.sleep = sleep
        self.runs = 0
        self.failures = 0
        self._running = False

    def run_once(self) -> bool:
        """Run one refresh.  Returns ``True`` on success."""
        self.runs += 1
        try:
            self.refresh()
            return True
        except Exception as exc:
            self.failures += 1
            log.error("Refresh #%d failed: %s", self.runs, exc, exc_info=True)
            return False

    def stop(self) -> None:
        """Ask the loop to exit after the current tick."""
        self._running = False

    def start(self) -> None:
        """Start the loop.  Blocks until Ctrl-C, SIGTERM or ``max_runs``."""
        self._running = True

        def _shutdown(signum, frame):  # noqa: ANN001
            log.info("Signal %d received — stopping refresh loop.", signum)
            self._running = False

        previous_int = signal.signal(signal.SIGINT, _shutdown)
        previous_term = None
        if platform.system() != "Windows":
            previous_term = signal.signal(signal.SIGTERM, _shutdown)

        log.info("Refresh loop started.  interval=%ss", self.interval_seconds)
        try:
            while self._running:
                self.run_once()

                if self.max_runs is not None and self.runs >= self.max_runs:
                    break

                next_run = datetime.now() + timedelta(seconds=self.interval_seconds)
                log.debug("Next refresh: %s", next_run.isoformat(timespec="seconds"))
                waited = 0.0
                while self._running and waited < self.interval_seconds:
                    step = min(1.0, self.interval_seconds - waited)
                    self.sleep(step)
                    waited += step
        finally:
            signal.signal(signal.SIGINT, previous_int)
            if previous_term is not None:
                signal.signal(signal.SIGTERM, previous_term)

        log.info(
            "Refresh loop stopped after %d run(s), %d failure(s).",
            self.runs, self.failures,
        )
