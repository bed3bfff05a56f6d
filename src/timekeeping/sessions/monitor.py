from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional

from ..records.model import TimeRecord
from .service import SessionEngine

logger = logging.getLogger(__name__)


class CutoffMonitor:
    """Polls the engine and force-stops sessions that ran past the cutoff hour."""

    def __init__(self, engine: SessionEngine, *, interval_seconds: Optional[float] = None) -> None:
        self._engine = engine
        self._interval = float(interval_seconds or engine.policy.cutoff_check_seconds)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self, *, now: Optional[datetime] = None) -> list[TimeRecord]:
        finalized = self._engine.check_all_cutoffs(now=now)
        if finalized:
            logger.info("Automatic cutoff stopped %d session(s).", len(finalized))
        return finalized

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name="cutoff-monitor", daemon=True)
        self._thread.start()
        logger.info("Cutoff monitor started (every %.0fs).", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run_loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.run_once()
            except Exception:  # keep polling; the next tick retries
                logger.exception("Cutoff check failed.")
