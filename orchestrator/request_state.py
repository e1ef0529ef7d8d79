"""Per-request generation state and progress timers.

Each request owns one GenerationState. Progress callbacks are keyed to it,
so a timer left over from one request can never report on another.
"""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from loguru import logger


class GenerationStage(str, Enum):
    TRIAGE = "triage"
    GENERATING = "generating"
    RECOVERING = "recovering"
    DONE = "done"


# (delay seconds, message) shown while waiting on the generator
DEFAULT_PROGRESS_MESSAGES = [
    (5.0, "Analyzing project requirements..."),
    (20.0, "Building activity network..."),
    (35.0, "Calculating critical path..."),
]


@dataclass
class GenerationState:
    """Lifecycle of one generation request."""
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    stage: GenerationStage = GenerationStage.TRIAGE
    progress_message: str = "Preparing request..."
    degraded: bool = False
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    _timers: List[threading.Timer] = field(default_factory=list, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def set_stage(self, stage: GenerationStage, message: Optional[str] = None) -> None:
        with self._lock:
            self.stage = stage
            if message:
                self.progress_message = message

    def schedule_progress(self, delay: float, message: str) -> threading.Timer:
        """Show `message` after `delay` seconds if still generating."""
        def fire():
            with self._lock:
                if self.stage != GenerationStage.GENERATING:
                    return
                self.progress_message = message
            logger.debug(f"[{self.request_id}] {message}")

        timer = threading.Timer(delay, fire)
        timer.daemon = True
        with self._lock:
            self._timers.append(timer)
        timer.start()
        return timer

    def start_generating(self, messages=None) -> None:
        """Enter the generating stage and arm the progress timers."""
        self.set_stage(GenerationStage.GENERATING, "Sending request to the generator...")
        for delay, message in (DEFAULT_PROGRESS_MESSAGES if messages is None else messages):
            self.schedule_progress(delay, message)

    def cancel_pending(self) -> None:
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    @property
    def pending_timers(self) -> int:
        with self._lock:
            return sum(1 for t in self._timers if t.is_alive())

    def finish(self, message: str = "Done") -> None:
        """Cancel outstanding timers and mark the request done."""
        self.cancel_pending()
        self.set_stage(GenerationStage.DONE, message)
        self.finished_at = datetime.now()

    @property
    def elapsed_seconds(self) -> float:
        end = self.finished_at or datetime.now()
        return (end - self.started_at).total_seconds()
