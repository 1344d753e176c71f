import threading
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from flacjack.domain.events import ProgressEvent

class UIState:
    """State behind the status display.

    Holds the latest ProgressEvent per worker slot (no history), the errors
    reported so far and the run counters.
    """

    def __init__(self, worker_count: int = 0):
        self._lock = threading.RLock()

        self.worker_count = worker_count
        self.live_workers = worker_count
        self.slots: Dict[int, ProgressEvent] = {}
        self.errors: List[str] = []

        # Counters
        self.completed_count = 0
        self.failed_count = 0

        # Discovery counters
        self.discovery_finished = False
        self.files_found = 0
        self.files_to_process = 0
        self.already_converted_count = 0

        self.start_time = datetime.now()
        self.finished = False
        self.finished_time: Optional[datetime] = None

    def update_slot(self, event: ProgressEvent):
        """Stores ``event`` as the slot's latest status and updates counters.

        An error event counts one failed file. An idle event that follows a
        working, error-free event counts one converted file.
        """
        with self._lock:
            previous = self.slots.get(event.worker_slot)
            if event.is_error:
                self.failed_count += 1
                self.errors.append(f"{event.source} ERROR: {event.error_message}")
            elif event.is_idle and previous is not None and not previous.is_idle and not previous.is_error:
                self.completed_count += 1
            self.slots[event.worker_slot] = event
            if event.worker_slot >= self.worker_count:
                self.worker_count = event.worker_slot + 1

    def add_errors(self, messages: List[str]):
        with self._lock:
            self.errors.extend(messages)

    def worker_finished(self):
        with self._lock:
            self.live_workers = max(0, self.live_workers - 1)

    def snapshot(self) -> List[Tuple[int, Optional[ProgressEvent]]]:
        """Latest event per slot in slot order; None for slots not heard from yet."""
        with self._lock:
            return [(slot, self.slots.get(slot)) for slot in range(self.worker_count)]

    @property
    def elapsed_seconds(self) -> float:
        with self._lock:
            end = self.finished_time or datetime.now()
            return (end - self.start_time).total_seconds()
