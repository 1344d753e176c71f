"""Message channels between the producer, the workers and the supervisor.

The work queue is the only channel with a shutdown protocol: the producer
closes it once, and from then on every consumer drains what is left and then
sees ``None``. Progress and completion channels are plain ``queue.Queue``s.
"""

import queue
import threading
from pathlib import Path
from typing import Optional

# Marker travelling through the queue after close(); consumers put it back so
# every other consumer sees it as well.
_CLOSED = object()


class QueueClosedError(RuntimeError):
    """Raised when putting into a work queue that was already closed."""

    pass


class WorkQueue:
    """Bounded FIFO of source paths with explicit close."""

    def __init__(self, maxsize: int = 100):
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: Path):
        """Blocks while the queue is full."""
        if self._closed:
            raise QueueClosedError("put() on a closed work queue")
        self._queue.put(item)

    def close(self):
        """Marks the end of work. Only the first call has an effect."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_CLOSED)

    def get(self) -> Optional[Path]:
        """Returns the next item, or None once the queue is closed and drained."""
        item = self._queue.get()
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item

