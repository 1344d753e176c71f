import logging
import queue
import threading
from typing import List, Optional

from flacjack.domain.events import Event, ProgressEvent, WorkerFinished
from flacjack.pipeline.channels import WorkQueue
from flacjack.pipeline.conversion import ConversionPipeline


class Worker:
    """One conversion slot: takes files off the work queue until it is exhausted.

    Publishes an idle event at start and after every file, so the display has
    a line for the slot before it ever gets work. WorkerFinished is sent on
    every way out of the loop.
    """

    def __init__(
        self,
        slot: int,
        work_queue: WorkQueue,
        progress_queue: "queue.Queue[Event]",
        done_queue: "queue.Queue[WorkerFinished]",
        pipeline: ConversionPipeline,
    ):
        self.slot = slot
        self.work_queue = work_queue
        self.progress_queue = progress_queue
        self.done_queue = done_queue
        self.pipeline = pipeline
        self.processed = 0
        self.logger = logging.getLogger(__name__)

    def _publish_idle(self):
        self.progress_queue.put(ProgressEvent(worker_slot=self.slot))

    def run(self):
        try:
            self._publish_idle()
            while True:
                source = self.work_queue.get()
                if source is None:
                    break
                self.pipeline.convert(self.slot, source, self.progress_queue.put)
                self.processed += 1
                self._publish_idle()
        finally:
            self.logger.debug(f"WORKER_DONE: slot {self.slot} processed={self.processed}")
            self.done_queue.put(WorkerFinished(worker_slot=self.slot))


class WorkerPool:
    """Starts N Worker threads sharing one work queue."""

    def __init__(
        self,
        size: int,
        work_queue: WorkQueue,
        progress_queue: "queue.Queue[Event]",
        done_queue: "queue.Queue[WorkerFinished]",
        pipeline: ConversionPipeline,
    ):
        self.workers: List[Worker] = [
            Worker(slot, work_queue, progress_queue, done_queue, pipeline)
            for slot in range(size)
        ]
        self._threads: List[threading.Thread] = []

    def __len__(self) -> int:
        return len(self.workers)

    def start(self):
        for worker in self.workers:
            thread = threading.Thread(target=worker.run, name=f"worker-{worker.slot}", daemon=True)
            self._threads.append(thread)
            thread.start()

    def join(self, timeout: Optional[float] = None):
        for thread in self._threads:
            thread.join(timeout)
