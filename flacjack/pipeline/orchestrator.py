"""Run orchestrator: producer, worker pool and supervisor loop.

Wires the three channels together and owns the supervisor, the single
consumer of progress events:

- Discovery producer thread fills the work queue and closes it when done
- N worker threads convert files and report progress per slot
- The supervisor (calling thread) republishes every progress event on the
  EventBus, counts WorkerFinished signals and returns when none are left

Nothing is cancelled mid-run; the run ends only when the work queue has been
drained and every worker has reported in.
"""

import logging
import queue
import threading

from flacjack.config.models import AppConfig
from flacjack.domain.events import Event, ProcessingFinished, WorkerFinished
from flacjack.infrastructure.event_bus import EventBus
from flacjack.infrastructure.file_scanner import FileScanner
from flacjack.infrastructure.flac import FlacDecoder
from flacjack.infrastructure.lame import LameEncoder
from flacjack.infrastructure.metaflac import MetaflacAdapter
from flacjack.pipeline.channels import WorkQueue
from flacjack.pipeline.conversion import ConversionPipeline
from flacjack.pipeline.discovery import DiscoveryProducer
from flacjack.pipeline.workers import WorkerPool


class Orchestrator:
    """FLAC to MP3 run orchestrator.

    Args:
        config: AppConfig with general, tools and UI settings.
        event_bus: EventBus the supervisor republishes progress on.
        file_scanner: FileScanner for discovering source files.
        tag_reader: Tag extraction stage (metaflac).
        decoder: Decode stage (flac).
        encoder: Encode stage (lame).
    """

    def __init__(
        self,
        config: AppConfig,
        event_bus: EventBus,
        file_scanner: FileScanner,
        tag_reader: MetaflacAdapter,
        decoder: FlacDecoder,
        encoder: LameEncoder,
    ):
        self.config = config
        self.event_bus = event_bus
        self.file_scanner = file_scanner
        self.pipeline = ConversionPipeline(config.general, tag_reader, decoder, encoder)
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: AppConfig, event_bus: EventBus) -> "Orchestrator":
        """Builds an orchestrator driving the configured external tools."""
        tools = config.tools
        return cls(
            config=config,
            event_bus=event_bus,
            file_scanner=FileScanner(config.general.source_extension),
            tag_reader=MetaflacAdapter(tools.metaflac),
            decoder=FlacDecoder(tools.flac),
            encoder=LameEncoder(tools.lame, tools.lame_args),
        )

    def _dispatch(self, event: Event):
        try:
            self.event_bus.publish(event)
        except Exception:
            # Subscriber errors are logged; the supervisor keeps consuming
            self.logger.exception(f"Subscriber failed for {type(event).__name__}")

    def _drain(self, progress_queue: "queue.Queue[Event]"):
        while True:
            try:
                event = progress_queue.get_nowait()
            except queue.Empty:
                return
            self._dispatch(event)

    def run(self):
        general = self.config.general
        worker_count = general.workers
        self.logger.info(
            f"Run started: input={general.input_root}, output={general.output_root}, workers={worker_count}"
        )

        work_queue = WorkQueue(maxsize=general.queue_size)
        progress_queue: "queue.Queue[Event]" = queue.Queue()
        done_queue: "queue.Queue[WorkerFinished]" = queue.Queue()

        producer = DiscoveryProducer(general, self.file_scanner)
        producer_thread = threading.Thread(
            target=producer.run,
            args=(work_queue, progress_queue),
            name="discovery",
            daemon=True,
        )
        pool = WorkerPool(worker_count, work_queue, progress_queue, done_queue, self.pipeline)

        producer_thread.start()
        pool.start()

        live_workers = len(pool)
        while live_workers > 0:
            try:
                event = progress_queue.get(timeout=general.poll_interval_s)
            except queue.Empty:
                event = None
            if event is not None:
                self._dispatch(event)

            while True:
                try:
                    finished = done_queue.get_nowait()
                except queue.Empty:
                    break
                live_workers -= 1
                self.logger.debug(f"Worker {finished.worker_slot} finished, {live_workers} still running")
                self._dispatch(finished)

        # Workers put their last progress event before WorkerFinished, so
        # everything they sent is already queued here.
        producer_thread.join()
        self._drain(progress_queue)
        pool.join()

        self.logger.info("All workers finished, exiting")
        self._dispatch(ProcessingFinished())
