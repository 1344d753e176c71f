import logging
import queue
from pathlib import Path

from flacjack.config.models import GeneralConfig
from flacjack.domain.events import DiscoveryFinished, Event
from flacjack.domain.paths import destination_for
from flacjack.infrastructure.file_scanner import FileScanner
from flacjack.pipeline.channels import WorkQueue


class DiscoveryProducer:
    """Feeds the work queue with source files that have no output yet.

    A file counts as converted when its destination exists; contents and
    modification times are not compared.
    """

    def __init__(self, config: GeneralConfig, file_scanner: FileScanner):
        self.config = config
        self.file_scanner = file_scanner
        self.logger = logging.getLogger(__name__)

    def run(self, work_queue: WorkQueue, progress_queue: "queue.Queue[Event]") -> DiscoveryFinished:
        """Walks the input root, then closes ``work_queue`` exactly once.

        The summary is returned and also put on ``progress_queue`` for the
        display.
        """
        files_found = 0
        to_process = 0
        already_converted = 0
        try:
            for source in self.file_scanner.scan(self.config.input_root):
                files_found += 1
                destination = destination_for(source, self.config)
                if destination.exists():
                    already_converted += 1
                    self.logger.debug(f"SKIP_EXISTING: {source} (found {destination})")
                    continue
                work_queue.put(source)
                to_process += 1
        except Exception:
            self.logger.exception(f"Discovery aborted in {self.config.input_root}")
            raise
        finally:
            work_queue.close()
            summary = DiscoveryFinished(
                files_found=files_found,
                files_to_process=to_process,
                already_converted=already_converted,
                errors=list(self.file_scanner.errors),
            )
            progress_queue.put(summary)
            self.logger.info(
                f"Discovery finished: found={files_found}, queued={to_process}, "
                f"already_converted={already_converted}, errors={len(summary.errors)}"
            )
        return summary
