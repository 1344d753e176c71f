"""Per-file conversion state machine.

EXTRACTING_TAGS -> DECODING_SOURCE -> ENCODING_TARGET -> DONE, with ERROR
reachable from every working stage. A ProgressEvent is published before each
working stage and exactly one more when the file fails; nothing is published
on DONE (the worker follows up with its idle event).
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from flacjack.config.models import GeneralConfig
from flacjack.domain.errors import ConversionError, TagValidationError
from flacjack.domain.events import ProgressEvent
from flacjack.domain.models import REQUIRED_TAGS, ConversionJob, ConversionStage, Tags
from flacjack.domain.paths import destination_for
from flacjack.infrastructure.flac import FlacDecoder
from flacjack.infrastructure.lame import LameEncoder
from flacjack.infrastructure.metaflac import MetaflacAdapter

Publish = Callable[[ProgressEvent], None]


@contextmanager
def temporary_artifact(directory: Optional[Path] = None, suffix: str = ".wav") -> Iterator[Path]:
    """Yields the path of a fresh temporary file and deletes it on exit."""
    fd, name = tempfile.mkstemp(prefix="flacjack-", suffix=suffix, dir=directory)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logging.getLogger(__name__).warning(f"Failed to remove temporary file {path}: {e}")


class ConversionPipeline:
    """Runs the three conversion stages for one source file at a time.

    The pipeline holds no per-file state, so one instance can be shared by
    all workers.

    Args:
        config: General settings (roots, extensions, temp dir).
        tag_reader: Stage that returns the source file's Tags.
        decoder: Stage that decodes the source into an intermediate WAV.
        encoder: Stage that encodes the intermediate file into the destination.
    """

    def __init__(
        self,
        config: GeneralConfig,
        tag_reader: MetaflacAdapter,
        decoder: FlacDecoder,
        encoder: LameEncoder,
    ):
        self.config = config
        self.tag_reader = tag_reader
        self.decoder = decoder
        self.encoder = encoder
        self.logger = logging.getLogger(__name__)

    def _enter(self, job: ConversionJob, stage: ConversionStage, slot: int, publish: Publish):
        job.stage = stage
        publish(ProgressEvent(
            worker_slot=slot,
            source=job.source,
            destination=job.destination,
            stage=stage.label,
        ))

    def _fail(self, job: ConversionJob, failed_stage: ConversionStage, message: str, slot: int, publish: Publish):
        job.stage = ConversionStage.ERROR
        job.error_message = message
        self.logger.error(f"CONVERT_FAILED: {job.source} [{failed_stage.label}] {message}")
        publish(ProgressEvent(
            worker_slot=slot,
            source=job.source,
            destination=job.destination,
            stage=failed_stage.label,
            error_message=message,
        ))

    def _encode(self, job: ConversionJob, intermediate: Path, tags: Tags):
        missing = tags.missing(REQUIRED_TAGS)
        if missing:
            raise TagValidationError(missing, job.source)
        job.destination.parent.mkdir(parents=True, exist_ok=True)
        self.encoder.encode(intermediate, job.destination, tags)

    def convert(self, slot: int, source: Path, publish: Publish) -> ConversionJob:
        """Converts one file, reporting stage changes through ``publish``.

        Never raises for item-scoped failures: the returned job ends in DONE or
        ERROR and, for ERROR, one error event has been published.
        """
        job = ConversionJob(source=source, destination=destination_for(source, self.config))
        self.logger.info(f"CONVERT_START: {source} -> {job.destination} (slot {slot})")
        try:
            self._enter(job, ConversionStage.EXTRACTING_TAGS, slot, publish)
            tags = self.tag_reader.read_tags(source)

            self._enter(job, ConversionStage.DECODING_SOURCE, slot, publish)
            with temporary_artifact(self.config.temp_dir) as intermediate:
                self.decoder.decode(source, intermediate)

                self._enter(job, ConversionStage.ENCODING_TARGET, slot, publish)
                self._encode(job, intermediate, tags)
        except ConversionError as e:
            self._fail(job, job.stage, str(e), slot, publish)
            return job
        except OSError as e:
            # mkstemp/mkdir failures belong to the stage that was running
            self._fail(job, job.stage, f"{type(e).__name__}: {e}", slot, publish)
            return job
        except Exception as e:
            self.logger.exception(f"Unexpected error converting {source}")
            self._fail(job, job.stage, f"{type(e).__name__}: {e}", slot, publish)
            return job

        job.stage = ConversionStage.DONE
        self.logger.info(f"CONVERT_DONE: {job.destination}")
        return job
