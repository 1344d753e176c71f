import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence
from flacjack.domain.models import ConversionStage
from flacjack.domain.errors import StageError
from flacjack.infrastructure.process import run_tool

# lame ID3 option -> tag name
TAG_OPTIONS = (
    ("--ta", "artist"),
    ("--tt", "title"),
    ("--tg", "genre"),
    ("--tl", "album"),
    ("--tn", "tracknumber"),
    ("--ty", "date"),
)


def partial_path(destination: Path) -> Path:
    """Where lame writes while encoding; renamed onto ``destination`` on success."""
    return destination.with_name(f"{destination.name}.tmp")


class LameEncoder:
    """Wrapper around lame for WAV to MP3 encoding."""

    def __init__(self, executable: str = "lame", extra_args: Optional[Sequence[str]] = None):
        self.executable = executable
        self.extra_args = list(extra_args or [])
        self.logger = logging.getLogger(__name__)

    def _build_command(self, source: Path, output: Path, tags: Mapping[str, str]) -> List[str]:
        cmd = [self.executable, *self.extra_args]
        for option, name in TAG_OPTIONS:
            cmd.extend([option, tags[name]])
        cmd.extend([str(source), str(output)])
        return cmd

    def encode(self, source: Path, destination: Path, tags: Mapping[str, str]) -> Path:
        """Encodes ``source`` into ``destination``.

        ``tags`` must already hold every name in TAG_OPTIONS. The destination
        only appears once lame succeeded; a failed run leaves nothing behind.
        """
        tmp_path = partial_path(destination)
        cmd = self._build_command(source, tmp_path, tags)
        try:
            run_tool(cmd, ConversionStage.ENCODING_TARGET.label)
            tmp_path.replace(destination)
        except StageError:
            self._discard(tmp_path)
            raise
        except OSError as e:
            self._discard(tmp_path)
            raise StageError(ConversionStage.ENCODING_TARGET.label, f"could not move {tmp_path.name} into place: {e}") from e
        return destination

    def _discard(self, tmp_path: Path):
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Failed to remove partial output {tmp_path}: {e}")
