from pathlib import Path
from typing import List
from flacjack.domain.models import ConversionStage, Tags
from flacjack.infrastructure.process import run_tool


class MetaflacAdapter:
    """Wrapper around metaflac to read Vorbis comments from a FLAC file."""

    def __init__(self, executable: str = "metaflac"):
        self.executable = executable

    def _build_command(self, source: Path) -> List[str]:
        # --no-utf8-convert keeps the raw tag bytes; lame gets them unchanged
        return [self.executable, "--export-tags-to=-", "--no-utf8-convert", str(source)]

    def read_tags(self, source: Path) -> Tags:
        """Returns the tags of ``source`` with lowercase keys."""
        result = run_tool(self._build_command(source), ConversionStage.EXTRACTING_TAGS.label)
        return Tags.from_lines(result.stdout.splitlines())
