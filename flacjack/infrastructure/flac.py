from pathlib import Path
from typing import List
from flacjack.domain.models import ConversionStage
from flacjack.infrastructure.process import run_tool


class FlacDecoder:
    """Wrapper around the reference flac tool, decoding to WAV."""

    def __init__(self, executable: str = "flac"):
        self.executable = executable

    def _build_command(self, source: Path, output: Path) -> List[str]:
        # -f: the temporary file already exists (mkstemp) and must be overwritten
        return [self.executable, "--silent", "-f", "-d", str(source), "-o", str(output)]

    def decode(self, source: Path, output: Path) -> Path:
        """Decodes ``source`` into ``output`` and returns ``output``."""
        run_tool(self._build_command(source, output), ConversionStage.DECODING_SOURCE.label)
        return output
