from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional
from pydantic import BaseModel

REQUIRED_TAGS = ("artist", "title", "genre", "album", "tracknumber", "date")


class ConversionStage(str, Enum):
    EXTRACTING_TAGS = "EXTRACTING_TAGS"
    DECODING_SOURCE = "DECODING_SOURCE"
    ENCODING_TARGET = "ENCODING_TARGET"
    DONE = "DONE"
    ERROR = "ERROR"

    @property
    def label(self) -> str:
        """Display label shown in the status line while the stage runs."""
        return _STAGE_LABELS.get(self, "")


_STAGE_LABELS = {
    ConversionStage.EXTRACTING_TAGS: "Extracting tags",
    ConversionStage.DECODING_SOURCE: "Decode source",
    ConversionStage.ENCODING_TARGET: "Encode target",
}


class Tags(Mapping[str, str]):
    """Read-only tag mapping with case-insensitive keys.

    Rippers disagree on tag name capitalization (MusicBrainz writes ARTIST,
    others artist), so keys are folded to lowercase on the way in and on lookup.
    """

    def __init__(self, data: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (data or {}).items():
            self._data[key.lower()] = value

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Tags":
        """Parses ``KEY=value`` lines as printed by ``metaflac --export-tags-to=-``.

        Double quotes become single quotes so values can be handed to the
        encoder without quoting surprises. Lines without ``=`` are ignored and
        a repeated key keeps its last value.
        """
        data: Dict[str, str] = {}
        for raw in lines:
            line = raw.rstrip("\r\n").replace('"', "'")
            key, sep, value = line.partition("=")
            if not sep or not key:
                continue
            data[key.lower()] = value
        return cls(data)

    def missing(self, required: Iterable[str] = REQUIRED_TAGS) -> List[str]:
        """Returns required tag names that are absent or blank."""
        return [name for name in required if not self.get(name, "").strip()]

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Tags({self._data!r})"


class ConversionJob(BaseModel):
    source: Path
    destination: Path
    stage: ConversionStage = ConversionStage.EXTRACTING_TAGS
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.stage == ConversionStage.DONE
