from pathlib import Path
from flacjack.config.models import GeneralConfig


def destination_for(source: Path, config: GeneralConfig) -> Path:
    """Maps a source file to its output file.

    The input root is stripped from the front of the path, the source
    extension is swapped for the target one and the result is placed under the
    output root: ``/music/flac/Artist/Song.flac`` -> ``/music/mp3/Artist/Song.mp3``.
    A file named only ``.flac`` maps to ``.mp3`` in the same directory.

    Raises:
        ValueError: if ``source`` does not live under the input root.
    """
    relative = Path(source).relative_to(config.input_root)
    name = relative.name
    if name.lower().endswith(config.source_extension):
        stem = name[:len(name) - len(config.source_extension)]
    else:
        stem = relative.stem
    return config.output_root / relative.with_name(stem + config.target_extension)
