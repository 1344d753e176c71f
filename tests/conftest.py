import pytest
import yaml
from pathlib import Path
from unittest.mock import MagicMock
from flacjack.config.models import AppConfig, GeneralConfig
from flacjack.domain.models import Tags
from flacjack.infrastructure.event_bus import EventBus

# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def music_roots(tmp_path):
    """Creates empty input and output roots under tmp_path."""
    input_root = tmp_path / "flac"
    output_root = tmp_path / "mp3"
    input_root.mkdir()
    return input_root, output_root

@pytest.fixture
def general_config(music_roots, tmp_path):
    """GeneralConfig pointing at the tmp roots, with a private temp dir."""
    input_root, output_root = music_roots
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    return GeneralConfig(
        input_root=input_root,
        output_root=output_root,
        workers=2,
        temp_dir=temp_dir,
        poll_interval_s=0.01,
    )

@pytest.fixture
def sample_config(general_config):
    """Returns a sample AppConfig object for testing."""
    return AppConfig(general=general_config)

@pytest.fixture
def config_yaml_path(tmp_path):
    """Creates a temporary YAML config file."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "flacjack.yaml"

    content = {
        'general': {
            'input_root': str(tmp_path / "in"),
            'output_root': str(tmp_path / "out"),
            'workers': 3,
            'source_extension': 'FLAC',
            'debug': False,
        },
        'tools': {
            'lame': '/opt/lame/bin/lame',
            'lame_args': ['-V', '0'],
        },
        'ui': {
            'name_width': 40,
        },
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file

# ============================================================================
# EventBus Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

# ============================================================================
# Stage Fixtures
# ============================================================================

FULL_TAGS = {
    "ARTIST": "Bob",
    "TITLE": "Hi'There",
    "GENRE": "Rock",
    "ALBUM": "Songs",
    "TRACKNUMBER": "1",
    "DATE": "2016",
}

@pytest.fixture
def full_tags():
    return Tags(FULL_TAGS)

@pytest.fixture
def fake_stages(full_tags):
    """Tag reader, decoder and encoder mocks that succeed.

    The decoder writes the intermediate file and the encoder writes the
    destination, like the real tools do.
    """
    tag_reader = MagicMock()
    tag_reader.read_tags.return_value = full_tags

    decoder = MagicMock()
    def _decode(source: Path, output: Path):
        output.write_bytes(b"RIFF")
        return output
    decoder.decode.side_effect = _decode

    encoder = MagicMock()
    def _encode(source: Path, destination: Path, tags):
        destination.write_bytes(b"ID3")
        return destination
    encoder.encode.side_effect = _encode

    return tag_reader, decoder, encoder

@pytest.fixture
def make_flac():
    """Returns a helper that creates a dummy .flac file under a root."""
    def _make(root: Path, relative: str) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"fLaC")
        return path
    return _make
