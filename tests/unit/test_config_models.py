import os
import pytest
from pathlib import Path
from pydantic import ValidationError

from flacjack.config.loader import apply_overrides, load_config
from flacjack.config.models import AppConfig, GeneralConfig, ToolsConfig, default_workers


def test_general_config_defaults():
    config = GeneralConfig()

    assert config.input_root == Path("/mnt/music/flac")
    assert config.output_root == Path("/mnt/music/mp3")
    assert config.workers == default_workers()
    assert config.source_extension == ".flac"
    assert config.target_extension == ".mp3"
    assert config.queue_size == 100


def test_extensions_are_normalized():
    config = GeneralConfig(source_extension="FLAC", target_extension=".MP3")

    assert config.source_extension == ".flac"
    assert config.target_extension == ".mp3"


@pytest.mark.parametrize("field,value", [
    ("workers", 0),
    ("queue_size", 0),
    ("source_extension", ""),
])
def test_general_config_rejects_invalid_values(field, value):
    with pytest.raises(ValidationError):
        GeneralConfig(**{field: value})


def test_roots_must_differ():
    with pytest.raises(ValidationError):
        GeneralConfig(input_root=Path("/music"), output_root=Path("/music"))


def test_config_is_immutable():
    config = AppConfig()

    with pytest.raises(ValidationError):
        config.general.workers = 3


def test_tools_default_lame_args_pass_through():
    tools = ToolsConfig()

    assert tools.lame_args == ["-q", "2", "--vbr-new", "-b", "192", "-B", "320", "--preset", "extreme"]


def test_load_config_without_path_uses_defaults():
    assert load_config(None) == AppConfig()


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_load_config_from_yaml(config_yaml_path, tmp_path):
    config = load_config(config_yaml_path)

    assert config.general.input_root == tmp_path / "in"
    assert config.general.output_root == tmp_path / "out"
    assert config.general.workers == 3
    assert config.general.source_extension == ".flac"
    assert config.tools.lame == "/opt/lame/bin/lame"
    assert config.tools.lame_args == ["-V", "0"]
    assert config.tools.metaflac == "metaflac"
    assert config.ui.name_width == 40


def test_load_config_flat_general_keys(tmp_path):
    conf = tmp_path / "flat.yaml"
    conf.write_text("input_root: /a\noutput_root: /b\nworkers: 2\ntools:\n  flac: /usr/bin/flac\n")

    config = load_config(conf)

    assert config.general.input_root == Path("/a")
    assert config.general.workers == 2
    assert config.tools.flac == "/usr/bin/flac"


def test_load_config_empty_file(tmp_path):
    conf = tmp_path / "empty.yaml"
    conf.write_text("")

    assert load_config(conf) == AppConfig()


def test_apply_overrides_returns_new_validated_config(tmp_path):
    original = AppConfig()

    updated = apply_overrides(original, input_root=tmp_path / "in", workers=4, debug=None)

    assert updated.general.input_root == tmp_path / "in"
    assert updated.general.workers == 4
    assert updated.general.debug is False
    assert original.general.input_root == Path("/mnt/music/flac")
    assert updated.tools == original.tools


def test_apply_overrides_nothing_given_returns_same_object():
    config = AppConfig()

    assert apply_overrides(config, input_root=None, workers=None) is config


def test_apply_overrides_validates():
    with pytest.raises(ValidationError):
        apply_overrides(AppConfig(), workers=0)


def test_relative_roots_become_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cwd = Path(os.getcwd())

    config = GeneralConfig(input_root=Path("music/flac"), output_root=Path("music/./mp3"))

    assert config.input_root == cwd / "music" / "flac"
    assert config.output_root == cwd / "music" / "mp3"


def test_cli_override_roots_become_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cwd = Path(os.getcwd())

    updated = apply_overrides(AppConfig(), input_root=Path("in"), output_root=Path("out/../mp3"))

    assert updated.general.input_root == cwd / "in"
    assert updated.general.output_root == cwd / "mp3"


def test_roots_equal_after_normalization_rejected():
    with pytest.raises(ValidationError):
        GeneralConfig(input_root=Path("/music/flac"), output_root=Path("/music/mp3/../flac"))
