import os
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def default_workers() -> int:
    """One worker per available CPU."""
    return os.cpu_count() or 1


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if not ext or ext == ".":
        raise ValueError("Extension must not be empty")
    return ext if ext.startswith(".") else f".{ext}"


class GeneralConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_root: Path = Path("/mnt/music/flac")
    output_root: Path = Path("/mnt/music/mp3")
    workers: int = Field(default_factory=default_workers, gt=0)
    source_extension: str = ".flac"
    target_extension: str = ".mp3"
    queue_size: int = Field(default=100, ge=1)
    poll_interval_s: float = Field(default=0.1, gt=0)
    temp_dir: Optional[Path] = None
    log_path: Optional[Path] = None
    debug: bool = False

    @field_validator("input_root", "output_root")
    @classmethod
    def validate_root(cls, v: Path) -> Path:
        # Work items and rendered paths are absolute; symlinks are kept as given
        return Path(os.path.abspath(v.expanduser()))

    @field_validator("source_extension", "target_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        return _normalize_extension(v)

    @model_validator(mode="after")
    def validate_roots(self):
        if self.input_root == self.output_root:
            raise ValueError("input_root and output_root must differ")
        return self


class ToolsConfig(BaseModel):
    """External tool executables. Encoder arguments are passed through as-is."""
    model_config = ConfigDict(frozen=True)

    metaflac: str = "metaflac"
    flac: str = "flac"
    lame: str = "lame"
    lame_args: List[str] = Field(
        default_factory=lambda: ["-q", "2", "--vbr-new", "-b", "192", "-B", "320", "--preset", "extreme"]
    )


class UiConfig(BaseModel):
    """Status display configuration."""
    model_config = ConfigDict(frozen=True)

    name_width: int = Field(default=60, ge=10, le=200)
    stage_width: int = Field(default=15, ge=5, le=40)


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    ui: UiConfig = Field(default_factory=UiConfig)
