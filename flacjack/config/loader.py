import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from .models import AppConfig, GeneralConfig


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Loads YAML config and parses it into AppConfig Pydantic model.

    Without a path the built-in defaults are used. An explicit path that does
    not exist is an error.
    """
    if config_path is None:
        return AppConfig()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    # Flat files ("input_root: ...") are accepted as the general section
    flat = {key: data.pop(key) for key in list(data) if key in GeneralConfig.model_fields}
    if flat:
        data["general"] = {**(data.get("general") or {}), **flat}

    return AppConfig(**data)


def apply_overrides(config: AppConfig, **overrides: Any) -> AppConfig:
    """Returns a new validated config with CLI values applied to ``general``.

    ``None`` values mean "not given on the command line" and are ignored.
    """
    updates: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    general = GeneralConfig(**{**config.general.model_dump(), **updates})
    return config.model_copy(update={"general": general})
