"""Load BookConfig from an ``ecosystem-book.json`` file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ecosystem_book.errors import ConfigError
from ecosystem_book.models import BookConfig

CONFIG_FILENAME = "ecosystem-book.json"


class BookSettings(BaseModel):
    """Keys accepted in the config file; everything is optional."""

    model_config = ConfigDict(extra="forbid")

    index_dir: Optional[str] = None
    output_dir: Optional[str] = None
    seeds: Optional[list[str]] = None
    title: Optional[str] = None
    ecosystem_label: Optional[str] = None
    registry_url: Optional[str] = None
    respider_upward: Optional[bool] = None
    skip_dirs: Optional[list[str]] = None


def find_config(start: Path) -> Path | None:
    candidate = start / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config(path: Path, base: BookConfig | None = None) -> BookConfig:
    """Read ``path`` and overlay its values on ``base`` (or the defaults).

    Relative directories are resolved against the config file's directory.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON: {e}") from e
    try:
        settings = BookSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e

    config = base or BookConfig()
    root = path.parent
    if settings.index_dir is not None:
        config.index_dir = root / settings.index_dir
    if settings.output_dir is not None:
        config.output_dir = root / settings.output_dir
    if settings.seeds is not None:
        config.seeds = list(settings.seeds)
    if settings.title is not None:
        config.title = settings.title
    if settings.ecosystem_label is not None:
        config.ecosystem_label = settings.ecosystem_label
    if settings.registry_url is not None:
        config.registry_url = settings.registry_url.rstrip("/")
    if settings.respider_upward is not None:
        config.respider_upward = settings.respider_upward
    if settings.skip_dirs is not None:
        config.skip_dirs = list(settings.skip_dirs)
    return config
