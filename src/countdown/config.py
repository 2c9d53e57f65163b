from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
import logging
import yaml

from .errors import ConfigError

STORE_PATH_DEFAULT = "~/.local/share/event-countdown/store.json"


@dataclass
class StoreConfig:
    path: str
    key: str


@dataclass
class ImageConfig:
    thumbnail_size: int


@dataclass
class AppConfig:
    log_level: str
    store: StoreConfig
    images: ImageConfig


def load_config(path: str | None) -> AppConfig:
    data: Dict[str, Any] = {}
    if path:
        p = Path(path).expanduser()
        if p.exists():
            try:
                data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {p}: {exc}") from exc
            if not isinstance(data, dict):
                raise ConfigError(f"{p} must contain a mapping at the top level")

    store = data.get("store") or {}
    images = data.get("images") or {}

    log_level = str(data.get("log_level", "WARNING")).upper()
    # getLevelName maps known level names to ints and anything else to a string
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown log_level: {log_level!r}")

    return AppConfig(
        log_level=log_level,
        store=StoreConfig(
            path=str(store.get("path", STORE_PATH_DEFAULT)),
            key=str(store.get("key", "SavedEvents")),
        ),
        images=ImageConfig(
            thumbnail_size=int(images.get("thumbnail_size", 50)),
        ),
    )
