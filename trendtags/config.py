from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import Settings

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SETTINGS_PATH = Path("config/settings.yml")


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def resolve_path(path: Path) -> Path:
    if path.is_absolute() or path.exists():
        return path
    return (PROJECT_ROOT / path).resolve()


def load_settings(settings_path: Optional[Path] = None) -> Settings:
    """Build settings from the YAML file, with ``TRENDTAGS_*`` env vars taking precedence.

    A missing file is not an error; defaults apply.
    """

    path = resolve_path(settings_path or DEFAULT_SETTINGS_PATH)
    config = load_yaml(path) if path.exists() else {}
    return Settings(**config)
