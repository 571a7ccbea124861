"""Chooser settings with JSON loading.

Settings live at ``$PI_CONFIG_DIR/choose.json`` (default ``~/.pi``), using
the camelCase keys shared by the other pi settings files.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "choose.json"

SortFunctionName = Literal[
    "history-length-alpha",
    "history-alpha",
    "length-alpha",
    "alpha",
    "none",
]


class ChooseSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sort_threshold: int = Field(default=20000, ge=0, alias="sortThreshold")
    page_size: int = Field(default=10, ge=1, alias="pageSize")
    # (outer, inner): inner is formatted with (current, total), outer pads it
    count_format: tuple[str, str] | None = Field(
        default=("{:<6} ", "{}/{}"), alias="countFormat"
    )
    group_format: str | None = Field(default="── {} ", alias="groupFormat")
    cycle: bool = False
    sort_function: SortFunctionName = Field(
        default="history-length-alpha", alias="sortFunction"
    )
    newline_glyph: str = Field(default="⤶", alias="newlineGlyph")
    ellipsis: str = "…"


def _get_config_dir() -> Path:
    return Path(os.environ.get("PI_CONFIG_DIR", Path.home() / ".pi"))


def settings_from_dict(data: dict[str, Any]) -> ChooseSettings:
    return ChooseSettings.model_validate(data)


def load_settings(path: str | Path | None = None) -> ChooseSettings:
    """Load settings from *path* or the default settings file.

    A missing file yields the defaults. An unreadable or invalid file is
    logged and also yields the defaults.
    """
    settings_path = Path(path) if path is not None else _get_config_dir() / SETTINGS_FILE_NAME
    if not settings_path.exists():
        return ChooseSettings()
    try:
        data = json.loads(settings_path.read_text())
        return settings_from_dict(data)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Ignoring invalid settings file %s: %s", settings_path, e)
        return ChooseSettings()
