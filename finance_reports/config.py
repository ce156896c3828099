"""Runtime settings resolved from the environment.

Values may come from a local ``.env`` file, which the CLI loads with
``python-dotenv`` (without overriding variables already set).

- ``FR_DATA_FILE``: dataset JSON path
  (default ``~/.finance_reports/dataset.json``).
- ``FR_CATEGORIES_FILE``: category rule table JSON path
  (default ``~/.finance_reports/categories.json``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_FILE_ENV = "FR_DATA_FILE"
CATEGORIES_FILE_ENV = "FR_CATEGORIES_FILE"


def _default_root() -> Path:
    return Path.home() / ".finance_reports"


def _path_from_env(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw and raw.strip():
        return Path(raw.strip()).expanduser().resolve()
    return default


@dataclass(frozen=True, slots=True)
class Settings:
    data_file: Path
    categories_file: Path


def load_settings(
    *, data_file: str | os.PathLike[str] | None = None, categories_file: str | os.PathLike[str] | None = None
) -> Settings:
    """Resolve settings; explicit arguments win over the environment."""

    root = _default_root()
    return Settings(
        data_file=(
            Path(data_file).expanduser()
            if data_file
            else _path_from_env(DATA_FILE_ENV, root / "dataset.json")
        ),
        categories_file=(
            Path(categories_file).expanduser()
            if categories_file
            else _path_from_env(CATEGORIES_FILE_ENV, root / "categories.json")
        ),
    )


__all__ = ["Settings", "load_settings", "DATA_FILE_ENV", "CATEGORIES_FILE_ENV"]
