"""Dataset persistence and the process-wide snapshot holder.

Layout: a single UTF-8 JSON document
``{"accounts": [...], "transactions": {"<account id>": [...]}}``.

Atomicity: writes target ``<name>.tmp`` first and then ``os.replace`` into
place, so readers never observe a half-written file.
"""

from __future__ import annotations

import json
import os
import threading
from os import PathLike
from pathlib import Path

from .errors import DatasetFormatError
from .logging_setup import get_logger
from .models import Dataset

_logger = get_logger("finance_reports.storage")


def load_dataset(path: str | PathLike[str]) -> Dataset | None:
    """Read a dataset from ``path``; ``None`` when nothing has been saved yet."""

    p = Path(path)
    if not p.exists():
        _logger.debug("no dataset at %s", p)
        return None

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise DatasetFormatError(f"Dataset file {p} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise DatasetFormatError(f"Dataset file {p} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DatasetFormatError(f"Dataset file {p} must contain a JSON object")

    dataset = Dataset.from_mapping(data)
    _logger.debug(
        "loaded %d accounts from %s",
        len(dataset.accounts),
        p,
    )
    return dataset


def save_dataset(dataset: Dataset, path: str | PathLike[str]) -> None:
    """Serialize ``dataset`` to ``path``, creating missing parent directories."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(p.name + ".tmp")
    payload = json.dumps(dataset.to_mapping(), indent=2, ensure_ascii=False)
    tmp.write_text(payload + "\n", encoding="utf-8")
    os.replace(tmp, p)
    _logger.debug("saved %d accounts to %s", len(dataset.accounts), p)


class DatasetStore:
    """Holds the current :class:`Dataset` snapshot for a data file.

    The snapshot is loaded lazily on first access and replaced wholesale by
    :meth:`reload`. Readers always get a complete snapshot, old or new.
    """

    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._snapshot: Dataset | None = None

    def snapshot(self) -> Dataset:
        """Return the current snapshot, loading it on first use."""

        current = self._snapshot
        if current is not None:
            return current
        with self._lock:
            if self._snapshot is None:
                self._snapshot = load_dataset(self.path) or Dataset.empty()
            return self._snapshot

    def reload(self) -> Dataset:
        """Re-read the data file and publish the result as the new snapshot."""

        fresh = load_dataset(self.path) or Dataset.empty()
        with self._lock:
            self._snapshot = fresh
        _logger.info("reloaded dataset from %s", self.path)
        return fresh

    def replace(self, dataset: Dataset, *, persist: bool = True) -> None:
        """Publish ``dataset`` as the new snapshot, saving it first when ``persist``."""

        if persist:
            save_dataset(dataset, self.path)
        with self._lock:
            self._snapshot = dataset


__all__ = ["load_dataset", "save_dataset", "DatasetStore"]
