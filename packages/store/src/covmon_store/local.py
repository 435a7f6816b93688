"""LocalStore — the baseline report is a file in the CI workspace.

This is the default: a previous job (or a cache step) leaves the baseline
report at original_clover_file, and the monitor reads it from there.
"""

from __future__ import annotations

import logging
from pathlib import Path

from covmon_store.base import BaselineStore

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


class LocalStore(BaselineStore):
    """Reads and writes baseline reports relative to a root directory."""

    def __init__(self, root: str = "."):
        self._root = Path(root)

    def key_for(self, filename: str) -> str:
        return filename

    def _path(self, name: str) -> Path:
        return self._root / name

    def load(self, name: str) -> str | None:
        path = self._path(name)
        if not path.is_file():
            logger.debug("No baseline file at %s", path)
            return None
        return path.read_text(encoding="utf-8").replace(_BOM, "")

    def save(self, name: str, content: str) -> None:
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
