"""Seed ledger: the set of verb source files already ingested.

The ledger is persisted as a flat JSON list of filenames in a side file.
It only grows, except through LedgerFile.reset(), which removes it.
"""

from __future__ import annotations

import json
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

import structlog

logger = structlog.get_logger(__name__)


class FileState(str, Enum):
    """Ingestion state of one verb source file."""

    UNSEEDED = "unseeded"
    SEEDED = "seeded"


class SeedLedger:
    """Ordered set of seeded filenames."""

    def __init__(self, filenames: Iterable[str] = ()):
        self._files: list[str] = []
        for name in filenames:
            if name not in self._files:
                self._files.append(name)

    def __contains__(self, filename: object) -> bool:
        return filename in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    @property
    def filenames(self) -> list[str]:
        return list(self._files)

    def state_of(self, filename: str) -> FileState:
        return FileState.SEEDED if filename in self._files else FileState.UNSEEDED

    def unseeded(self, filenames: Iterable[str]) -> list[str]:
        """Filter filenames down to those not yet in the ledger."""
        return [f for f in filenames if self.state_of(f) is FileState.UNSEEDED]

    def mark_seeded(self, filenames: Iterable[str]) -> list[str]:
        """Add filenames to the ledger.

        Returns:
            The filenames that were not already present
        """
        added = []
        for name in filenames:
            if name not in self._files:
                self._files.append(name)
                added.append(name)
        return added


class LedgerFile:
    """Durable JSON storage for a SeedLedger."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> SeedLedger:
        """Read the ledger; an absent or corrupt file yields an empty ledger."""
        if not self.path.exists():
            return SeedLedger()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("seed_ledger.load_failed", path=str(self.path), error=str(e))
            return SeedLedger()

        if not isinstance(data, list) or not all(isinstance(f, str) for f in data):
            logger.warning("seed_ledger.invalid_format", path=str(self.path))
            return SeedLedger()

        return SeedLedger(data)

    def save(self, ledger: SeedLedger) -> Path:
        """Persist the ledger, creating parent directories as needed.

        The list is written to a sibling temp file and moved into place, so
        an interrupted save leaves the previous ledger intact.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(ledger.filenames, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("seed_ledger.saved", path=str(self.path), files=len(ledger))
        return self.path

    def reset(self) -> bool:
        """Remove the ledger file.

        Returns:
            True if a ledger existed and was removed
        """
        if not self.path.exists():
            logger.info("seed_ledger.reset_noop", path=str(self.path))
            return False
        self.path.unlink()
        logger.info("seed_ledger.reset", path=str(self.path))
        return True
