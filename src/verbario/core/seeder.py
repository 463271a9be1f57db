"""Verb seeder.

Loads verb definitions from JSON files in the verbs directory into the
verbs table, skipping files already recorded in the seed ledger.

Run protocol:
1. Connect to the store (fatal on failure)
2. Repair indexes on verbs (best-effort)
3. Load the ledger
4. Discover *.json files not yet in the ledger
5. Ingest each new file; existing words are skipped, failed records counted
6. Persist newly seeded filenames
7. Disconnect, always

A file is marked seeded when at least one record succeeded or no record
failed. Concurrent runs against the same ledger file are not coordinated;
the last writer wins.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import structlog

from verbario.core.errors import ValidationError
from verbario.core.seed_ledger import LedgerFile
from verbario.db.database import VERBS_WORD_INDEX, RecordStore
from verbario.db.verbs_repository import VerbRepository

logger = structlog.get_logger(__name__)

VERBS_TABLE = "verbs"
LEGACY_FIELD = "infinitive"
LEGACY_INDEX_NAMES = ("infinitive_1", "idx_verbs_infinitive")

RecordOutcome = Literal["inserted", "skipped", "failed"]


class VerbFileError(Exception):
    """Raised when a verb source file cannot be read or parsed."""


@dataclass
class FileResult:
    """Outcome of ingesting one verb file."""

    filename: str
    inserted: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def success(self) -> int:
        return self.inserted + self.skipped

    @property
    def should_mark_seeded(self) -> bool:
        return self.success > 0 or self.failed == 0


@dataclass
class SeedReport:
    """Summary of a seeder run."""

    files_found: int = 0
    files: list[FileResult] = field(default_factory=list)
    seeded_files: list[str] = field(default_factory=list)
    ledger_size: int = 0

    @property
    def files_processed(self) -> int:
        return len(self.files)

    @property
    def inserted(self) -> int:
        return sum(f.inserted for f in self.files)

    @property
    def skipped(self) -> int:
        return sum(f.skipped for f in self.files)

    @property
    def failed(self) -> int:
        return sum(f.failed for f in self.files)


@dataclass
class SeedStatus:
    """Snapshot of ledger vs. available files."""

    total_files: int
    seeded_files: list[str]
    new_files: list[str]

    @property
    def seeded(self) -> int:
        return len(self.seeded_files)

    @property
    def new(self) -> int:
        return len(self.new_files)


# =============================================================================
# INDEX REPAIR
# =============================================================================


def repair_indexes(store: RecordStore) -> None:
    """Make the verbs table carry a unique index on word.

    Drops any index on the retired 'infinitive' field and any non-unique
    index on word, then ensures the unique one. Every step is best-effort
    and logged; running it repeatedly is harmless.
    """
    try:
        indexes = store.list_indexes(VERBS_TABLE)
    except sqlite3.Error as e:
        logger.warning("index_repair.inspect_failed", error=str(e))
        return

    for index in indexes:
        if LEGACY_FIELD in index.columns or index.name in LEGACY_INDEX_NAMES:
            try:
                store.drop_index(index.name)
                logger.info("index_repair.dropped_legacy", index=index.name)
            except sqlite3.Error as e:
                logger.warning("index_repair.drop_legacy_failed", index=index.name, error=str(e))

    has_unique_word_index = False
    for index in indexes:
        if index.columns != ["word"]:
            continue
        if index.unique:
            has_unique_word_index = True
            continue
        try:
            store.drop_index(index.name)
            logger.info("index_repair.dropped_non_unique_word", index=index.name)
        except sqlite3.Error as e:
            logger.warning("index_repair.drop_word_failed", index=index.name, error=str(e))

    if has_unique_word_index:
        return

    try:
        store.create_index(VERBS_TABLE, "word", VERBS_WORD_INDEX, unique=True)
        logger.info("index_repair.ensured_unique_word")
    except sqlite3.Error as e:
        logger.warning("index_repair.ensure_unique_failed", error=str(e))


# =============================================================================
# SOURCE FILES
# =============================================================================


def discover_sources(verbs_dir: Path) -> list[str]:
    """List *.json filenames in verbs_dir, sorted; empty if the dir is missing."""
    if not verbs_dir.is_dir():
        logger.warning("seeder.verbs_dir_missing", path=str(verbs_dir))
        return []
    return sorted(p.name for p in verbs_dir.iterdir() if p.is_file() and p.suffix == ".json")


def load_verb_file(path: Path) -> list[Any]:
    """Parse a verb file into a list of records.

    Raises:
        VerbFileError: If the file is unreadable or not a JSON array
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise VerbFileError(f"Cannot read {path.name}: {e}") from e
    if not isinstance(data, list):
        raise VerbFileError(f"{path.name} must contain a JSON array of verbs")
    return data


# =============================================================================
# SEEDER
# =============================================================================


class VerbSeeder:
    """Idempotent loader of verb files into the store."""

    def __init__(self, store: RecordStore, verbs_dir: Path, ledger_path: Path):
        self.store = store
        self.verbs_dir = Path(verbs_dir)
        self.ledger = LedgerFile(ledger_path)

    def seed_record(self, repo: VerbRepository, record: Any) -> RecordOutcome:
        """Insert one verb unless its word already exists."""
        if not isinstance(record, dict):
            logger.error("seeder.record_invalid", record_type=type(record).__name__)
            return "failed"

        word = record.get("word")
        try:
            if repo.find_by_word(word) is not None:
                logger.debug("seeder.verb_exists", word=word)
                return "skipped"
            repo.create(record)
        except (ValidationError, sqlite3.DatabaseError) as e:
            logger.error("seeder.verb_failed", word=word, error=str(e))
            return "failed"

        logger.info("seeder.verb_inserted", word=word)
        return "inserted"

    def seed_file(self, repo: VerbRepository, filename: str) -> FileResult:
        """Ingest every record of one verb file."""
        result = FileResult(filename=filename)
        try:
            records = load_verb_file(self.verbs_dir / filename)
        except VerbFileError as e:
            logger.error("seeder.file_unreadable", filename=filename, error=str(e))
            result.failed = 1
            return result

        if not records:
            logger.warning("seeder.file_empty", filename=filename)

        for record in records:
            outcome = self.seed_record(repo, record)
            if outcome == "inserted":
                result.inserted += 1
            elif outcome == "skipped":
                result.skipped += 1
            else:
                result.failed += 1

        logger.info(
            "seeder.file_processed",
            filename=filename,
            inserted=result.inserted,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result

    def run(self) -> SeedReport:
        """Run the seeder once.

        Raises:
            StoreUnavailable: If the store cannot be connected
        """
        logger.info("seeder.started", verbs_dir=str(self.verbs_dir))
        report = SeedReport()

        with self.store:
            repair_indexes(self.store)

            ledger = self.ledger.load()
            all_files = discover_sources(self.verbs_dir)
            report.files_found = len(all_files)
            new_files = ledger.unseeded(all_files)
            logger.info(
                "seeder.sources",
                previously_seeded=len(ledger),
                found=len(all_files),
                new=len(new_files),
            )

            repo = VerbRepository(self.store)
            for filename in new_files:
                result = self.seed_file(repo, filename)
                report.files.append(result)
                if result.should_mark_seeded:
                    report.seeded_files.append(filename)

            if ledger.mark_seeded(report.seeded_files):
                self.ledger.save(ledger)
            report.ledger_size = len(ledger)

        logger.info(
            "seeder.finished",
            files_processed=report.files_processed,
            inserted=report.inserted,
            skipped=report.skipped,
            failed=report.failed,
            ledger_size=report.ledger_size,
        )
        return report

    def reset(self) -> bool:
        """Clear the ledger so every file is ingested on the next run."""
        return self.ledger.reset()

    def status(self) -> SeedStatus:
        """Report total, seeded and new files without mutating anything."""
        ledger = self.ledger.load()
        all_files = discover_sources(self.verbs_dir)
        return SeedStatus(
            total_files=len(all_files),
            seeded_files=ledger.filenames,
            new_files=ledger.unseeded(all_files),
        )
