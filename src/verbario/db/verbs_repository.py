"""Repository for the verbs table.

Provides CRUD, substring search and pagination over Spanish verb
conjugation records.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from verbario.core.errors import Conflict, NotFound, ValidationError
from verbario.core.pagination import (
    Page,
    clamp_limit,
    clamp_page,
    offset_for,
)
from verbario.db.database import RecordStore, substring_filter

logger = structlog.get_logger(__name__)

TENSES = (
    "present",
    "preterite",
    "imperfect",
    "future",
    "conditional",
    "presentSubjunctive",
    "imperfectSubjunctive",
    "presentPerfect",
    "pastPerfect",
    "futurePerfect",
    "conditionalPerfect",
)

PERSONS = ("yo", "tu", "el", "nosotros", "vosotros", "ellos")


@dataclass
class Verb:
    """Verb record from database."""

    id: str
    word: str
    tenses: dict[str, dict[str, str]] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "word": self.word,
            "tenses": self.tenses,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_word(value: Any) -> str:
    """Return the trimmed word, raising ValidationError if missing."""
    if value is None:
        raise ValidationError("word is required")
    if not isinstance(value, str):
        raise ValidationError("word must be a string")
    word = value.strip()
    if not word:
        raise ValidationError("word is required")
    return word


def normalize_tenses(value: Any) -> dict[str, dict[str, str]]:
    """Keep known tenses and persons; drop empty entries.

    Raises:
        ValidationError: If tenses or a tense entry is not a mapping
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError("tenses must be an object")

    tenses: dict[str, dict[str, str]] = {}
    for tense in TENSES:
        conjugations = value.get(tense)
        if conjugations is None:
            continue
        if not isinstance(conjugations, dict):
            raise ValidationError(f"tenses.{tense} must be an object")
        forms = {
            person: str(conjugations[person])
            for person in PERSONS
            if conjugations.get(person) is not None
        }
        tenses[tense] = forms
    return tenses


def _row_to_verb(row: sqlite3.Row) -> Verb:
    return Verb(
        id=row["id"],
        word=row["word"],
        tenses=json.loads(row["tenses"] or "{}"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class VerbRepository:
    """CRUD operations for the verbs table."""

    def __init__(self, store: RecordStore):
        self.store = store

    def create(self, data: dict[str, Any]) -> Verb:
        """Insert a new verb.

        Raises:
            ValidationError: If word is missing or tenses are malformed
            Conflict: If a verb with the same word exists
        """
        now = _now()
        verb = Verb(
            id=uuid.uuid4().hex,
            word=normalize_word(data.get("word")),
            tenses=normalize_tenses(data.get("tenses")),
            created_at=now,
            updated_at=now,
        )
        try:
            with self.store.connection() as conn:
                conn.execute(
                    """
                    INSERT INTO verbs (id, word, tenses, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        verb.id,
                        verb.word,
                        json.dumps(verb.tenses, ensure_ascii=False),
                        verb.created_at,
                        verb.updated_at,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise Conflict("word", verb.word) from e

        logger.debug("verbs.created", verb_id=verb.id, word=verb.word)
        return verb

    def list(self, q: str | None = None, page: Any = None, limit: Any = None) -> Page[Verb]:
        """List verbs sorted by word, optionally filtered by substring."""
        page_num = clamp_page(page)
        limit_num = clamp_limit(limit)
        where, params = substring_filter("word", q)

        with self.store.connection() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM verbs{where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM verbs{where} ORDER BY word ASC, id ASC LIMIT ? OFFSET ?",
                (*params, limit_num, offset_for(page_num, limit_num)),
            ).fetchall()

        return Page(
            items=[_row_to_verb(r) for r in rows],
            total=total,
            page=page_num,
            limit=limit_num,
        )

    def search_by_word(self, q: str | None = None) -> list[dict[str, str]]:
        """Return {id, word} for every verb whose word contains q."""
        where, params = substring_filter("word", q)
        with self.store.connection() as conn:
            rows = conn.execute(
                f"SELECT id, word FROM verbs{where} ORDER BY word ASC, id ASC", params
            ).fetchall()
        return [{"id": r["id"], "word": r["word"]} for r in rows]

    def find_by_word(self, word: str) -> Verb | None:
        """Get verb by exact (trimmed) word."""
        if not isinstance(word, str) or not word.strip():
            return None
        with self.store.connection() as conn:
            row = conn.execute(
                "SELECT * FROM verbs WHERE word = ?", (word.strip(),)
            ).fetchone()
        return _row_to_verb(row) if row else None

    def get_by_id(self, verb_id: str) -> Verb:
        """Get verb by ID.

        Raises:
            NotFound: If no verb has this id
        """
        with self.store.connection() as conn:
            row = conn.execute("SELECT * FROM verbs WHERE id = ?", (verb_id,)).fetchone()
        if row is None:
            raise NotFound("Verb", verb_id)
        return _row_to_verb(row)

    def update(self, verb_id: str, data: dict[str, Any]) -> Verb:
        """Update word and/or tenses of a verb.

        Supplied tenses replace the stored tenses.

        Raises:
            NotFound: If no verb has this id
            ValidationError: If the new word is blank
            Conflict: If the new word belongs to another verb
        """
        verb = self.get_by_id(verb_id)
        if "word" in data:
            verb.word = normalize_word(data["word"])
        if "tenses" in data:
            verb.tenses = normalize_tenses(data["tenses"])
        verb.updated_at = _now()

        try:
            with self.store.connection() as conn:
                cursor = conn.execute(
                    "UPDATE verbs SET word = ?, tenses = ?, updated_at = ? WHERE id = ?",
                    (
                        verb.word,
                        json.dumps(verb.tenses, ensure_ascii=False),
                        verb.updated_at,
                        verb_id,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise Conflict("word", verb.word) from e

        if cursor.rowcount == 0:
            raise NotFound("Verb", verb_id)

        logger.debug("verbs.updated", verb_id=verb_id)
        return verb

    def delete(self, verb_id: str) -> None:
        """Delete a verb.

        Raises:
            NotFound: If no verb has this id
        """
        with self.store.connection() as conn:
            cursor = conn.execute("DELETE FROM verbs WHERE id = ?", (verb_id,))
        if cursor.rowcount == 0:
            raise NotFound("Verb", verb_id)
        logger.debug("verbs.deleted", verb_id=verb_id)

    def count(self) -> int:
        with self.store.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM verbs").fetchone()[0]
