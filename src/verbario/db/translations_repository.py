"""Repository for the translations table.

English–Hungarian translation pairs. Every mutation is authorized by a
SecretGuard before the store is touched.
"""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from verbario.core.authorization import SecretGuard
from verbario.core.errors import NotFound, ValidationError
from verbario.core.pagination import Page, clamp_limit, clamp_page, offset_for
from verbario.db.database import RecordStore, substring_filter

logger = structlog.get_logger(__name__)


@dataclass
class Translation:
    """Translation record from database."""

    id: str
    word: str
    english: str
    hungarian: str
    memorized: bool = False
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "word": self.word,
            "translations": {"english": self.english, "hungarian": self.hungarian},
            "memorized": self.memorized,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _required_text(value: Any, name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")
    return value


def _flag(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError("memorized must be a boolean")
    return value


def _row_to_translation(row: sqlite3.Row) -> Translation:
    return Translation(
        id=row["id"],
        word=row["word"],
        english=row["english"],
        hungarian=row["hungarian"],
        memorized=bool(row["memorized"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TranslationRepository:
    """CRUD and sampling operations for the translations table."""

    def __init__(self, store: RecordStore, guard: SecretGuard):
        self.store = store
        self.guard = guard

    def create(self, data: dict[str, Any], supplied_secret: object) -> Translation:
        """Insert a new translation pair.

        Raises:
            Forbidden: If supplied_secret does not match
            ValidationError: If a field is missing or has the wrong type
        """
        self.guard.authorize(supplied_secret, action="translations.create")

        pair = data.get("translations")
        if not isinstance(pair, dict):
            raise ValidationError("translations is required")

        now = _now()
        translation = Translation(
            id=uuid.uuid4().hex,
            word=_required_text(data.get("word"), "word"),
            english=_required_text(pair.get("english"), "translations.english"),
            hungarian=_required_text(pair.get("hungarian"), "translations.hungarian"),
            memorized=_flag(data.get("memorized"), False),
            created_at=now,
            updated_at=now,
        )
        with self.store.connection() as conn:
            conn.execute(
                """
                INSERT INTO translations (
                    id, word, english, hungarian, memorized, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    translation.id,
                    translation.word,
                    translation.english,
                    translation.hungarian,
                    int(translation.memorized),
                    translation.created_at,
                    translation.updated_at,
                ),
            )

        logger.debug("translations.created", translation_id=translation.id)
        return translation

    def list(
        self, q: str | None = None, page: Any = None, limit: Any = None
    ) -> Page[Translation]:
        """List translations sorted by word, optionally filtered by substring."""
        page_num = clamp_page(page)
        limit_num = clamp_limit(limit)
        where, params = substring_filter("word", q)

        with self.store.connection() as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM translations{where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM translations{where} "
                "ORDER BY word ASC, id ASC LIMIT ? OFFSET ?",
                (*params, limit_num, offset_for(page_num, limit_num)),
            ).fetchall()

        return Page(
            items=[_row_to_translation(r) for r in rows],
            total=total,
            page=page_num,
            limit=limit_num,
        )

    def random_sample(self, count: int) -> list[Translation]:
        """Draw up to count unmemorized translations uniformly at random.

        Returns every unmemorized translation when fewer than count exist.

        Raises:
            ValidationError: If count is not a non-negative integer
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValidationError("count must be a non-negative integer")
        if count == 0:
            return []

        with self.store.connection() as conn:
            rows = conn.execute(
                "SELECT * FROM translations WHERE memorized = 0 ORDER BY RANDOM() LIMIT ?",
                (count,),
            ).fetchall()
        return [_row_to_translation(r) for r in rows]

    def get_by_id(self, translation_id: str) -> Translation:
        """Get translation by ID.

        Raises:
            NotFound: If no translation has this id
        """
        with self.store.connection() as conn:
            row = conn.execute(
                "SELECT * FROM translations WHERE id = ?", (translation_id,)
            ).fetchone()
        if row is None:
            raise NotFound("Translation", translation_id)
        return _row_to_translation(row)

    def update(
        self, translation_id: str, data: dict[str, Any], supplied_secret: object
    ) -> Translation:
        """Update fields of a translation; translations are merged per key.

        Raises:
            Forbidden: If supplied_secret does not match (checked first)
            NotFound: If no translation has this id
            ValidationError: If a supplied field is blank or has the wrong type
        """
        self.guard.authorize(supplied_secret, action="translations.update")

        translation = self.get_by_id(translation_id)
        if "word" in data:
            translation.word = _required_text(data["word"], "word")
        pair = data.get("translations")
        if pair is not None:
            if not isinstance(pair, dict):
                raise ValidationError("translations must be an object")
            if "english" in pair:
                translation.english = _required_text(pair["english"], "translations.english")
            if "hungarian" in pair:
                translation.hungarian = _required_text(
                    pair["hungarian"], "translations.hungarian"
                )
        translation.memorized = _flag(data.get("memorized"), translation.memorized)
        translation.updated_at = _now()

        with self.store.connection() as conn:
            cursor = conn.execute(
                """
                UPDATE translations
                SET word = ?, english = ?, hungarian = ?, memorized = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    translation.word,
                    translation.english,
                    translation.hungarian,
                    int(translation.memorized),
                    translation.updated_at,
                    translation_id,
                ),
            )
        if cursor.rowcount == 0:
            raise NotFound("Translation", translation_id)

        logger.debug("translations.updated", translation_id=translation_id)
        return translation

    def delete(self, translation_id: str, supplied_secret: object) -> None:
        """Delete a translation.

        Raises:
            Forbidden: If supplied_secret does not match (checked first)
            NotFound: If no translation has this id
        """
        self.guard.authorize(supplied_secret, action="translations.delete")

        with self.store.connection() as conn:
            cursor = conn.execute("DELETE FROM translations WHERE id = ?", (translation_id,))
        if cursor.rowcount == 0:
            raise NotFound("Translation", translation_id)
        logger.debug("translations.deleted", translation_id=translation_id)
