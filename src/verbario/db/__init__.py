"""Database module for SQLite persistence.

Provides:
- RecordStore handle with explicit connect/close lifecycle
- Repository classes for the verbs and translations tables
"""

from verbario.db.database import IndexInfo, RecordStore
from verbario.db.translations_repository import Translation, TranslationRepository
from verbario.db.verbs_repository import Verb, VerbRepository

__all__ = [
    "IndexInfo",
    "RecordStore",
    "Translation",
    "TranslationRepository",
    "Verb",
    "VerbRepository",
]
