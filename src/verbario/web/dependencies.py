"""Request-scoped access to the repositories held by the app."""

from fastapi import Request

from verbario.db.translations_repository import TranslationRepository
from verbario.db.verbs_repository import VerbRepository


def get_verb_repository(request: Request) -> VerbRepository:
    return VerbRepository(request.app.state.store)


def get_translation_repository(request: Request) -> TranslationRepository:
    return TranslationRepository(request.app.state.store, request.app.state.guard)
