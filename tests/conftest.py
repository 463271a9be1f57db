"""Shared fixtures.

Every test works against a temporary SQLite store and temporary data
directories; nothing touches ./data.
"""

from pathlib import Path

import pytest

from verbario.config.app_config import AppConfig, build_config, clear_config_cache
from verbario.core.authorization import SecretGuard
from verbario.db.database import RecordStore
from verbario.db.translations_repository import TranslationRepository
from verbario.db.verbs_repository import VerbRepository

ADMIN_PASSWORD = "secret"


def make_env(tmp_path: Path, **overrides: str) -> dict[str, str]:
    """Environment with every required variable set."""
    env = {
        "STORE_URI": f"sqlite:///{tmp_path / 'verbario.db'}",
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        "APP_URL": "http://localhost:5173",
    }
    env.update(overrides)
    return env


@pytest.fixture(autouse=True)
def _fresh_config():
    """Config is cached per process; reset it around every test."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def env(tmp_path) -> dict[str, str]:
    return make_env(tmp_path)


@pytest.fixture
def app_config(env) -> AppConfig:
    return build_config(env)


@pytest.fixture
def store(app_config):
    """Connected store, closed after the test."""
    with RecordStore(app_config.store_path) as store:
        yield store


@pytest.fixture
def verb_repo(store) -> VerbRepository:
    return VerbRepository(store)


@pytest.fixture
def translation_repo(store) -> TranslationRepository:
    return TranslationRepository(store, SecretGuard(ADMIN_PASSWORD))


@pytest.fixture
def hablar() -> dict:
    """A verb record in source-file shape."""
    return {
        "word": "hablar",
        "tenses": {
            "present": {
                "yo": "hablo",
                "tu": "hablas",
                "el": "habla",
                "nosotros": "hablamos",
                "vosotros": "habláis",
                "ellos": "hablan",
            },
            "preterite": {
                "yo": "hablé",
                "tu": "hablaste",
                "el": "habló",
                "nosotros": "hablamos",
                "vosotros": "hablasteis",
                "ellos": "hablaron",
            },
        },
    }
