"""Pydantic schemas for Web API.

Request and response models for verbs and translations. Response
timestamps are serialized as createdAt/updatedAt.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from verbario import __version__


# =============================================================================
# VERB SCHEMAS
# =============================================================================


class ConjugationSet(BaseModel):
    """The six grammatical-person forms for one tense."""

    yo: str | None = None
    tu: str | None = None
    el: str | None = None
    nosotros: str | None = None
    vosotros: str | None = None
    ellos: str | None = None


class VerbTenses(BaseModel):
    """Conjugations keyed by tense name."""

    present: ConjugationSet | None = None
    preterite: ConjugationSet | None = None
    imperfect: ConjugationSet | None = None
    future: ConjugationSet | None = None
    conditional: ConjugationSet | None = None
    presentSubjunctive: ConjugationSet | None = None
    imperfectSubjunctive: ConjugationSet | None = None
    presentPerfect: ConjugationSet | None = None
    pastPerfect: ConjugationSet | None = None
    futurePerfect: ConjugationSet | None = None
    conditionalPerfect: ConjugationSet | None = None


class VerbCreate(BaseModel):
    """Request body for creating a verb."""

    word: str
    tenses: VerbTenses | None = None


class VerbUpdate(BaseModel):
    """Request body for updating a verb. Omitted fields are left unchanged."""

    word: str | None = None
    tenses: VerbTenses | None = None


class VerbResponse(BaseModel):
    """Response for a verb."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    word: str
    tenses: dict[str, dict[str, str]]
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class VerbSummary(BaseModel):
    """Search hit: id and word only."""

    id: str
    word: str


class VerbListResponse(BaseModel):
    """One page of verbs."""

    items: list[VerbResponse]
    total: int
    page: int
    limit: int


# =============================================================================
# TRANSLATION SCHEMAS
# =============================================================================


class TranslationPair(BaseModel):
    """English and Hungarian renderings of a word."""

    english: str
    hungarian: str


class TranslationWrite(BaseModel):
    """Request body for creating or updating a translation.

    Fields are accepted as sent and checked by the repository after the
    password, so a wrong password is reported before any malformed field.
    """

    password: Any = None
    word: Any = None
    translations: Any = None
    memorized: Any = None

    def payload(self) -> dict:
        """Supplied fields without the password."""
        return self.model_dump(exclude_unset=True, exclude={"password"})


class TranslationDelete(BaseModel):
    """Request body for deleting a translation."""

    password: Any = None


class TranslationResponse(BaseModel):
    """Response for a translation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    word: str
    translations: TranslationPair
    memorized: bool = False
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class TranslationListResponse(BaseModel):
    """One page of translations."""

    items: list[TranslationResponse]
    total: int
    page: int
    limit: int


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = __version__
