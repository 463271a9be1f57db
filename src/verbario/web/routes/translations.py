"""Translation endpoints.

Writes carry the shared secret as a 'password' field in the body.
"""

from fastapi import APIRouter, Body, Depends, Path, status

from verbario.db.translations_repository import TranslationRepository
from verbario.web.dependencies import get_translation_repository
from verbario.web.schemas import (
    TranslationDelete,
    TranslationListResponse,
    TranslationResponse,
    TranslationWrite,
)

router = APIRouter(prefix="/api/translations", tags=["translations"])

RANDOM_SAMPLE_MAX = 100


@router.post("", response_model=TranslationResponse, status_code=status.HTTP_201_CREATED)
def create_translation(
    body: TranslationWrite,
    repo: TranslationRepository = Depends(get_translation_repository),
) -> TranslationResponse:
    """Create a translation pair."""
    translation = repo.create(body.payload(), body.password)
    return TranslationResponse(**translation.to_dict())


@router.get("", response_model=TranslationListResponse)
def list_translations(
    page: str | None = None,
    limit: str | None = None,
    q: str | None = None,
    repo: TranslationRepository = Depends(get_translation_repository),
) -> TranslationListResponse:
    """List translations sorted by word, with pagination and substring filter."""
    result = repo.list(q=q, page=page, limit=limit)
    return TranslationListResponse(
        items=[TranslationResponse(**t.to_dict()) for t in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


@router.get("/random/{number}", response_model=list[TranslationResponse])
def random_translations(
    number: int = Path(..., ge=0),
    repo: TranslationRepository = Depends(get_translation_repository),
) -> list[TranslationResponse]:
    """Sample unmemorized translations at random (at most 100)."""
    sample = repo.random_sample(min(number, RANDOM_SAMPLE_MAX))
    return [TranslationResponse(**t.to_dict()) for t in sample]


@router.put("/{translation_id}", response_model=TranslationResponse)
def update_translation(
    translation_id: str,
    body: TranslationWrite,
    repo: TranslationRepository = Depends(get_translation_repository),
) -> TranslationResponse:
    """Update a translation."""
    translation = repo.update(translation_id, body.payload(), body.password)
    return TranslationResponse(**translation.to_dict())


@router.delete("/{translation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_translation(
    translation_id: str,
    body: TranslationDelete | None = Body(default=None),
    repo: TranslationRepository = Depends(get_translation_repository),
) -> None:
    """Delete a translation."""
    repo.delete(translation_id, body.password if body else None)
