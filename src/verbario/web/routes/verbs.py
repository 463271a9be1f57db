"""Verb endpoints.

Handlers are plain functions: FastAPI runs them in its thread pool, so
store calls do not block the event loop.
"""

from fastapi import APIRouter, Depends, status

from verbario.db.verbs_repository import VerbRepository
from verbario.web.dependencies import get_verb_repository
from verbario.web.schemas import (
    VerbCreate,
    VerbListResponse,
    VerbResponse,
    VerbSummary,
    VerbUpdate,
)

router = APIRouter(prefix="/api/verbs", tags=["verbs"])


@router.post("", response_model=VerbResponse, status_code=status.HTTP_201_CREATED)
def create_verb(
    verb_data: VerbCreate,
    repo: VerbRepository = Depends(get_verb_repository),
) -> VerbResponse:
    """Create a new verb."""
    verb = repo.create(verb_data.model_dump(exclude_none=True))
    return VerbResponse(**verb.to_dict())


@router.get("", response_model=VerbListResponse)
def list_verbs(
    page: str | None = None,
    limit: str | None = None,
    q: str | None = None,
    repo: VerbRepository = Depends(get_verb_repository),
) -> VerbListResponse:
    """List verbs sorted by word, with pagination and substring filter."""
    result = repo.list(q=q, page=page, limit=limit)
    return VerbListResponse(
        items=[VerbResponse(**v.to_dict()) for v in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


@router.get("/search", response_model=list[VerbSummary])
def search_verbs(
    q: str | None = None,
    repo: VerbRepository = Depends(get_verb_repository),
) -> list[VerbSummary]:
    """Search verbs by word substring, returning ids and words only."""
    return [VerbSummary(**hit) for hit in repo.search_by_word(q)]


@router.get("/{verb_id}", response_model=VerbResponse)
def get_verb(
    verb_id: str,
    repo: VerbRepository = Depends(get_verb_repository),
) -> VerbResponse:
    """Get a specific verb by ID."""
    return VerbResponse(**repo.get_by_id(verb_id).to_dict())


@router.put("/{verb_id}", response_model=VerbResponse)
def update_verb(
    verb_id: str,
    verb_data: VerbUpdate,
    repo: VerbRepository = Depends(get_verb_repository),
) -> VerbResponse:
    """Update a verb."""
    verb = repo.update(verb_id, verb_data.model_dump(exclude_unset=True))
    return VerbResponse(**verb.to_dict())


@router.delete("/{verb_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_verb(
    verb_id: str,
    repo: VerbRepository = Depends(get_verb_repository),
) -> None:
    """Delete a verb by ID."""
    repo.delete(verb_id)
