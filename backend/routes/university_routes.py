from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.database import MAX_ROW_ID, get_db
from backend.routes.schemas import UniversityResponse
from backend.services.universities import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_NUMBER,
    MAX_PAGE_SIZE,
    UniversityFilters,
    search_universities,
)

router = APIRouter(tags=['universities'])


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UniversityListResponse(BaseModel):
    universities: list[UniversityResponse]
    pagination: PaginationResponse


@router.get('', response_model=UniversityListResponse)
def list_universities(
    search: str | None = Query(default=None),
    country: str | None = Query(default=None),
    state: str | None = Query(default=None),
    min_ranking: int | None = Query(default=None, ge=1, le=MAX_ROW_ID),
    max_ranking: int | None = Query(default=None, ge=1, le=MAX_ROW_ID),
    max_acceptance_rate: float | None = Query(default=None, ge=0, le=100),
    application_system: str | None = Query(default=None),
    page: int = Query(default=1, ge=1, le=MAX_PAGE_NUMBER),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    filters = UniversityFilters(
        search=search,
        country=country,
        state=state,
        min_ranking=min_ranking,
        max_ranking=max_ranking,
        max_acceptance_rate=max_acceptance_rate,
        application_system=application_system,
    )
    result = search_universities(db, filters, page=page, limit=limit)
    return UniversityListResponse(
        universities=[UniversityResponse.model_validate(university) for university in result.universities],
        pagination=PaginationResponse(page=result.page, limit=result.limit, total=result.total, pages=result.pages),
    )
