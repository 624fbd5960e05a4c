import math
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.models.university import University

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
MAX_PAGE_NUMBER = 10_000


@dataclass
class UniversityFilters:
    search: str | None = None
    country: str | None = None
    state: str | None = None
    min_ranking: int | None = None
    max_ranking: int | None = None
    max_acceptance_rate: float | None = None
    application_system: str | None = None


@dataclass
class UniversityPage:
    universities: list[University]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def search_universities(
    db: Session,
    filters: UniversityFilters,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> UniversityPage:
    page = min(max(page, 1), MAX_PAGE_NUMBER)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    query = db.query(University)
    if filters.search:
        query = query.filter(func.lower(University.name).contains(filters.search.strip().lower(), autoescape=True))
    if filters.country:
        query = query.filter(University.country == filters.country)
    if filters.state:
        query = query.filter(University.state == filters.state)
    if filters.min_ranking is not None:
        query = query.filter(University.us_news_ranking >= filters.min_ranking)
    if filters.max_ranking is not None:
        query = query.filter(University.us_news_ranking <= filters.max_ranking)
    if filters.max_acceptance_rate is not None:
        query = query.filter(University.acceptance_rate <= filters.max_acceptance_rate)
    if filters.application_system:
        query = query.filter(University.application_system == filters.application_system)

    total = query.count()
    universities = (
        query.order_by(University.us_news_ranking.asc(), University.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return UniversityPage(universities=universities, page=page, limit=limit, total=total)
