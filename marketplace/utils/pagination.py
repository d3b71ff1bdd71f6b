from sqlalchemy import func
from sqlmodel import Session, select

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def page_bounds(page: int, limit: int):
    """Clamp page/limit from the query string to usable values."""
    page = max(page, 1)
    if limit < 1:
        limit = DEFAULT_PAGE_SIZE
    return page, min(limit, MAX_PAGE_SIZE)


def paginate(session: Session, query, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> dict:
    page, limit = page_bounds(page, limit)

    total = session.exec(select(func.count()).select_from(query.subquery())).one()
    rows = session.exec(query.offset((page - 1) * limit).limit(limit)).all()

    total_pages = (total + limit - 1) // limit
    return {
        "total_items": total,
        "total_pages": total_pages,
        "current_page": page,
        "limit": limit,
        "has_next": page < total_pages,
        "results": rows,
    }
