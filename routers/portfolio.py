from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import logger
from core.database import get_db
from models.portfolio import PortfolioCategory
from utils.catalog import ALL_CATEGORY, CategoryDirectory, FeedFetchError
from utils.feed import fetch_page, PAGE_SIZE
from utils.verifier import verifier_matches

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


class VerifyPasswordRequest(BaseModel):
    category: str
    password: str


def _load_categories(db: Session):
    return db.query(PortfolioCategory).order_by(PortfolioCategory.display_order.asc()).all()


@router.get("/categories")
async def list_categories(db: Session = Depends(get_db)):
    """Active categories for the filter bar, plus the synthetic "All" option"""
    try:
        all_rows = _load_categories(db)
        rows = [r for r in all_rows if r.is_active]
    except SQLAlchemyError as ex:
        logger.error(f"Error listing portfolio categories: {ex}")
        return JSONResponse({"error": "categories_unavailable"}, status_code=502)

    directory = CategoryDirectory.from_rows(rows)
    return {
        "categories": [
            {
                "name": r.name,
                "displayOrder": r.display_order,
                "isActive": bool(r.is_active),
                "isPasswordProtected": bool(r.is_password_protected),
            }
            for r in rows
        ],
        "filters": directory.list_filter_options(),
        # Inactive categories are not listed but must still be gated by name
        "protected": [r.name for r in all_rows if r.is_password_protected],
    }


@router.get("/feed")
async def get_feed(
    category: str = Query(ALL_CATEGORY),
    page: int = Query(0),
    db: Session = Depends(get_db),
):
    """One page of the portfolio feed for a category"""
    if page < 0:
        return JSONResponse({"error": "invalid_page"}, status_code=400)
    try:
        result = fetch_page(db, category, page, PAGE_SIZE)
    except FeedFetchError:
        return JSONResponse({"error": "feed_unavailable"}, status_code=502)

    return {
        "items": result.items,
        "hasMore": result.has_more,
        "page": page,
        "pageSize": PAGE_SIZE,
        "category": category,
    }


@router.post("/categories/verify")
async def verify_category_password(payload: VerifyPasswordRequest, db: Session = Depends(get_db)):
    """Check a gated category's password. Lookup failures deny access."""
    name = (payload.category or "").strip()
    try:
        rec = db.query(PortfolioCategory).filter(PortfolioCategory.name == name).first()
    except SQLAlchemyError as ex:
        logger.warning(f"Password lookup failed for category {name!r}: {ex}")
        return {"ok": False}

    if not rec or not rec.is_password_protected:
        return {"ok": False}
    ok = verifier_matches(rec.password_hash, payload.password)
    if not ok:
        logger.info(f"Rejected password for category {name!r}")
    return {"ok": ok}
