"""
Paginated portfolio feed queries.

Pages are offset-based slices ordered featured-first, then newest-first, with
the row id as a deterministic tie-break so a row never moves between pages of
the same query.
"""
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import FEED_PAGE_SIZE, logger
from models.portfolio import PortfolioItem, PortfolioCategory
from utils.catalog import ALL_CATEGORY, FeedFetchError, FeedPage
from utils.media import classify_media

PAGE_SIZE = FEED_PAGE_SIZE


def public_category_names(db: Session) -> List[str]:
    rows = (
        db.query(PortfolioCategory.name)
        .filter(
            PortfolioCategory.is_active.is_(True),
            or_(
                PortfolioCategory.is_password_protected.is_(None),
                PortfolioCategory.is_password_protected.is_(False),
            ),
        )
        .all()
    )
    return [r[0] for r in rows]


def serialize_entry(item: PortfolioItem) -> dict:
    data = item.to_dict()
    data["media"] = classify_media(item.image_url).to_dict()
    if item.video_url:
        data["videoMedia"] = classify_media(item.video_url).to_dict()
    return data


def fetch_page(db: Session, category: str, page_index: int, page_size: int = PAGE_SIZE) -> FeedPage:
    if page_index < 0:
        raise ValueError("page_index must be >= 0")
    if page_size <= 0:
        raise ValueError("page_size must be > 0")

    try:
        q = db.query(PortfolioItem)
        if category == ALL_CATEGORY:
            names = public_category_names(db)
            if not names:
                return FeedPage(items=[], has_more=False)
            q = q.filter(PortfolioItem.category.in_(names))
        else:
            # Access to a gated category was granted upstream; filter by name only
            q = q.filter(PortfolioItem.category == category)

        rows = (
            q.order_by(
                PortfolioItem.is_featured.desc(),
                PortfolioItem.created_at.desc(),
                PortfolioItem.id.asc(),
            )
            .offset(page_index * page_size)
            .limit(page_size)
            .all()
        )
    except SQLAlchemyError as ex:
        logger.warning(f"feed fetch failed for category={category!r} page={page_index}: {ex}")
        raise FeedFetchError(str(ex)) from ex

    return FeedPage.from_items([serialize_entry(r) for r in rows], page_size)
