import os
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from core.auth import require_role
from core.config import logger, MAX_UPLOAD_MB
from core.database import get_db
from models.admin_user import AdminUser, AdminRole
from models.portfolio import PortfolioItem, PortfolioCategory, ASPECT_RATIOS
from utils.catalog import ALL_CATEGORY
from utils.storage import upload_bytes, delete_key, key_from_url, is_allowed_media_type, StorageError
from utils.verifier import encode_verifier

router = APIRouter(prefix="/api/admin/portfolio", tags=["admin-portfolio"])

portfolio_admin = require_role(AdminRole.PORTFOLIO_ADMIN)


class CategoryCreateRequest(BaseModel):
    name: str


class CategoryUpdateRequest(BaseModel):
    name: str
    is_password_protected: bool = False
    password: Optional[str] = None


class CategoryActiveRequest(BaseModel):
    is_active: bool


class CategoryReorderRequest(BaseModel):
    ids: List[str]


class PortfolioItemRequest(BaseModel):
    title: str
    category: str
    image_url: str
    caption: str = ""
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    website_url: Optional[str] = None
    aspect_ratio: str = "square"
    tags: List[str] = []
    is_featured: bool = False
    display_order: int = 0


def _clean_name(name: str) -> str:
    return " ".join((name or "").split())


def _invalid_category_name(db: Session, name: str, exclude_id: Optional[str] = None) -> Optional[str]:
    if not name:
        return "Category name required"
    if name == ALL_CATEGORY:
        return f"'{ALL_CATEGORY}' is reserved"
    q = db.query(PortfolioCategory).filter(PortfolioCategory.name == name)
    if exclude_id:
        q = q.filter(PortfolioCategory.id != exclude_id)
    if q.first():
        return "Category name already exists"
    return None


# --- Categories ---

@router.get("/categories")
async def admin_list_categories(
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rows = db.query(PortfolioCategory).order_by(PortfolioCategory.display_order.asc()).all()
    return {"ok": True, "items": [r.to_dict() for r in rows]}


@router.post("/categories")
async def admin_create_category(
    payload: CategoryCreateRequest,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    name = _clean_name(payload.name)
    err = _invalid_category_name(db, name)
    if err:
        return JSONResponse({"error": err}, status_code=400)
    try:
        max_order = db.query(func.max(PortfolioCategory.display_order)).scalar() or 0
        rec = PortfolioCategory(id=uuid.uuid4().hex, name=name, display_order=max_order + 1, is_active=True)
        db.add(rec)
        db.commit()
        db.refresh(rec)
        logger.info(f"Category created by {admin.email}: {name}")
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_create_category failed: {ex}")
        return JSONResponse({"error": "Failed to create category"}, status_code=500)


@router.put("/categories/{category_id}")
async def admin_update_category(
    category_id: str,
    payload: CategoryUpdateRequest,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(PortfolioCategory).filter(PortfolioCategory.id == category_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    name = _clean_name(payload.name)
    err = _invalid_category_name(db, name, exclude_id=rec.id)
    if err:
        return JSONResponse({"error": err}, status_code=400)

    if payload.is_password_protected:
        if payload.password:
            rec.password_hash = encode_verifier(payload.password)
        elif not rec.password_hash:
            return JSONResponse({"error": "Password required to protect a category"}, status_code=400)
    else:
        rec.password_hash = None
    rec.is_password_protected = payload.is_password_protected

    try:
        old_name = rec.name
        if name != old_name:
            # Entries join on the category name; carry them over to the new one
            moved = (
                db.query(PortfolioItem)
                .filter(PortfolioItem.category == old_name)
                .update({PortfolioItem.category: name}, synchronize_session=False)
            )
            logger.info(f"Category renamed {old_name!r} -> {name!r}, {moved} entries moved")
            rec.name = name
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_update_category failed: {ex}")
        return JSONResponse({"error": "Failed to update category"}, status_code=500)


@router.post("/categories/{category_id}/active")
async def admin_toggle_category(
    category_id: str,
    payload: CategoryActiveRequest,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(PortfolioCategory).filter(PortfolioCategory.id == category_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    try:
        rec.is_active = payload.is_active
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_toggle_category failed: {ex}")
        return JSONResponse({"error": "Failed to update category"}, status_code=500)


@router.delete("/categories/{category_id}")
async def admin_delete_category(
    category_id: str,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(PortfolioCategory).filter(PortfolioCategory.id == category_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    name = rec.name
    try:
        db.delete(rec)
        db.commit()
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_delete_category failed: {ex}")
        return JSONResponse({"error": "Failed to delete category"}, status_code=500)
    logger.info(f"Category deleted by {admin.email}: {name}")
    return {"ok": True}


@router.post("/categories/reorder")
async def admin_reorder_categories(
    payload: CategoryReorderRequest,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    """Assign display_order 1..n following `ids`. Rows are committed one by one."""
    updated = 0
    for index, category_id in enumerate(payload.ids, start=1):
        try:
            n = (
                db.query(PortfolioCategory)
                .filter(PortfolioCategory.id == category_id)
                .update({PortfolioCategory.display_order: index}, synchronize_session=False)
            )
            db.commit()
            updated += n
        except Exception as ex:
            db.rollback()
            logger.exception(f"admin_reorder_categories failed at {category_id}: {ex}")
            return JSONResponse({"error": "Failed to reorder categories", "updated": updated}, status_code=500)
    return {"ok": True, "updated": updated}


# --- Portfolio entries ---

def _apply_item_fields(rec: PortfolioItem, payload: PortfolioItemRequest):
    rec.title = payload.title.strip()
    rec.category = _clean_name(payload.category)
    rec.image_url = payload.image_url.strip()
    rec.caption = payload.caption or ""
    rec.video_url = (payload.video_url or "").strip() or None
    rec.thumbnail_url = (payload.thumbnail_url or "").strip() or None
    rec.website_url = (payload.website_url or "").strip() or None
    rec.aspect_ratio = payload.aspect_ratio
    rec.tags = [t.strip() for t in payload.tags if t and t.strip()]
    rec.is_featured = payload.is_featured
    rec.display_order = payload.display_order


def _invalid_item(payload: PortfolioItemRequest) -> Optional[str]:
    if not payload.title.strip():
        return "Title required"
    if not _clean_name(payload.category) or _clean_name(payload.category) == ALL_CATEGORY:
        return "Valid category required"
    if not payload.image_url.strip():
        return "Media URL required"
    if payload.aspect_ratio not in ASPECT_RATIOS:
        return "Invalid aspect ratio"
    return None


@router.get("/items")
async def admin_list_items(
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rows = db.query(PortfolioItem).order_by(PortfolioItem.display_order.asc(), PortfolioItem.created_at.desc()).all()
    return {"ok": True, "items": [r.to_dict() for r in rows]}


@router.post("/items")
async def admin_create_item(
    payload: PortfolioItemRequest,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    err = _invalid_item(payload)
    if err:
        return JSONResponse({"error": err}, status_code=400)
    try:
        rec = PortfolioItem(id=uuid.uuid4().hex)
        _apply_item_fields(rec, payload)
        db.add(rec)
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_create_item failed: {ex}")
        return JSONResponse({"error": "Failed to create portfolio item"}, status_code=500)


@router.put("/items/{item_id}")
async def admin_update_item(
    item_id: str,
    payload: PortfolioItemRequest,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(PortfolioItem).filter(PortfolioItem.id == item_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    err = _invalid_item(payload)
    if err:
        return JSONResponse({"error": err}, status_code=400)
    try:
        _apply_item_fields(rec, payload)
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_update_item failed: {ex}")
        return JSONResponse({"error": "Failed to update portfolio item"}, status_code=500)


@router.delete("/items/{item_id}")
async def admin_delete_item(
    item_id: str,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(PortfolioItem).filter(PortfolioItem.id == item_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    urls = [rec.image_url, rec.video_url, rec.thumbnail_url]
    try:
        db.delete(rec)
        db.commit()
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_delete_item failed: {ex}")
        return JSONResponse({"error": "Failed to delete portfolio item"}, status_code=500)
    # Best-effort cleanup of media this site uploaded itself
    for url in urls:
        key = key_from_url(url)
        if key:
            delete_key(key)
    return {"ok": True}


@router.post("/upload")
async def admin_upload_media(
    file: UploadFile = File(...),
    admin: AdminUser = Depends(portfolio_admin),
):
    """Upload an image or video file and return its public URL"""
    if not is_allowed_media_type(file.content_type):
        return JSONResponse({"error": "File must be an image or video"}, status_code=400)
    content = await file.read()
    if not content:
        return JSONResponse({"error": "Empty file"}, status_code=400)
    if len(content) > MAX_UPLOAD_MB * 1024 * 1024:
        return JSONResponse({"error": f"File exceeds {MAX_UPLOAD_MB} MB"}, status_code=413)

    ext = os.path.splitext(file.filename or "")[1].lower() or ".bin"
    key = f"portfolio/{uuid.uuid4().hex}{ext}"
    try:
        url = upload_bytes(key, content, content_type=file.content_type)
    except StorageError:
        return JSONResponse({"error": "Upload failed"}, status_code=502)
    return {"ok": True, "key": key, "url": url}
