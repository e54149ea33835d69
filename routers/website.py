"""
Site settings, contact form, team and pricing
Public reads of the site configuration, team members and pricing packages,
public inquiry submission, and the admin endpoints that manage all of them
"""
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from core.auth import require_role
from core.config import logger, SITE_NAME
from core.database import get_db
from models.admin_user import AdminUser, AdminRole
from models.website import WebsiteSetting, ContactInquiry, TeamMember, PricingPackage, INQUIRY_STATUSES

router = APIRouter(tags=["website"])

SITE_CONFIG_KEY = "site_config"

super_admin = require_role(AdminRole.SUPER_ADMIN)
portfolio_admin = require_role(AdminRole.PORTFOLIO_ADMIN)


class InquiryPayload(BaseModel):
    name: str
    email: EmailStr
    message: str
    project_type: Optional[str] = None


class InquiryUpdatePayload(BaseModel):
    status: str
    admin_notes: Optional[str] = None


def default_site_config() -> Dict[str, Any]:
    return {"name": SITE_NAME, "contact": {}}


def get_site_config(db: Session) -> Dict[str, Any]:
    rec = db.query(WebsiteSetting).filter(WebsiteSetting.key == SITE_CONFIG_KEY).first()
    if rec and isinstance(rec.value, dict):
        return rec.value
    return default_site_config()


@router.get("/api/site/settings")
async def public_site_settings(db: Session = Depends(get_db)):
    return {"key": SITE_CONFIG_KEY, "value": get_site_config(db)}


@router.put("/api/admin/settings")
async def update_site_settings(
    value: Dict[str, Any] = Body(..., embed=True),
    admin: AdminUser = Depends(super_admin),
    db: Session = Depends(get_db),
):
    try:
        rec = db.query(WebsiteSetting).filter(WebsiteSetting.key == SITE_CONFIG_KEY).first()
        if rec:
            rec.value = value
        else:
            rec = WebsiteSetting(key=SITE_CONFIG_KEY, value=value)
            db.add(rec)
        db.commit()
        logger.info(f"Site settings updated by {admin.email}")
        return {"ok": True, "value": value}
    except Exception as ex:
        db.rollback()
        logger.exception(f"update_site_settings failed: {ex}")
        return JSONResponse({"error": "Failed to save settings"}, status_code=500)


@router.post("/api/contact")
async def submit_inquiry(payload: InquiryPayload, db: Session = Depends(get_db)):
    name = (payload.name or "").strip()
    message = (payload.message or "").strip()
    if not name or not message:
        return JSONResponse({"error": "Please fill in all required fields."}, status_code=400)
    try:
        rec = ContactInquiry(
            id=uuid.uuid4().hex,
            name=name,
            email=str(payload.email).strip().lower(),
            message=message,
            project_type=(payload.project_type or "").strip() or None,
            status="new",
        )
        db.add(rec)
        db.commit()
        return {"ok": True, "id": rec.id}
    except Exception as ex:
        db.rollback()
        logger.exception(f"submit_inquiry failed: {ex}")
        return JSONResponse({"error": "Failed to submit inquiry"}, status_code=500)


@router.get("/api/admin/contact")
async def list_inquiries(
    status: Optional[str] = None,
    limit: int = 200,
    admin: AdminUser = Depends(super_admin),
    db: Session = Depends(get_db),
):
    q = db.query(ContactInquiry)
    if status:
        q = q.filter(ContactInquiry.status == status)
    rows = q.order_by(ContactInquiry.created_at.desc()).limit(max(1, min(int(limit), 1000))).all()
    return {"ok": True, "items": [r.to_dict() for r in rows]}


@router.patch("/api/admin/contact/{inquiry_id}")
async def update_inquiry(
    inquiry_id: str,
    payload: InquiryUpdatePayload,
    admin: AdminUser = Depends(super_admin),
    db: Session = Depends(get_db),
):
    if payload.status not in INQUIRY_STATUSES:
        return JSONResponse({"error": "Invalid status"}, status_code=400)
    rec = db.query(ContactInquiry).filter(ContactInquiry.id == inquiry_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    try:
        rec.status = payload.status
        rec.admin_notes = payload.admin_notes
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"update_inquiry failed: {ex}")
        return JSONResponse({"error": "Failed to update inquiry"}, status_code=500)


# --- Team members ---

class TeamMemberPayload(BaseModel):
    name: str
    role: str
    image_url: str
    experience: str = ""
    bio: Optional[str] = None
    display_order: int = 0
    is_active: bool = True


def _apply_team_fields(rec: TeamMember, payload: TeamMemberPayload):
    rec.name = payload.name.strip()
    rec.role = payload.role.strip()
    rec.image_url = payload.image_url.strip()
    rec.experience = (payload.experience or "").strip()
    rec.bio = (payload.bio or "").strip() or None
    rec.display_order = payload.display_order
    rec.is_active = payload.is_active


@router.get("/api/team")
async def public_team(db: Session = Depends(get_db)):
    rows = (
        db.query(TeamMember)
        .filter(TeamMember.is_active.is_(True))
        .order_by(TeamMember.display_order.asc())
        .all()
    )
    return {"items": [r.to_dict() for r in rows]}


@router.get("/api/admin/team")
async def admin_list_team(admin: AdminUser = Depends(portfolio_admin), db: Session = Depends(get_db)):
    rows = db.query(TeamMember).order_by(TeamMember.display_order.asc()).all()
    return {"ok": True, "items": [r.to_dict() for r in rows]}


@router.post("/api/admin/team")
async def admin_create_team_member(
    payload: TeamMemberPayload,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    if not payload.name.strip() or not payload.role.strip() or not payload.image_url.strip():
        return JSONResponse({"error": "Name, role and image are required"}, status_code=400)
    try:
        rec = TeamMember(id=uuid.uuid4().hex)
        _apply_team_fields(rec, payload)
        db.add(rec)
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_create_team_member failed: {ex}")
        return JSONResponse({"error": "Failed to create team member"}, status_code=500)


@router.put("/api/admin/team/{member_id}")
async def admin_update_team_member(
    member_id: str,
    payload: TeamMemberPayload,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(TeamMember).filter(TeamMember.id == member_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    if not payload.name.strip() or not payload.role.strip() or not payload.image_url.strip():
        return JSONResponse({"error": "Name, role and image are required"}, status_code=400)
    try:
        _apply_team_fields(rec, payload)
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_update_team_member failed: {ex}")
        return JSONResponse({"error": "Failed to update team member"}, status_code=500)


@router.delete("/api/admin/team/{member_id}")
async def admin_delete_team_member(
    member_id: str,
    admin: AdminUser = Depends(portfolio_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(TeamMember).filter(TeamMember.id == member_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    try:
        db.delete(rec)
        db.commit()
        return {"ok": True}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_delete_team_member failed: {ex}")
        return JSONResponse({"error": "Failed to delete team member"}, status_code=500)


# --- Pricing packages ---

class PricingPackagePayload(BaseModel):
    name: str
    price: str
    features: List[str] = []
    is_popular: bool = False
    is_active: bool = True
    is_visible: bool = True
    display_order: int = 0


def _apply_pricing_fields(rec: PricingPackage, payload: PricingPackagePayload):
    rec.name = payload.name.strip()
    rec.price = payload.price.strip()
    rec.features = [f.strip() for f in payload.features if f and f.strip()]
    rec.is_popular = payload.is_popular
    rec.is_active = payload.is_active
    rec.is_visible = payload.is_visible
    rec.display_order = payload.display_order


@router.get("/api/pricing")
async def public_pricing(db: Session = Depends(get_db)):
    rows = (
        db.query(PricingPackage)
        .filter(PricingPackage.is_active.is_(True), PricingPackage.is_visible.is_(True))
        .order_by(PricingPackage.display_order.asc())
        .all()
    )
    return {"items": [r.to_dict() for r in rows]}


@router.get("/api/admin/pricing")
async def admin_list_pricing(admin: AdminUser = Depends(super_admin), db: Session = Depends(get_db)):
    rows = db.query(PricingPackage).order_by(PricingPackage.display_order.asc()).all()
    return {"ok": True, "items": [r.to_dict() for r in rows]}


@router.post("/api/admin/pricing")
async def admin_create_pricing_package(
    payload: PricingPackagePayload,
    admin: AdminUser = Depends(super_admin),
    db: Session = Depends(get_db),
):
    if not payload.name.strip() or not payload.price.strip():
        return JSONResponse({"error": "Name and price are required"}, status_code=400)
    try:
        rec = PricingPackage(id=uuid.uuid4().hex)
        _apply_pricing_fields(rec, payload)
        db.add(rec)
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_create_pricing_package failed: {ex}")
        return JSONResponse({"error": "Failed to create pricing package"}, status_code=500)


@router.put("/api/admin/pricing/{package_id}")
async def admin_update_pricing_package(
    package_id: str,
    payload: PricingPackagePayload,
    admin: AdminUser = Depends(super_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(PricingPackage).filter(PricingPackage.id == package_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    if not payload.name.strip() or not payload.price.strip():
        return JSONResponse({"error": "Name and price are required"}, status_code=400)
    try:
        _apply_pricing_fields(rec, payload)
        db.commit()
        db.refresh(rec)
        return {"ok": True, "item": rec.to_dict()}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_update_pricing_package failed: {ex}")
        return JSONResponse({"error": "Failed to update pricing package"}, status_code=500)


@router.delete("/api/admin/pricing/{package_id}")
async def admin_delete_pricing_package(
    package_id: str,
    admin: AdminUser = Depends(super_admin),
    db: Session = Depends(get_db),
):
    rec = db.query(PricingPackage).filter(PricingPackage.id == package_id).first()
    if not rec:
        return JSONResponse({"error": "not_found"}, status_code=404)
    try:
        db.delete(rec)
        db.commit()
        return {"ok": True}
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_delete_pricing_package failed: {ex}")
        return JSONResponse({"error": "Failed to delete pricing package"}, status_code=500)
