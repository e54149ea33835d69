from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.auth import check_password, issue_admin_token, get_current_admin, require_role, resolve_role
from core.config import logger
from core.database import get_db
from models.admin_user import AdminUser, AdminRole

router = APIRouter(prefix="/api/admin", tags=["admin"])  # admin panel sign-in


@router.post("/login")
async def admin_login(
    email: str = Body(..., embed=True),
    password: str = Body(..., embed=True),
    db: Session = Depends(get_db),
):
    em = (email or "").strip().lower()
    pw = password or ""
    if not em or not pw.strip():
        return JSONResponse({"error": "email and password required"}, status_code=400)
    try:
        rec = db.query(AdminUser).filter(AdminUser.email == em, AdminUser.active == True).first()  # noqa: E712
        # Same answer for unknown email and wrong password
        if not rec or not check_password(pw, rec.password_hash):
            return JSONResponse({"error": "invalid_credentials"}, status_code=401)

        rec.last_login_at = datetime.now(timezone.utc)
        db.commit()

        token = issue_admin_token(rec)
        logger.info(f"Admin signed in: {rec.email}")
        return {
            "ok": True,
            "token": token,
            "admin": {
                "id": rec.id,
                "email": rec.email,
                "full_name": rec.full_name,
                "role": resolve_role(rec).value,
            },
        }
    except Exception as ex:
        db.rollback()
        logger.exception(f"admin_login failed: {ex}")
        return JSONResponse({"error": "login_failed"}, status_code=500)


@router.get("/me")
async def admin_me(admin: AdminUser = Depends(get_current_admin)):
    data = admin.to_dict()
    data["role"] = resolve_role(admin).value
    return data


@router.get("/users")
async def list_admin_users(
    admin: AdminUser = Depends(require_role(AdminRole.SUPER_ADMIN)),
    db: Session = Depends(get_db),
):
    rows = db.query(AdminUser).order_by(AdminUser.created_at.asc()).all()
    return {"ok": True, "items": [r.to_dict() for r in rows]}
