from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from core.config import logger, ADMIN_JWT_SECRET, ADMIN_JWT_ISSUER, ADMIN_JWT_TTL_HOURS
from core.database import get_db
from models.admin_user import AdminUser, AdminRole


def hash_password(raw_pw: str) -> str:
    return bcrypt.hashpw((raw_pw or "").encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(raw_pw: str, pw_hash: Optional[str]) -> bool:
    if not raw_pw or not pw_hash:
        return False
    try:
        return bcrypt.checkpw(raw_pw.encode("utf-8"), pw_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def resolve_role(admin: AdminUser) -> AdminRole:
    """Look up the admin's role; rows without one get the narrower portfolio role."""
    try:
        return AdminRole(admin.role) if admin.role else AdminRole.PORTFOLIO_ADMIN
    except ValueError:
        logger.warning(f"unknown admin role {admin.role!r} for {admin.email}")
        return AdminRole.PORTFOLIO_ADMIN


def has_role(admin: AdminUser, allowed: Iterable[AdminRole]) -> bool:
    role = resolve_role(admin)
    if role is AdminRole.SUPER_ADMIN:
        return True
    return role in set(allowed)


def issue_admin_token(admin: AdminUser) -> str:
    if not ADMIN_JWT_SECRET:
        raise RuntimeError("ADMIN_JWT_SECRET is not configured")
    now = datetime.now(timezone.utc)
    payload = {
        "sub": admin.id,
        "email": admin.email,
        "role": resolve_role(admin).value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=ADMIN_JWT_TTL_HOURS)).timestamp()),
        "iss": ADMIN_JWT_ISSUER,
    }
    return jwt.encode(payload, ADMIN_JWT_SECRET, algorithm="HS256")


def get_admin_id_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    if not token or not ADMIN_JWT_SECRET:
        return None
    try:
        payload = jwt.decode(token, ADMIN_JWT_SECRET, algorithms=["HS256"], issuer=ADMIN_JWT_ISSUER)
        return payload.get("sub")
    except jwt.PyJWTError as ex:
        logger.warning(f"Admin token verification failed: {ex}")
        return None


async def get_current_admin(request: Request, db: Session = Depends(get_db)) -> AdminUser:
    admin_id = get_admin_id_from_request(request)
    if not admin_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    admin = db.query(AdminUser).filter(AdminUser.id == admin_id, AdminUser.active == True).first()  # noqa: E712
    if not admin:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return admin


def require_role(*allowed: AdminRole):
    """Dependency factory: the current admin must hold one of `allowed` (super admins always pass)."""

    async def _dependency(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
        if not has_role(admin, allowed):
            raise HTTPException(status_code=403, detail="Forbidden")
        return admin

    return _dependency
