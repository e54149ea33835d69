import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

# Configure the app for an in-memory database before any project module is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_JWT_SECRET"] = "test-admin-secret-please-change-0123456789abcdef"
os.environ["STATIC_DIR"] = tempfile.mkdtemp(prefix="portfolio-static-")
os.environ["FEED_PAGE_SIZE"] = "12"
for _k in ("R2_ACCOUNT_ID", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY", "R2_BUCKET", "R2_PUBLIC_BASE_URL"):
    os.environ.pop(_k, None)

import pytest
from fastapi.testclient import TestClient

from core.auth import hash_password, issue_admin_token
from core.database import Base, engine, SessionLocal, init_db
from models.admin_user import AdminUser, AdminRole
from models.portfolio import PortfolioItem, PortfolioCategory
from utils.verifier import encode_verifier

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    from main import app
    return TestClient(app)


def make_category(db, name, order=0, active=True, password=None):
    rec = PortfolioCategory(
        id=uuid.uuid4().hex,
        name=name,
        display_order=order,
        is_active=active,
        is_password_protected=True if password else None,
        password_hash=encode_verifier(password) if password else None,
    )
    db.add(rec)
    db.commit()
    return rec


def make_items(db, category, count, featured=(), start=0):
    """Create `count` entries; entry i is i minutes newer than entry i-1."""
    created = []
    for i in range(start, start + count):
        rec = PortfolioItem(
            id=f"{category.lower().replace(' ', '-')}-{i:03d}",
            title=f"{category} shot {i}",
            caption=f"caption {i}",
            category=category,
            image_url=f"https://cdn.example.com/{category}/{i}.jpg",
            is_featured=i in featured,
            display_order=i,
            created_at=BASE_TIME + timedelta(minutes=i),
        )
        db.add(rec)
        created.append(rec)
    db.commit()
    return created


def make_admin(db, email="owner@example.com", password="correct horse", role=AdminRole.SUPER_ADMIN):
    rec = AdminUser(
        id=uuid.uuid4().hex,
        email=email,
        full_name="Studio Owner",
        password_hash=hash_password(password),
        role=role.value if role else None,
        active=True,
    )
    db.add(rec)
    db.commit()
    return rec


def auth_headers(admin):
    return {"Authorization": f"Bearer {issue_admin_token(admin)}"}
