"""
Initialize the database schema
Creates all tables and seeds the default categories and site configuration
"""
import sys
import os
import uuid

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import init_db, SessionLocal
from models.portfolio import PortfolioCategory
from models.website import WebsiteSetting
from routers.website import SITE_CONFIG_KEY, default_site_config

DEFAULT_CATEGORIES = ["Real Estate", "Medical", "Clothing", "Food", "Construction"]


def seed_defaults(db) -> int:
    """Insert missing default categories and the site_config row. Returns categories created."""
    created = 0
    existing = {name for (name,) in db.query(PortfolioCategory.name).all()}
    for order, name in enumerate(DEFAULT_CATEGORIES, start=1):
        if name in existing:
            continue
        db.add(PortfolioCategory(id=uuid.uuid4().hex, name=name, display_order=order, is_active=True))
        created += 1
    if not db.query(WebsiteSetting).filter(WebsiteSetting.key == SITE_CONFIG_KEY).first():
        db.add(WebsiteSetting(key=SITE_CONFIG_KEY, value=default_site_config()))
    db.commit()
    return created


def init_database():
    """Create all tables in the database"""
    print("Creating tables...")

    try:
        init_db()
        print("✓ Tables created successfully!")
        print("\nCreated tables:")
        print("  - portfolio_items")
        print("  - portfolio_categories")
        print("  - admin_users")
        print("  - contact_inquiries")
        print("  - website_settings")
    except Exception as e:
        print(f"✗ Error creating tables: {e}")
        sys.exit(1)

    db = SessionLocal()
    try:
        created = seed_defaults(db)
        print(f"✓ Seeded {created} default categories")
    finally:
        db.close()


if __name__ == "__main__":
    init_database()
