"""
Create or update an admin panel account
Usage: python scripts/create_admin.py --email you@example.com --name "Full Name" --role super_admin
The password is read from --password or prompted for
"""
import sys
import os
import argparse
import getpass
import uuid

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.auth import hash_password
from core.database import init_db, SessionLocal
from models.admin_user import AdminUser, AdminRole


def upsert_admin(db, email: str, full_name: str, password: str, role: AdminRole) -> AdminUser:
    em = email.strip().lower()
    rec = db.query(AdminUser).filter(AdminUser.email == em).first()
    if rec:
        rec.full_name = full_name or rec.full_name
        rec.password_hash = hash_password(password)
        rec.role = role.value
        rec.active = True
    else:
        rec = AdminUser(
            id=uuid.uuid4().hex,
            email=em,
            full_name=full_name or em,
            password_hash=hash_password(password),
            role=role.value,
            active=True,
        )
        db.add(rec)
    db.commit()
    db.refresh(rec)
    return rec


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create or update an admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="")
    parser.add_argument("--role", choices=[r.value for r in AdminRole], default=AdminRole.PORTFOLIO_ADMIN.value)
    parser.add_argument("--password", default=None)
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("✗ Password must be at least 8 characters")
        sys.exit(1)

    init_db()
    db = SessionLocal()
    try:
        rec = upsert_admin(db, args.email, args.name, password, AdminRole(args.role))
        print(f"✓ Admin {rec.email} saved with role {rec.role}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
