"""
Site-wide settings, contact form inquiries, team members and pricing packages
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Boolean
from sqlalchemy.sql import func
from core.database import Base

INQUIRY_STATUSES = ("new", "in_progress", "replied", "closed")


class WebsiteSetting(Base):
    __tablename__ = "website_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(128), unique=True, index=True, nullable=False)
    value = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ContactInquiry(Base):
    __tablename__ = "contact_inquiries"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    project_type = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(32), nullable=True, default="new")
    admin_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "project_type": self.project_type,
            "message": self.message,
            "status": self.status or "new",
            "admin_notes": self.admin_notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)
    image_url = Column(Text, nullable=False)
    experience = Column(String(255), nullable=False, default="")
    bio = Column(Text, nullable=True)
    display_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "image_url": self.image_url,
            "experience": self.experience or "",
            "bio": self.bio,
            "display_order": self.display_order,
            "is_active": bool(self.is_active),
        }


class PricingPackage(Base):
    __tablename__ = "pricing_packages"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(String(64), nullable=False)
    features = Column(JSON, nullable=False, default=list)
    is_popular = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    # The public page lists packages that are both active and visible
    is_visible = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "features": list(self.features or []),
            "is_popular": bool(self.is_popular),
            "is_active": bool(self.is_active),
            "is_visible": bool(self.is_visible),
            "display_order": self.display_order,
        }
