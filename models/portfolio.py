"""
Portfolio models for PostgreSQL
Entries reference their category by name, not by id
"""
from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, JSON
from sqlalchemy.sql import func
from core.database import Base

ASPECT_RATIOS = ("square", "wide", "tall")


class PortfolioItem(Base):
    __tablename__ = "portfolio_items"

    id = Column(String(64), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    caption = Column(Text, nullable=False, default="")
    category = Column(String(255), nullable=False, index=True)
    image_url = Column(Text, nullable=False)
    video_url = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    website_url = Column(Text, nullable=True)
    aspect_ratio = Column(String(16), default="square", nullable=False)
    tags = Column(JSON, nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "caption": self.caption or "",
            "category": self.category,
            "imageUrl": self.image_url,
            "videoUrl": self.video_url,
            "thumbnailUrl": self.thumbnail_url,
            "websiteUrl": self.website_url,
            "aspectRatio": self.aspect_ratio,
            "tags": list(self.tags or []),
            "isFeatured": bool(self.is_featured),
            "displayOrder": self.display_order,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class PortfolioCategory(Base):
    __tablename__ = "portfolio_categories"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    display_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_password_protected = Column(Boolean, nullable=True)
    # Reversible verifier (see utils/verifier.py), never serialized to clients
    password_hash = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "displayOrder": self.display_order,
            "isActive": bool(self.is_active),
            "isPasswordProtected": bool(self.is_password_protected),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
