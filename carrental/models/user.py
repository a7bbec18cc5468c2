"""
User model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from carrental.database import Base, utcnow
import enum


class AuthProvider(str, enum.Enum):
    """Where the account authenticates."""
    LOCAL = "local"
    GOOGLE = "google"


class User(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=True)  # null for federated accounts
    fullname = Column(String, nullable=True)
    address = Column(String, nullable=True)
    provider = Column(SQLEnum(AuthProvider), default=AuthProvider.LOCAL, nullable=False)
    google_id = Column(String, nullable=True, unique=True)
    avatar = Column(String, nullable=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow)

    # Relationships
    role = relationship("Role", lazy="selectin")
