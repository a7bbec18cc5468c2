"""
Role model for database.
"""
from sqlalchemy import Column, Integer, String
from carrental.database import Base


class Role(Base):
    """Role database model."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
