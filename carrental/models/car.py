"""
Car model for database.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime
from carrental.database import Base, utcnow


class Car(Base):
    """Car database model."""

    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    price = Column(Float, nullable=False)  # per day
    is_driver = Column(Boolean, default=False, nullable=False)  # driver required
    is_available = Column(Boolean, default=True, nullable=False)
    image = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow)
