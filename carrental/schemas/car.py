"""
Pydantic schemas for Car.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class CarBase(BaseModel):
    """Base car schema with common fields."""
    name: str = Field(min_length=1)
    price: float = Field(gt=0)
    is_driver: bool = False
    image: Optional[str] = None


class CarCreate(CarBase):
    """Schema for creating a car."""
    is_available: bool = True


class CarUpdate(BaseModel):
    """Schema for updating a car."""
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, gt=0)
    is_driver: Optional[bool] = None
    is_available: Optional[bool] = None
    image: Optional[str] = None


class Car(CarBase):
    """Schema for car responses."""
    id: int
    is_available: bool
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CarSummary(BaseModel):
    """Car fields embedded in an order."""
    id: int
    name: str
    price: float

    model_config = ConfigDict(from_attributes=True)
