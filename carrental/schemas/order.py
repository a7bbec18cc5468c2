"""
Pydantic schemas for Order.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone
from typing import Optional
from carrental.models.order import OrderStatus
from carrental.schemas.car import CarSummary
from carrental.schemas.user import UserSummary


class OrderRequest(BaseModel):
    """Body of order creation and update."""
    car_id: int
    start_time: datetime
    end_time: datetime
    is_driver: bool
    promo: Optional[str] = None
    payment_method: str = Field(min_length=1)

    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Columns store naive UTC
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class PaymentRequest(BaseModel):
    """Body of order payment. The receipt is opaque to the API."""
    receipt: str = Field(min_length=1)


class Order(BaseModel):
    """Schema for order responses."""
    id: int
    order_no: Optional[str] = None
    status: OrderStatus
    start_time: datetime
    end_time: datetime
    is_driver: bool
    payment_method: str
    promo_code: Optional[str] = None
    total: float
    receipt: Optional[str] = None
    car_id: int
    user_id: int
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    car: Optional[CarSummary] = None
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)
