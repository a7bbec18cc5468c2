"""
Pydantic schemas for request/response validation.
"""
from carrental.schemas.common import ApiResponse, Page, api_send, api_error, paginate
from carrental.schemas.car import CarBase, CarCreate, CarUpdate, Car, CarSummary
from carrental.schemas.order import OrderRequest, PaymentRequest, Order
from carrental.schemas.user import (
    User, UserSummary, SignUpRequest, SignInRequest, GoogleSignInRequest, UserData, TokenData,
)

__all__ = [
    "ApiResponse", "Page", "api_send", "api_error", "paginate",
    "CarBase", "CarCreate", "CarUpdate", "Car", "CarSummary",
    "OrderRequest", "PaymentRequest", "Order",
    "User", "UserSummary", "SignUpRequest", "SignInRequest", "GoogleSignInRequest",
    "UserData", "TokenData",
]
