from .auth_service import AuthService
from .car_service import CarService
from .order_service import OrderService

__all__ = [
    "AuthService",
    "CarService",
    "OrderService",
]
