"""
SQLAlchemy database models.
"""
from carrental.models.role import Role
from carrental.models.user import User, AuthProvider
from carrental.models.car import Car
from carrental.models.order import Order, OrderStatus

__all__ = ["Role", "User", "AuthProvider", "Car", "Order", "OrderStatus"]
