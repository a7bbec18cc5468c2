"""
Order lifecycle: create, update, pay, cancel, invoice.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from carrental.database import utcnow
from carrental.exceptions import NotFoundError, ValidationError
from carrental.models.car import Car
from carrental.models.order import Order, OrderStatus
from carrental.models.user import User
from carrental.repository import Repository
from carrental.services.car_service import CarService
from carrental.services.promos import apply_promo

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

CAR_UNAVAILABLE = "Car not found or is not available!"
DRIVER_REQUIRED = "This car requires a driver!"
ORDER_UNAVAILABLE = "Order not found or is not available!"


def _now() -> datetime:
    """Wrapper for easier testing/mocking."""
    return utcnow()


def rental_days(start_time: datetime, end_time: datetime) -> float:
    """Length of the rental window in (fractional) days."""
    return (end_time - start_time) / ONE_DAY


def price_order(car: Car, start_time: datetime, end_time: datetime,
                is_driver: bool, promo: Optional[str] = None) -> float:
    """
    Total for renting ``car`` over [start_time, end_time).

    The daily price is multiplied by the exact day fraction, then the promo
    discount (if any) is applied. No rounding.
    """
    if car.is_driver and not is_driver:
        raise ValidationError(DRIVER_REQUIRED)
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")

    total = car.price * rental_days(start_time, end_time)
    if promo:
        total = apply_promo(total, promo)
    return total


def invoice_number(moment: datetime, count: int) -> str:
    """``INV/{year}/{month}/{day}/{count}``, month and day unpadded."""
    return f"INV/{moment.year}/{moment.month}/{moment.day}/{count}"


class OrderService:
    """
    Order operations for the authenticated user.
    Every method raises ValidationError for client-correctable problems.
    """

    def __init__(self, session: AsyncSession):
        self.orders = Repository(Order, session)
        self.cars = Repository(Car, session)
        self.inventory = CarService(session)

    async def list_orders(self, filters: Optional[dict] = None, page: int = 1, limit: int = 10):
        return await self.orders.get_all(filters, page=page, limit=limit)

    async def my_orders(self, user: User, page: int = 1, limit: int = 10):
        return await self.list_orders({"user_id": user.id}, page=page, limit=limit)

    async def get_order(self, order_id: int) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    async def create(self, user: User, car_id: int, start_time: datetime, end_time: datetime,
                     is_driver: bool, payment_method: str, promo: Optional[str] = None) -> Order:
        """
        Book an available car.

        The order insert and the car's availability flip are committed
        together or not at all.
        """
        car = await self.cars.get_one(id=car_id, is_available=True)
        if car is None:
            raise ValidationError(CAR_UNAVAILABLE)

        total = price_order(car, start_time, end_time, is_driver, promo)

        async with self.orders.transaction():
            order = await self.orders.create({
                "start_time": start_time,
                "end_time": end_time,
                "is_driver": is_driver,
                "status": OrderStatus.PENDING,
                "created_by": user.fullname,
                "updated_by": user.fullname,
                "payment_method": payment_method,
                "promo_code": promo,
                "total": total,
                "car": car,
                "user": user,
            })
            await self.inventory.set_availability(car.id, False)

        logger.info("Order %s created for car %s by user %s (total=%.2f)", order.id, car.id, user.id, total)
        return order

    async def update(self, order_id: int, user: User, car_id: int, start_time: datetime,
                     end_time: datetime, is_driver: bool, payment_method: str,
                     promo: Optional[str] = None) -> Order:
        """
        Re-price an order. The order stays linked to its original car and
        no availability flag is touched.
        """
        order = await self.orders.get_by_id(order_id)
        if order is None or order.user_id != user.id:
            raise ValidationError(ORDER_UNAVAILABLE)

        car = await self.cars.get_by_id(car_id)
        if car is None:
            raise ValidationError("Car not found")

        total = price_order(car, start_time, end_time, is_driver, promo)

        return await self.orders.update(order.id, {
            "start_time": start_time,
            "end_time": end_time,
            "is_driver": is_driver,
            "updated_by": user.fullname,
            "payment_method": payment_method,
            "promo_code": promo,
            "total": total,
        })

    async def pay(self, order_id: int, receipt: str) -> Order:
        """
        Mark a pending order as paid and assign its invoice number.

        The number's sequence part counts every order created up to now. It
        is read and written in separate statements, so two payments can
        receive the same number.
        """
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise ValidationError(ORDER_UNAVAILABLE)
        if order.status != OrderStatus.PENDING:
            raise ValidationError(f"Order is already {order.status.value}!")

        now = _now()
        count = await self.orders.count(Order.created_at <= now)
        order_no = invoice_number(now, count)

        order = await self.orders.update(order.id, {
            "order_no": order_no,
            "receipt": receipt,
            "status": OrderStatus.PAID,
        })
        logger.info("Order %s paid as %s", order.id, order_no)
        return order

    async def cancel(self, order_id: int, user: User) -> Order:
        """Cancel the user's own order and release its car, atomically."""
        order = await self.orders.get_by_id(order_id)
        if order is None or order.user_id != user.id:
            raise ValidationError(ORDER_UNAVAILABLE)
        if order.status == OrderStatus.CANCELLED:
            raise ValidationError("Order is already cancelled!")

        car = await self.cars.get_by_id(order.car_id)
        if car is None:
            raise ValidationError(CAR_UNAVAILABLE)

        async with self.orders.transaction():
            await self.inventory.set_availability(car.id, True)
            order = await self.orders.update(order.id, {
                "status": OrderStatus.CANCELLED,
                "updated_by": user.fullname,
            })

        logger.info("Order %s cancelled by user %s; car %s released", order.id, user.id, car.id)
        return order

    async def invoice(self, order_id: int) -> Order:
        """Return a paid order for rendering."""
        order = await self.get_order(order_id)
        if order.status != OrderStatus.PAID:
            raise ValidationError("Order not paid!")
        return order
