"""
Car inventory: listing, administration and availability.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from carrental.exceptions import NotFoundError, ValidationError
from carrental.models.car import Car
from carrental.models.order import Order
from carrental.models.user import User
from carrental.repository import Repository

logger = logging.getLogger(__name__)

CAR_NOT_FOUND = "Car not found"


class CarService:
    """Read and maintain the car inventory."""

    def __init__(self, session: AsyncSession):
        self.cars = Repository(Car, session)
        self.orders = Repository(Order, session)

    async def list_cars(self, filters: Optional[dict] = None, page: int = 1, limit: int = 10):
        return await self.cars.get_all(filters, page=page, limit=limit)

    async def get_car(self, car_id: int) -> Car:
        car = await self.cars.get_by_id(car_id)
        if car is None:
            raise NotFoundError(CAR_NOT_FOUND)
        return car

    async def create_car(self, data: dict, user: User) -> Car:
        car = await self.cars.create({**data, "created_by": user.fullname, "updated_by": user.fullname})
        logger.info("Car %s (%s) added by user %s", car.id, car.name, user.id)
        return car

    async def update_car(self, car_id: int, data: dict, user: User) -> Car:
        car = await self.cars.update(car_id, {**data, "updated_by": user.fullname})
        if car is None:
            raise NotFoundError(CAR_NOT_FOUND)
        return car

    async def delete_car(self, car_id: int) -> None:
        """Remove a car that no order has ever referenced."""
        await self.get_car(car_id)
        if await self.orders.count(car_id=car_id):
            raise ValidationError("Car has orders and cannot be deleted")
        await self.cars.delete(car_id)
        logger.info("Car %s deleted", car_id)

    async def set_availability(self, car_id: int, available: bool) -> Optional[Car]:
        """Flip the availability flag; joins an enclosing transaction if any."""
        return await self.cars.update(car_id, {"is_available": available})
