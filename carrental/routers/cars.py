"""
Car routes.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.auth import require_roles
from carrental.database import get_db
from carrental.models.user import User
from carrental.routers.common import Pagination, query_filters
from carrental.schemas.car import Car as CarSchema, CarCreate, CarUpdate
from carrental.schemas.common import ApiResponse, Page, api_send, paginate
from carrental.services.car_service import CarService

router = APIRouter(prefix="/cars", tags=["cars"])

admin_only = require_roles("admin", "superadmin")


@router.get("", response_model=ApiResponse[Page[CarSchema]])
async def get_cars(
    request: Request,
    pagination: Pagination = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """
    List cars, filtered by any car column (e.g. ``?is_available=true``).
    """
    cars, total = await CarService(db).list_cars(
        query_filters(request), page=pagination.page, limit=pagination.limit
    )
    items = [CarSchema.model_validate(car) for car in cars]
    return api_send("Get cars successfully", paginate(items, total, pagination.page, pagination.limit))


@router.get("/{car_id}", response_model=ApiResponse[CarSchema])
async def get_car(car_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific car by ID.
    """
    car = await CarService(db).get_car(car_id)
    return api_send("Get car successfully", CarSchema.model_validate(car))


@router.post("", response_model=ApiResponse[CarSchema], status_code=status.HTTP_201_CREATED)
async def create_car(
    car: CarCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """
    Create a new car.
    """
    db_car = await CarService(db).create_car(car.model_dump(), current_user)
    return api_send("Car created successfully", CarSchema.model_validate(db_car), code=201)


@router.put("/{car_id}", response_model=ApiResponse[CarSchema])
async def update_car(
    car_id: int,
    car_update: CarUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """
    Update a car.
    """
    # Update only provided fields
    update_data = car_update.model_dump(exclude_unset=True)
    db_car = await CarService(db).update_car(car_id, update_data, current_user)
    return api_send("Car updated successfully", CarSchema.model_validate(db_car))


@router.delete("/{car_id}", response_model=ApiResponse[dict])
async def delete_car(
    car_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """
    Delete a car.
    """
    await CarService(db).delete_car(car_id)
    return api_send("Car deleted successfully")
