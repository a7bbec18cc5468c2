"""
Order routes.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.auth import get_current_user
from carrental.database import get_db
from carrental.models.user import User
from carrental.routers.common import Pagination, query_filters
from carrental.schemas.common import ApiResponse, Page, api_send, paginate
from carrental.schemas.order import Order as OrderSchema, OrderRequest, PaymentRequest
from carrental.services.invoice import invoice_filename, render_invoice
from carrental.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def _page(orders, total: int, pagination: Pagination) -> dict:
    items = [OrderSchema.model_validate(order) for order in orders]
    return paginate(items, total, pagination.page, pagination.limit)


@router.get("", response_model=ApiResponse[Page[OrderSchema]])
async def get_orders(
    request: Request,
    pagination: Pagination = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """
    List orders, filtered by any order column (e.g. ``?status=paid``).
    """
    orders, total = await OrderService(db).list_orders(
        query_filters(request), page=pagination.page, limit=pagination.limit
    )
    return api_send("Get orders successfully", _page(orders, total, pagination))


@router.post("", response_model=ApiResponse[OrderSchema])
async def create_order(
    body: OrderRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Book a car for the authenticated user.
    """
    order = await OrderService(db).create(
        current_user,
        car_id=body.car_id,
        start_time=body.start_time,
        end_time=body.end_time,
        is_driver=body.is_driver,
        payment_method=body.payment_method,
        promo=body.promo,
    )
    return api_send("Order created successfully", OrderSchema.model_validate(order))


@router.get("/myorder", response_model=ApiResponse[Page[OrderSchema]])
async def get_my_orders(
    pagination: Pagination = Depends(),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List the authenticated user's orders.
    """
    orders, total = await OrderService(db).my_orders(
        current_user, page=pagination.page, limit=pagination.limit
    )
    return api_send("Get orders successfully", _page(orders, total, pagination))


@router.get("/{order_id}", response_model=ApiResponse[OrderSchema])
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Get a specific order by ID.
    """
    order = await OrderService(db).get_order(order_id)
    return api_send("Get order successfully", OrderSchema.model_validate(order))


@router.put("/{order_id}", response_model=ApiResponse[OrderSchema])
async def update_order(
    order_id: int,
    body: OrderRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Change the rental window, driver option, payment method or promo.
    """
    order = await OrderService(db).update(
        order_id,
        current_user,
        car_id=body.car_id,
        start_time=body.start_time,
        end_time=body.end_time,
        is_driver=body.is_driver,
        payment_method=body.payment_method,
        promo=body.promo,
    )
    return api_send("Order updated successfully", OrderSchema.model_validate(order))


@router.put("/{order_id}/payment", response_model=ApiResponse[OrderSchema])
async def pay_order(
    order_id: int,
    body: PaymentRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Record the payment receipt and assign the invoice number.
    """
    order = await OrderService(db).pay(order_id, body.receipt)
    return api_send("Order Paid successfully", OrderSchema.model_validate(order))


@router.get("/{order_id}/cancel", response_model=ApiResponse[OrderSchema])
async def cancel_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Cancel one of the authenticated user's orders.
    """
    order = await OrderService(db).cancel(order_id, current_user)
    return api_send("Order canceled successfully", OrderSchema.model_validate(order))


@router.get("/{order_id}/invoice", response_class=HTMLResponse)
async def download_invoice(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Download the invoice of a paid order.
    """
    order = await OrderService(db).invoice(order_id)
    return HTMLResponse(
        content=render_invoice(order),
        headers={"Content-Disposition": f'attachment; filename="{invoice_filename(order)}"'},
    )
