"""
Order lifecycle at the service layer.
"""
import re
from datetime import date, datetime, timedelta

import pytest

from carrental.exceptions import NotFoundError, ValidationError
from carrental.models import Car, Order, OrderStatus
from carrental.repository import Repository
from carrental.services import order_service, promos
from carrental.services.car_service import CarService
from carrental.services.order_service import OrderService
from conftest import make_car, make_user

pytestmark = pytest.mark.anyio

START = datetime(2030, 5, 1, 9, 0)
END = START + timedelta(days=2)


@pytest.fixture
def promo_period(monkeypatch):
    monkeypatch.setattr(promos, "_today", lambda: date(2024, 11, 1))


async def _book(session, user, car, **overrides):
    params = dict(
        car_id=car.id, start_time=START, end_time=END,
        is_driver=False, payment_method="transfer",
    )
    params.update(overrides)
    return await OrderService(session).create(user, **params)


async def _fresh(session_factory, model, id):
    async with session_factory() as fresh:
        return await Repository(model, fresh).get_by_id(id)


async def test_create_books_car(session, session_factory):
    user = await make_user(session)
    car = await make_car(session, price=100.0)

    order = await _book(session, user, car)

    assert order.status == OrderStatus.PENDING
    assert order.total == pytest.approx(200.0)
    assert order.car.id == car.id
    assert order.user.id == user.id
    assert order.created_by == user.fullname
    assert (await _fresh(session_factory, Car, car.id)).is_available is False
    assert (await _fresh(session_factory, Order, order.id)).status == OrderStatus.PENDING


async def test_create_with_promo(session, promo_period):
    user = await make_user(session)
    car = await make_car(session, price=100.0)

    order = await _book(session, user, car, promo="NEWUSER")

    assert order.total == pytest.approx(150.0)
    assert order.promo_code == "NEWUSER"


async def test_create_with_expired_promo_writes_nothing(session, session_factory, monkeypatch):
    monkeypatch.setattr(promos, "_today", lambda: date(2025, 1, 1))
    user = await make_user(session)
    car = await make_car(session)

    with pytest.raises(ValidationError):
        await _book(session, user, car, promo="NEWUSER")

    assert (await _fresh(session_factory, Car, car.id)).is_available is True


@pytest.mark.parametrize("available", [False, None])
async def test_create_rejects_missing_or_unavailable_car(session, session_factory, available):
    user = await make_user(session)
    if available is None:
        car = Car(id=404)
    else:
        car = await make_car(session, is_available=available)

    with pytest.raises(ValidationError) as exc:
        await _book(session, user, car)

    assert exc.value.message == order_service.CAR_UNAVAILABLE
    async with session_factory() as fresh:
        assert await Repository(Order, fresh).count() == 0


async def test_create_requires_driver_when_car_demands_it(session):
    user = await make_user(session)
    car = await make_car(session, is_driver=True)

    with pytest.raises(ValidationError) as exc:
        await _book(session, user, car, is_driver=False)
    assert exc.value.message == order_service.DRIVER_REQUIRED

    order = await _book(session, user, car, is_driver=True)
    assert order.is_driver is True


async def test_create_is_atomic(session, session_factory, monkeypatch):
    user = await make_user(session)
    car = await make_car(session)

    async def broken(self, car_id, available):
        raise RuntimeError("database went away")

    monkeypatch.setattr(CarService, "set_availability", broken)

    with pytest.raises(RuntimeError):
        await _book(session, user, car)
    await session.refresh(car)

    async with session_factory() as fresh:
        assert await Repository(Order, fresh).count() == 0
        assert (await Repository(Car, fresh).get_by_id(car.id)).is_available is True


async def test_update_reprices_without_touching_availability(session, session_factory, promo_period):
    user = await make_user(session)
    car = await make_car(session, price=100.0)
    order = await _book(session, user, car)

    updated = await OrderService(session).update(
        order.id, user, car_id=car.id, start_time=START, end_time=START + timedelta(days=4),
        is_driver=False, payment_method="cash", promo="NEWUSER",
    )

    assert updated.total == pytest.approx(300.0)
    assert updated.payment_method == "cash"
    assert updated.promo_code == "NEWUSER"
    assert (await _fresh(session_factory, Car, car.id)).is_available is False


async def test_update_with_missing_car_is_validation_error(session):
    user = await make_user(session)
    car = await make_car(session)
    order = await _book(session, user, car)

    with pytest.raises(ValidationError):
        await OrderService(session).update(
            order.id, user, car_id=999, start_time=START, end_time=END,
            is_driver=False, payment_method="cash",
        )


async def test_update_by_other_user_rejected(session):
    owner = await make_user(session)
    other = await make_user(session, email="other@example.com")
    car = await make_car(session)
    order = await _book(session, owner, car)

    with pytest.raises(ValidationError):
        await OrderService(session).update(
            order.id, other, car_id=car.id, start_time=START, end_time=END,
            is_driver=False, payment_method="cash",
        )


async def test_payment_assigns_invoice_number(session, monkeypatch):
    monkeypatch.setattr(order_service, "_now", lambda: datetime(2030, 1, 2, 8, 30))
    user = await make_user(session)
    first = await _book(session, user, await make_car(session, name="Avanza"))
    second = await _book(session, user, await make_car(session, name="Xenia"))

    paid = await OrderService(session).pay(first.id, "receipt-001.png")

    assert paid.status == OrderStatus.PAID
    assert paid.receipt == "receipt-001.png"
    assert re.fullmatch(r"INV/\d{4}/\d{1,2}/\d{1,2}/\d+", paid.order_no)
    assert paid.order_no == "INV/2030/1/2/2"

    # The sequence counts orders, not payments: the next payment on the
    # same day with no new orders gets the same number.
    again = await OrderService(session).pay(second.id, "receipt-002.png")
    assert again.order_no == paid.order_no


async def test_payment_requires_pending_order(session):
    user = await make_user(session)
    order = await _book(session, user, await make_car(session))
    service = OrderService(session)
    await service.pay(order.id, "r1")

    with pytest.raises(ValidationError):
        await service.pay(order.id, "r2")
    with pytest.raises(ValidationError):
        await service.pay(999, "r3")


async def test_cancel_by_owner_releases_car(session, session_factory):
    user = await make_user(session)
    car = await make_car(session)
    order = await _book(session, user, car)

    cancelled = await OrderService(session).cancel(order.id, user)

    assert cancelled.status == OrderStatus.CANCELLED
    assert (await _fresh(session_factory, Car, car.id)).is_available is True
    assert (await _fresh(session_factory, Order, order.id)).status == OrderStatus.CANCELLED


async def test_cancel_by_other_user_changes_nothing(session, session_factory):
    owner = await make_user(session)
    other = await make_user(session, email="other@example.com")
    car = await make_car(session)
    order = await _book(session, owner, car)

    with pytest.raises(ValidationError) as exc:
        await OrderService(session).cancel(order.id, other)

    assert exc.value.message == order_service.ORDER_UNAVAILABLE
    assert (await _fresh(session_factory, Car, car.id)).is_available is False
    assert (await _fresh(session_factory, Order, order.id)).status == OrderStatus.PENDING


async def test_cancel_twice_rejected(session):
    user = await make_user(session)
    order = await _book(session, user, await make_car(session))
    service = OrderService(session)
    await service.cancel(order.id, user)

    with pytest.raises(ValidationError):
        await service.cancel(order.id, user)


async def test_cancel_is_atomic(session, session_factory, monkeypatch):
    user = await make_user(session)
    car = await make_car(session)
    order = await _book(session, user, car)

    original_update = Repository.update

    async def failing_update(self, id, data):
        if data.get("status") == OrderStatus.CANCELLED:
            raise RuntimeError("lost connection")
        return await original_update(self, id, data)

    monkeypatch.setattr(Repository, "update", failing_update)

    with pytest.raises(RuntimeError):
        await OrderService(session).cancel(order.id, user)
    await session.refresh(car)
    await session.refresh(order)

    assert (await _fresh(session_factory, Car, car.id)).is_available is False
    assert (await _fresh(session_factory, Order, order.id)).status == OrderStatus.PENDING


async def test_invoice_requires_paid_order(session):
    user = await make_user(session)
    order = await _book(session, user, await make_car(session))
    service = OrderService(session)

    with pytest.raises(ValidationError):
        await service.invoice(order.id)

    await service.pay(order.id, "r1")
    assert (await service.invoice(order.id)).id == order.id

    with pytest.raises(NotFoundError):
        await service.invoice(999)


async def test_my_orders_only_lists_own_orders(session):
    me = await make_user(session)
    other = await make_user(session, email="other@example.com")
    await _book(session, me, await make_car(session, name="Avanza"))
    await _book(session, other, await make_car(session, name="Xenia"))

    items, total = await OrderService(session).my_orders(me)

    assert total == 1
    assert items[0].user_id == me.id
