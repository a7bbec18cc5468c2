"""
Generic data-access layer.

One ``Repository`` instance wraps one model class and exposes the same CRUD
surface for every entity. Repositories sharing a session can group their
writes with ``transaction()``.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.database import Base
from carrental.exceptions import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

_ATOMIC = "carrental.atomic"
_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


class Repository(Generic[ModelT]):
    """CRUD operations over a single mapped model."""

    def __init__(self, model: Type[ModelT], session: AsyncSession):
        self.model = model
        self.session = session

    # ---------- reads ----------
    async def get_by_id(self, id: Any) -> Optional[ModelT]:
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_one(self, **filters) -> Optional[ModelT]:
        query = select(self.model).where(*self._criteria(filters)).limit(1)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_all(
        self,
        filters: Optional[dict] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[Sequence[ModelT], int]:
        """
        Return one page of rows matching ``filters`` and the total match count.
        Rows are ordered newest first.
        """
        criteria = self._criteria(filters or {})
        total = await self.count(*criteria)

        query = (
            select(self.model)
            .where(*criteria)
            .order_by(self.model.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all(), total

    async def count(self, *criteria, **filters) -> int:
        query = select(func.count()).select_from(self.model).where(*criteria, *self._criteria(filters))
        result = await self.session.execute(query)
        return result.scalar_one()

    # ---------- writes ----------
    async def create(self, data: dict) -> ModelT:
        instance = self.model(**data)
        self.session.add(instance)
        await self._save()
        return instance

    async def update(self, id: Any, data: dict) -> Optional[ModelT]:
        instance = await self.get_by_id(id)
        if instance is None:
            return None

        for field, value in data.items():
            setattr(instance, field, value)

        await self._save()
        return instance

    async def delete(self, id: Any) -> bool:
        instance = await self.get_by_id(id)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self._save()
        return True

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Group the writes of every repository on this session.
        All of them are committed on exit, or none of them if the block raises.
        """
        if self.session.info.get(_ATOMIC):
            # already inside an outer transaction block
            yield self.session
            return

        self.session.info[_ATOMIC] = True
        try:
            yield self.session
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        finally:
            self.session.info.pop(_ATOMIC, None)

    async def _save(self) -> None:
        if self.session.info.get(_ATOMIC):
            await self.session.flush()
        else:
            await self.session.commit()

    # ---------- filters ----------
    def _criteria(self, filters: dict) -> list:
        columns = self.model.__table__.columns
        criteria = []
        for name, raw in filters.items():
            if name not in columns:
                raise ValidationError(f"Unknown filter field '{name}'")
            column = columns[name]
            criteria.append(getattr(self.model, name) == _coerce(column, raw))
        return criteria


def _coerce(column, raw: Any) -> Any:
    """Convert a query-string value to the Python type of ``column``."""
    if not isinstance(raw, str):
        return raw

    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return raw

    try:
        if python_type is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(raw)
        if python_type is datetime:
            value = datetime.fromisoformat(raw)
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
            return value
        return python_type(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid value for filter '{column.name}'")
