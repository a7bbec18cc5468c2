"""
Response envelope shared by every endpoint.
"""
from pydantic import BaseModel
from typing import Generic, Literal, Optional, Sequence, TypeVar

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope: ``{code, status, message, data}``."""
    code: int
    status: Literal["success", "error"]
    message: str
    data: Optional[T] = None


class Page(BaseModel, Generic[T]):
    """One page of a filtered listing."""
    items: list[T]
    total: int
    page: int
    limit: int


def api_send(message: str, data=None, code: int = 200) -> dict:
    """Build a success envelope."""
    return {"code": code, "status": "success", "message": message, "data": data}


def api_error(code: int, message: str) -> dict:
    """Build an error envelope."""
    return {"code": code, "status": "error", "message": message, "data": None}


def paginate(items: Sequence, total: int, page: int, limit: int) -> dict:
    return {"items": list(items), "total": total, "page": page, "limit": limit}
