"""
Query helpers shared by the listing routes.
"""
from fastapi import Query, Request

PAGINATION_KEYS = {"page", "limit"}


class Pagination:
    """``?page=&limit=`` query parameters."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
    ):
        self.page = page
        self.limit = limit


def query_filters(request: Request) -> dict:
    """Every query parameter except pagination is a column filter."""
    return {k: v for k, v in request.query_params.items() if k not in PAGINATION_KEYS}
