"""
HTML invoice rendering.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from carrental.config import get_settings
from carrental.models.order import Order
from carrental.services.order_service import rental_days

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"


def fmt_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y %H:%M")


def money(value: Optional[float]) -> str:
    return f"{(value or 0):,.2f}"


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)
_env.filters["fmt_date"] = fmt_date
_env.filters["money"] = money


def invoice_filename(order: Order) -> str:
    return f"invoice-{(order.order_no or str(order.id)).replace('/', '-')}.html"


def render_invoice(order: Order) -> str:
    """Render a paid order (with its car and user loaded) as HTML."""
    template = _env.get_template("invoice.html")
    return template.render(
        order=order,
        days=rental_days(order.start_time, order.end_time),
        app_name=get_settings().app_name,
    )
