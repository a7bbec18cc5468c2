"""
Promo code lookup and discount application.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from carrental.config import get_settings
from carrental.exceptions import ValidationError

PROMO_DATE_FMT = "%d/%m/%Y"
PROMO_UNAVAILABLE = "Promo not found or is not available!"


def _today() -> date:
    """Wrapper for easier testing/mocking."""
    return date.today()


@dataclass(frozen=True)
class Promo:
    title: str
    discount: int
    expired_date: date

    def is_expired(self, today: date) -> bool:
        """A promo is still usable on its expiry date."""
        return self.expired_date < today


def load_promos() -> list[Promo]:
    """Build the promo table from settings."""
    return [
        Promo(
            title=entry.title,
            discount=entry.discount,
            expired_date=datetime.strptime(entry.expired_date, PROMO_DATE_FMT).date(),
        )
        for entry in get_settings().promos
    ]


def find_promo(title: str) -> Optional[Promo]:
    """Exact, case-sensitive title match."""
    for promo in load_promos():
        if promo.title == title:
            return promo
    return None


def apply_promo(total: float, code: str) -> float:
    """
    Discount ``total`` with the promo named ``code``.
    Raises ValidationError when the code is unknown or expired.
    """
    promo = find_promo(code)
    if promo is None or promo.is_expired(_today()):
        raise ValidationError(PROMO_UNAVAILABLE)
    return total * ((100 - promo.discount) / 100)
