"""
Reference data required by the application.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.models.role import Role

logger = logging.getLogger(__name__)

ROLES = [
    (1, "superadmin"),
    (2, "admin"),
    (3, "customer"),
]


async def seed_roles(session: AsyncSession) -> None:
    """Insert the fixed roles that are not present yet."""
    result = await session.execute(select(Role.name))
    existing = set(result.scalars().all())

    missing = [Role(id=role_id, name=name) for role_id, name in ROLES if name not in existing]
    if not missing:
        return

    session.add_all(missing)
    await session.commit()
    logger.info("Seeded roles: %s", ", ".join(role.name for role in missing))
