"""
Sign-up, sign-in and federated sign-in.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from carrental.auth import create_access_token, hash_password, verify_password
from carrental.config import get_settings
from carrental.exceptions import ServerError, ValidationError
from carrental.models.role import Role
from carrental.models.user import AuthProvider, User
from carrental.repository import Repository
from carrental.services.identity import GoogleIdentityProvider

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
GOOGLE_ID_TAKEN = "Google account is already linked to another user"


class AuthService:
    """
    Account operations.
    Sign-in methods return ``(user, token)``.
    """

    def __init__(self, session: AsyncSession):
        self.users = Repository(User, session)
        self.roles = Repository(Role, session)

    async def _default_role(self) -> Role:
        name = get_settings().default_role
        role = await self.roles.get_one(name=name)
        if role is None:
            raise ServerError(f"Default role '{name}' is not configured")
        return role

    async def sign_up(self, email: str, password: str, fullname: Optional[str] = None) -> User:
        if await self.users.get_one(email=email):
            raise ValidationError("Email already exist!")

        role = await self._default_role()
        user = await self.users.create({
            "email": email,
            "password": hash_password(password),
            "fullname": fullname,
            "provider": AuthProvider.LOCAL,
            "role": role,
        })
        logger.info("User %s signed up", user.id)
        return user

    async def sign_in(self, email: str, password: str) -> tuple[User, str]:
        """Same error for an unknown email and a wrong password."""
        user = await self.users.get_one(email=email)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed sign-in attempt")
            raise ValidationError(INVALID_CREDENTIALS)

        return user, create_access_token({"id": user.id})

    async def google_sign_in(self, id_token: str, provider: GoogleIdentityProvider) -> tuple[User, str]:
        """
        Sign in with a Google ID token.

        A local account with the same email is converted to a Google account;
        unknown emails get a new account without a password.
        """
        identity = await provider.verify(id_token)

        user = await self.users.get_one(email=identity.email)
        linked = await self.users.get_one(google_id=identity.uid)
        if linked is not None and (user is None or linked.id != user.id):
            logger.warning("Google id already linked to user %s", linked.id)
            raise ValidationError(GOOGLE_ID_TAKEN)

        if user is not None:
            if user.provider == AuthProvider.LOCAL:
                user = await self.users.update(user.id, {
                    "provider": AuthProvider.GOOGLE,
                    "google_id": identity.uid,
                })
                logger.info("User %s linked to Google", user.id)
        else:
            role = await self._default_role()
            user = await self.users.create({
                "email": identity.email,
                "password": None,
                "fullname": identity.display_name,
                "provider": AuthProvider.GOOGLE,
                "google_id": identity.uid,
                "avatar": identity.photo_url,
                "role": role,
            })
            logger.info("User %s created from Google sign-in", user.id)

        return user, create_access_token({"id": user.id})
