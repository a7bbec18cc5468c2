"""
Federated identity: Google ID token verification.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from carrental.config import Settings, get_settings
from carrental.exceptions import AuthenticationError, ServerError

logger = logging.getLogger(__name__)


@dataclass
class FederatedIdentity:
    """The subset of the provider's profile the API stores."""
    uid: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class GoogleIdentityProvider:
    """
    Exchanges a Google ID token for the signed-in profile using Google's
    ``tokeninfo`` endpoint.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = client

    async def verify(self, id_token: str) -> FederatedIdentity:
        try:
            if self._client is not None:
                response = await self._fetch(self._client, id_token)
            else:
                async with httpx.AsyncClient(timeout=self.settings.google_timeout_seconds) as client:
                    response = await self._fetch(client, id_token)
        except httpx.HTTPError as exc:
            logger.error("Google token verification unreachable: %s", exc)
            raise ServerError("Identity provider is unavailable")

        claims = _json_or_empty(response)
        if response.status_code != 200:
            # Operator diagnostics only; the caller gets a generic message
            logger.warning(
                "Google sign-in rejected: status=%s error=%s description=%s",
                response.status_code,
                claims.get("error"),
                claims.get("error_description"),
            )
            raise AuthenticationError("Google sign in failed")

        audience = claims.get("aud")
        if self.settings.google_client_id and audience != self.settings.google_client_id:
            logger.warning("Google sign-in rejected: audience=%s does not match client id", audience)
            raise AuthenticationError("Google sign in failed")

        if not claims.get("email") or not claims.get("sub"):
            logger.warning("Google sign-in rejected: claims missing email/sub (aud=%s)", audience)
            raise AuthenticationError("Google sign in failed")

        return FederatedIdentity(
            uid=claims["sub"],
            email=claims["email"],
            display_name=claims.get("name"),
            photo_url=claims.get("picture"),
        )

    async def _fetch(self, client: httpx.AsyncClient, id_token: str) -> httpx.Response:
        return await client.get(self.settings.google_tokeninfo_url, params={"id_token": id_token})


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def get_identity_provider() -> GoogleIdentityProvider:
    """FastAPI dependency; overridden in tests."""
    return GoogleIdentityProvider(get_settings())
