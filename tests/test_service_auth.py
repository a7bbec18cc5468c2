"""
Sign-up, sign-in and Google sign-in at the service layer.
"""
import pytest

from carrental.auth import decode_access_token, verify_password
from carrental.exceptions import AuthenticationError, ValidationError
from carrental.models.user import AuthProvider
from carrental.services.auth_service import GOOGLE_ID_TAKEN, INVALID_CREDENTIALS, AuthService
from carrental.services.identity import FederatedIdentity
from conftest import PASSWORD, FakeIdentityProvider, make_user

pytestmark = pytest.mark.anyio


async def test_sign_up_stores_hashed_password(session):
    user = await AuthService(session).sign_up("new@example.com", PASSWORD, "New Rider")

    assert user.password != PASSWORD
    assert verify_password(PASSWORD, user.password)
    assert user.provider == AuthProvider.LOCAL
    assert user.role.name == "customer"


async def test_sign_up_rejects_duplicate_email(session):
    await make_user(session, email="taken@example.com")

    with pytest.raises(ValidationError) as exc:
        await AuthService(session).sign_up("taken@example.com", PASSWORD, "Someone")
    assert exc.value.message == "Email already exist!"


async def test_sign_in_issues_token_with_user_id(session):
    user = await make_user(session)

    signed_in, token = await AuthService(session).sign_in(user.email, PASSWORD)

    assert signed_in.id == user.id
    assert decode_access_token(token)["id"] == user.id


async def test_sign_in_errors_are_indistinguishable(session):
    user = await make_user(session)
    service = AuthService(session)

    with pytest.raises(ValidationError) as wrong_password:
        await service.sign_in(user.email, "Wrong123!")
    with pytest.raises(ValidationError) as unknown_email:
        await service.sign_in("nobody@example.com", PASSWORD)

    assert wrong_password.value.message == unknown_email.value.message == INVALID_CREDENTIALS


async def test_federated_account_cannot_use_password(session):
    await make_user(session, email="g@example.com", password=None, provider=AuthProvider.GOOGLE)

    with pytest.raises(ValidationError) as exc:
        await AuthService(session).sign_in("g@example.com", PASSWORD)
    assert exc.value.message == INVALID_CREDENTIALS


async def test_google_sign_in_creates_account(session):
    provider = FakeIdentityProvider()
    provider.identity = FederatedIdentity(
        uid="google-uid-1", email="fresh@example.com",
        display_name="Fresh Rider", photo_url="https://example.com/me.png",
    )

    user, token = await AuthService(session).google_sign_in("id-token", provider)

    assert provider.tokens == ["id-token"]
    assert user.provider == AuthProvider.GOOGLE
    assert user.google_id == "google-uid-1"
    assert user.password is None
    assert user.avatar == "https://example.com/me.png"
    assert user.fullname == "Fresh Rider"
    assert user.role.name == "customer"
    assert decode_access_token(token)["id"] == user.id


async def test_google_sign_in_upgrades_local_account(session):
    local = await make_user(session, email="both@example.com")
    provider = FakeIdentityProvider()
    provider.identity = FederatedIdentity(uid="google-uid-2", email="both@example.com")

    user, _ = await AuthService(session).google_sign_in("id-token", provider)

    assert user.id == local.id
    assert user.provider == AuthProvider.GOOGLE
    assert user.google_id == "google-uid-2"
    assert user.fullname == "Rider One"


async def test_google_sign_in_keeps_existing_google_account(session):
    existing = await make_user(session, email="g@example.com", password=None, provider=AuthProvider.GOOGLE)
    provider = FakeIdentityProvider()
    provider.identity = FederatedIdentity(uid="another-uid", email="g@example.com")

    user, _ = await AuthService(session).google_sign_in("id-token", provider)

    assert user.id == existing.id
    assert user.google_id is None


async def test_google_sign_in_propagates_provider_rejection(session):
    provider = FakeIdentityProvider()
    provider.error = AuthenticationError("Google sign in failed")

    with pytest.raises(AuthenticationError):
        await AuthService(session).google_sign_in("bad-token", provider)


async def test_google_id_already_linked_elsewhere_is_refused(session):
    await make_user(session, email="first@example.com", password=None,
                    provider=AuthProvider.GOOGLE, google_id="google-uid-3")
    local = await make_user(session, email="second@example.com")
    provider = FakeIdentityProvider()
    provider.identity = FederatedIdentity(uid="google-uid-3", email="second@example.com")

    with pytest.raises(ValidationError) as exc:
        await AuthService(session).google_sign_in("id-token", provider)
    assert exc.value.message == GOOGLE_ID_TAKEN

    unchanged = await AuthService(session).users.get_by_id(local.id)
    assert unchanged.provider == AuthProvider.LOCAL
    assert unchanged.google_id is None
