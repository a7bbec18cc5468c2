"""
Authentication routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.auth import get_current_user
from carrental.database import get_db
from carrental.models.user import User
from carrental.schemas.common import ApiResponse, api_send
from carrental.schemas.user import (
    GoogleSignInRequest, SignInRequest, SignUpRequest, TokenData, User as UserSchema, UserData,
)
from carrental.services.auth_service import AuthService
from carrental.services.identity import GoogleIdentityProvider, get_identity_provider

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=ApiResponse[UserData])
async def sign_up(body: SignUpRequest, db: AsyncSession = Depends(get_db)):
    """
    Register a local account.
    """
    user = await AuthService(db).sign_up(body.email, body.password, body.fullname)
    return api_send("Sign up successfully", {"user": UserSchema.model_validate(user)})


@router.post("/signin", response_model=ApiResponse[TokenData])
async def sign_in(body: SignInRequest, db: AsyncSession = Depends(get_db)):
    """
    Exchange email and password for a bearer token.
    """
    user, token = await AuthService(db).sign_in(body.email, body.password)
    return api_send("Sign in successfully", {"user": UserSchema.model_validate(user), "token": token})


@router.post("/googleSignIn", response_model=ApiResponse[TokenData])
async def google_sign_in(
    body: GoogleSignInRequest,
    db: AsyncSession = Depends(get_db),
    provider: GoogleIdentityProvider = Depends(get_identity_provider),
):
    """
    Sign in (or sign up) with a Google ID token.
    """
    user, token = await AuthService(db).google_sign_in(body.idToken, provider)
    return api_send(
        "Sign in with Google successfully",
        {"user": UserSchema.model_validate(user), "token": token},
    )


@router.get("/whoami", response_model=ApiResponse[UserData])
async def who_am_i(current_user: User = Depends(get_current_user)):
    """
    Return the authenticated user.
    """
    return api_send("Get user successfully", {"user": UserSchema.model_validate(current_user)})
