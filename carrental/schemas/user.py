"""
Pydantic schemas for User and Authentication.
"""
from pydantic import BaseModel, EmailStr, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional
import re
from carrental.models.user import AuthProvider

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[!@#$%^&*])(?=.{8,})")


class RoleOut(BaseModel):
    """Role as exposed to clients."""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class User(BaseModel):
    """Schema for user responses. The password hash is never exposed."""
    id: int
    email: str
    fullname: Optional[str] = None
    address: Optional[str] = None
    provider: AuthProvider
    avatar: Optional[str] = None
    role: Optional[RoleOut] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """User fields embedded in an order."""
    id: int
    fullname: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SignUpRequest(BaseModel):
    """Schema for registering a local account."""
    email: EmailStr
    password: str = Field(min_length=8)
    fullname: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError(
                "Password must have at least 1 uppercase, 1 lowercase, "
                "1 number, and 1 special character (i.e. !@#$%^&*)"
            )
        return value


class SignInRequest(BaseModel):
    """Schema for login request."""
    email: EmailStr
    password: str


class GoogleSignInRequest(BaseModel):
    """Schema for federated sign-in with a Google ID token."""
    idToken: str = Field(min_length=1)


class UserData(BaseModel):
    """``data`` payload of whoami / sign-up."""
    user: User


class TokenData(BaseModel):
    """``data`` payload of a successful sign-in."""
    user: User
    token: str
