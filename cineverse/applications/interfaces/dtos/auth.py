from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from cineverse.applications.interfaces.dtos.user import UserPublic
from cineverse.domain.models.verification import VerificationPurpose


class Token(BaseModel):
    access_token: str
    token_type: str


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class RegisterResponse(BaseModel):
    message: str
    email: EmailStr
    warning: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    message: str
    role: str
    token: str
    user: Optional[UserPublic] = None


class VerifyRegistrationRequest(BaseModel):
    email: EmailStr
    otp: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    otp: str
    new_password: str = Field(min_length=6)


class SendOtpRequest(BaseModel):
    email: EmailStr
    purpose: VerificationPurpose = VerificationPurpose.REGISTRATION


class CheckOtpRequest(BaseModel):
    email: EmailStr
    otp: str
    purpose: VerificationPurpose = VerificationPurpose.REGISTRATION
