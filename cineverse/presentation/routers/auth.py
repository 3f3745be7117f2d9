from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from cineverse.applications.interfaces.dtos.auth import (
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    Token,
    VerifyRegistrationRequest,
)
from cineverse.applications.interfaces.dtos.message import Message
from cineverse.applications.interfaces.dtos.user import UserPublic
from cineverse.applications.services.verification_service import VerificationService
from cineverse.applications.use_cases.auth.login import LoginUserUseCase
from cineverse.applications.use_cases.auth.password_reset import RequestPasswordResetUseCase, ResetPasswordUseCase
from cineverse.applications.use_cases.auth.registration import RegisterUserUseCase, VerifyRegistrationUseCase
from cineverse.domain.exceptions import AuthenticationError, NotFoundError
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.domain.ports.services.auth_service import AuthService
from cineverse.infrastructure.config.dependencies import (
    get_auth_service,
    get_settings,
    get_user_repository,
    get_verification_service,
)
from cineverse.infrastructure.config.settings import Settings

router = APIRouter(prefix="/auth", tags=["auth"])

OAuth2Form = Annotated[OAuth2PasswordRequestForm, Depends()]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
VerificationServiceDep = Annotated[VerificationService, Depends(get_verification_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.post("/register", status_code=HTTPStatus.CREATED, response_model=RegisterResponse)
async def register(
    request: RegisterRequest,
    user_repository: UserRepositoryDep,
    auth_service: AuthServiceDep,
    verification_service: VerificationServiceDep,
):
    use_case = RegisterUserUseCase(user_repository, auth_service, verification_service)
    return await use_case.execute(request)


@router.post("/verify-otp", response_model=Message)
async def verify_registration(
    request: VerifyRegistrationRequest,
    user_repository: UserRepositoryDep,
    verification_service: VerificationServiceDep,
):
    use_case = VerifyRegistrationUseCase(user_repository, verification_service)
    await use_case.execute(request.email, request.otp)
    return {"message": "Email verified successfully"}


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest, user_repository: UserRepositoryDep, auth_service: AuthServiceDep, settings: SettingsDep
):
    use_case = LoginUserUseCase(user_repository, auth_service, settings)
    result = await use_case.execute(request.email, request.password)
    return LoginResponse(
        message="Login successful",
        role=result.role,
        token=result.token,
        user=UserPublic.from_domain(result.user) if result.user else None,
    )


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2Form, user_repository: UserRepositoryDep, auth_service: AuthServiceDep, settings: SettingsDep
):
    try:
        use_case = LoginUserUseCase(user_repository, auth_service, settings)
        result = await use_case.execute(form_data.username, form_data.password)
    except (NotFoundError, AuthenticationError):
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    return {"access_token": result.token, "token_type": "bearer"}


@router.post("/request-reset-otp", response_model=Message)
async def request_password_reset(
    request: PasswordResetRequest,
    user_repository: UserRepositoryDep,
    verification_service: VerificationServiceDep,
):
    use_case = RequestPasswordResetUseCase(user_repository, verification_service)
    await use_case.execute(request.email)
    return {"message": "Password reset OTP sent"}


@router.post("/reset-password-otp", response_model=Message)
async def reset_password(
    request: ResetPasswordRequest,
    user_repository: UserRepositoryDep,
    auth_service: AuthServiceDep,
    verification_service: VerificationServiceDep,
):
    use_case = ResetPasswordUseCase(user_repository, auth_service, verification_service)
    await use_case.execute(request.email, request.otp, request.new_password)
    return {"message": "Password reset successful"}
