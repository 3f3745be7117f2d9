from typing import Annotated

from fastapi import APIRouter, Depends

from cineverse.applications.interfaces.dtos.auth import CheckOtpRequest, SendOtpRequest
from cineverse.applications.interfaces.dtos.message import Message
from cineverse.applications.services.verification_service import VerificationService
from cineverse.applications.use_cases.auth.otp import CheckOtpUseCase, SendOtpUseCase
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.infrastructure.config.dependencies import get_user_repository, get_verification_service

router = APIRouter(prefix="/otp", tags=["otp"])

UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
VerificationServiceDep = Annotated[VerificationService, Depends(get_verification_service)]


@router.post("/send", response_model=Message)
async def send_otp(
    request: SendOtpRequest, user_repository: UserRepositoryDep, verification_service: VerificationServiceDep
):
    use_case = SendOtpUseCase(user_repository, verification_service)
    await use_case.execute(request.email, request.purpose)
    return {"message": "OTP sent successfully"}


@router.post("/verify", response_model=Message)
async def verify_otp(
    request: CheckOtpRequest, user_repository: UserRepositoryDep, verification_service: VerificationServiceDep
):
    use_case = CheckOtpUseCase(user_repository, verification_service)
    await use_case.execute(request.email, request.otp, request.purpose)
    return {"message": "OTP verified successfully"}
