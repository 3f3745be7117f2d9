from typing import Annotated

from fastapi import APIRouter, Depends

from cineverse.applications.interfaces.dtos.user import UserPublic, UserUpdate
from cineverse.applications.use_cases.user.profile import GetProfileUseCase, UpdateProfileUseCase
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.infrastructure.config.dependencies import get_current_user, get_user_repository

router = APIRouter(prefix="/users", tags=["users"])

UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]


@router.get("/me", response_model=UserPublic)
async def read_profile(current_user: CurrentUserDep, user_repository: UserRepositoryDep):
    use_case = GetProfileUseCase(user_repository)
    return await use_case.execute(current_user.id)


@router.put("/me", response_model=UserPublic)
async def update_profile(update: UserUpdate, current_user: CurrentUserDep, user_repository: UserRepositoryDep):
    use_case = UpdateProfileUseCase(user_repository)
    return await use_case.execute(current_user, update)
