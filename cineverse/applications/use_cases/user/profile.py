from cineverse.applications.interfaces.dtos.user import UserPublic, UserUpdate
from cineverse.domain.exceptions import ConflictError, NotFoundError
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.user_repository import UserRepository


class GetProfileUseCase:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    async def execute(self, user_id: int) -> UserPublic:
        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserPublic.from_domain(user)


class UpdateProfileUseCase:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    async def execute(self, user: User, update: UserUpdate) -> UserPublic:
        if update.username and update.username != user.username:
            taken = await self.user_repository.get_by_username(update.username)
            if taken and taken.id != user.id:
                raise ConflictError("Username already exists")

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        updated = user.model_copy(update=changes)
        saved = await self.user_repository.update(updated)
        if saved.id is None:
            raise RuntimeError("User update failed - no ID assigned")
        return UserPublic.from_domain(saved)
