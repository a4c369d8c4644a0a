import asyncio

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.session import get_session
from src.core.errors.exceptions import InstanceAlreadyExistsException
from src.core.utils.security import generate_api_key, hash_password
from src.user.auth.schemas import CreateUserModel
from src.user.dependencies import get_user_repository
from src.user.repositories import UserRepository
from src.user.schemas import RegisteredUserViewModel

logger = get_logger(__name__)


class RegisterUseCase:
    """Use case for user registration."""

    def __init__(self, session: AsyncSession, users: UserRepository) -> None:
        self.session = session
        self.users = users

    async def execute(self, data: CreateUserModel) -> RegisteredUserViewModel:
        if await self.users.exists(self.session, username=data.username):
            raise InstanceAlreadyExistsException(
                "username is already taken",
                additional_info={"username": data.username},
            )

        password_hash = await asyncio.to_thread(hash_password, data.password)
        user = await self.users.create(
            self.session,
            data={
                "name": data.name,
                "username": data.username,
                "password_hash": password_hash,
                "api_key": generate_api_key(),
            },
            commit=True,
        )
        logger.info("[Register User] User '%s' registered successfully.", data.username)
        return RegisteredUserViewModel.model_validate(user)


def get_register_use_case(
    session: AsyncSession = Depends(get_session),
    users: UserRepository = Depends(get_user_repository),
) -> RegisterUseCase:
    return RegisterUseCase(session=session, users=users)
