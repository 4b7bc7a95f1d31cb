from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.errors import is_unique_violation
from src.core.errors.exceptions import DuplicateFieldException
from src.core.pagination import PaginatedResponse, PaginationParams
from src.core.services import BaseService
from src.core.utils.security import mask_email, normalize_email
from src.user.models import User
from src.user.repositories import UserRepository
from src.user.schemas import CreateUserModel, UpdateUserModel, UserViewModel

logger = get_logger(__name__)


class UserService(
    BaseService[User, CreateUserModel, UpdateUserModel, UserRepository, UserViewModel]
):
    def __init__(
        self,
        repository: UserRepository,
    ):
        super().__init__(repository, response_schema=UserViewModel)

    async def create(self, session: AsyncSession, data: CreateUserModel) -> User:
        """
        Create a user.

        Email uniqueness is enforced by the ``uq_users_email`` index, so a taken
        address is detected at write time and reported as a duplicate field.
        """
        try:
            user = await super().create(session, data)
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            logger.info(
                "[CreateUser] Email %s is already registered.", mask_email(data.email)
            )
            raise DuplicateFieldException(
                field="email",
                value=data.email,
                message="Email already exists",
            ) from exc
        logger.debug("[CreateUser] User id=%s created.", user.id)
        return user

    async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
        return await self.repository.get_by_email(session, normalize_email(email))

    async def list_users(
        self,
        session: AsyncSession,
        pagination: PaginationParams,
        disabled: bool | None = None,
    ) -> PaginatedResponse[UserViewModel]:
        """Return one page of users, optionally narrowed to a ``disabled`` state."""
        filters = {} if disabled is None else {"disabled": disabled}
        return await self.get_paginated_list(session, pagination, **filters)
