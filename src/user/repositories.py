from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.repositories import BaseRepository
from src.user.models import User

logger = get_logger(__name__)


class UserRepository(BaseRepository[User]):

    model = User

    async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
        return await self.get_single(session, email=email)
