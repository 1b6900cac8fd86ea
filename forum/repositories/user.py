"""User repository: ordered by e-mail, lookup by e-mail."""

from typing import Optional

from sqlalchemy import func, select

from forum.config import settings
from forum.models.user import User
from forum.repositories.base import Repository


class UserRepository(Repository[User]):
    model = User
    resource = "user"
    PAGINATOR_ITEMS_PER_PAGE = settings.users_per_page

    def default_order(self):
        return (User.email.asc(),)

    async def find_one_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup; e-mails are stored lower-cased."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()
