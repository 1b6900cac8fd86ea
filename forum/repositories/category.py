"""Category repository: ordered by name, lookup by name."""

from typing import Optional

from sqlalchemy import select

from forum.models.category import Category
from forum.repositories.base import Repository


class CategoryRepository(Repository[Category]):
    model = Category
    resource = "category"

    def default_order(self):
        return (Category.name.asc(),)

    async def find_one_by_name(self, name: str) -> Optional[Category]:
        result = await self.session.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()
