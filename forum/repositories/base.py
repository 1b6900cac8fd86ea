"""
Forum — Repository Base Class
==============================

What:  Shared load / page / save / delete operations for one ORM model.
Why:   Controllers orchestrate a request; they should not build queries or
       translate SQLAlchemy failures themselves.
How:   Each subclass names its model, its page size and its default order.
       save() and delete() flush immediately so ids are assigned and
       constraint or version conflicts surface inside the action.

Error Handling Strategy:
    - Missing row for get_or_404()  → NotFoundError (404)
    - StaleDataError on flush       → ConcurrencyError (500, not retried)
    - Any other SQLAlchemyError     → DatabaseError (500)
"""

import logging
from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from forum.database import Base
from forum.exceptions import ConcurrencyError, DatabaseError, NotFoundError
from forum.pagination import Page, paginate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Base repository; subclasses set `model`, `resource` and `PAGINATOR_ITEMS_PER_PAGE`."""

    model: Type[ModelT]
    resource: str = "resource"
    PAGINATOR_ITEMS_PER_PAGE: int = 10

    def __init__(self, session: AsyncSession):
        self.session = session

    def default_order(self) -> Sequence[Any]:
        return (self.model.id.desc(),)

    def query_all(self) -> Select:
        """Select every row in the repository's default order (not executed)."""
        return select(self.model).order_by(*self.default_order())

    async def get(self, entity_id: int) -> Optional[ModelT]:
        return await self.session.get(self.model, entity_id)

    async def get_or_404(self, entity_id: int) -> ModelT:
        entity = await self.get(entity_id)
        if entity is None:
            raise NotFoundError(resource=self.resource, resource_id=entity_id)
        return entity

    async def find_all(self) -> List[ModelT]:
        result = await self.session.execute(self.query_all())
        return list(result.scalars().all())

    async def paginate(self, page: int) -> Page:
        return await paginate(
            self.session,
            self.query_all(),
            page=page,
            per_page=self.PAGINATOR_ITEMS_PER_PAGE,
        )

    async def save(self, entity: ModelT) -> ModelT:
        """Insert or update `entity` and flush so its id is available."""
        self.session.add(entity)
        await self._flush()
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.session.delete(entity)
        await self._flush()

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except StaleDataError as e:
            logger.warning("Version conflict on %s: %s", self.resource, str(e))
            raise ConcurrencyError(resource=self.resource) from e
        except SQLAlchemyError as e:
            logger.error("Database error on %s: %s", self.resource, str(e), exc_info=True)
            raise DatabaseError(context={"resource": self.resource, "error_type": type(e).__name__}) from e
