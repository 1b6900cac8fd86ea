"""Forum — Category Model (seeded by forum.fixtures, no controller)."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from forum.database import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
