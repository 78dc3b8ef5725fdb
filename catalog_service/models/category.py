from __future__ import annotations

from sqlalchemy import Identity, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_service.database.base import Base, TimestampMixin


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
