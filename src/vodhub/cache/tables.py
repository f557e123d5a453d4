"""SQLAlchemy ORM models for the SQLite cache backend.

Result data is stored as compact JSON text; timestamps are epoch milliseconds
so that expiry arithmetic matches the file-backed store.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Index, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for cache tables."""

    pass


class SearchCacheTable(Base):
    """Merged search results keyed by case-folded keyword."""

    __tablename__ = "search_cache"

    keyword: Mapped[str] = mapped_column(Text, primary_key=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)

    # Lifetime in seconds, 0 never expires
    ttl: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (Index("idx_search_created", created_at),)


class DetailCacheTable(Base):
    """Detail payloads keyed by ``{site_key}_{id}``."""

    __tablename__ = "detail_cache"

    cache_key: Mapped[str] = mapped_column(Text, primary_key=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
