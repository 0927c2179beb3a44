from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from article_api.database import Base


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------
class Article(Base):
    """
    A schema-flexible article document.

    ``category`` and ``author_email`` are real columns because the API
    filters on them; every other caller-supplied field lives in ``extra``.
    """

    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    author_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    extra: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # lazy="raise": every read opts in with selectinload
    likes: Mapped[List["ArticleLike"]] = relationship(
        "ArticleLike", back_populates="article", lazy="raise"
    )


# ---------------------------------------------------------------------------
# ArticleLike: one row per member of an article's likedBy set
# ---------------------------------------------------------------------------
class ArticleLike(Base):
    __tablename__ = "article_likes"

    article_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True
    )
    # Composite primary key keeps each liker in the set at most once.
    author_email: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    article: Mapped["Article"] = relationship("Article", back_populates="likes", lazy="raise")


# ---------------------------------------------------------------------------
# Comment
# ---------------------------------------------------------------------------
class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Plain string reference; comments may point at articles that no longer exist.
    article_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    extra: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
