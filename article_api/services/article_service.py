"""
Article service: store access for the Article aggregate.

Design notes
------------
- Articles are schema-flexible documents.  ``title``, ``category`` and
  ``author_email`` are mapped columns; every other field is carried in
  the JSON ``extra`` column and merged back into the rendered document.
- ``likedBy`` is backed by the ``article_likes`` table.  Its composite
  primary key is the set: adding a liker is an insert that ignores
  conflicts, removing one is a plain delete, so two concurrent toggles
  can never leave a duplicate behind.
- List queries use ``selectinload(Article.likes)`` so rendering N
  articles costs two statements, not N+1.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import delete, insert, select, text
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from article_api.config import settings
from article_api.models import Article, ArticleLike
from article_api.schemas import (
    ArticleCreate,
    ArticleUpdate,
    DeleteResult,
    InsertResult,
    LikeResponse,
    UpdateResult,
)

logger = logging.getLogger(__name__)

# (ORM attribute, document key) for the mapped article fields.
_MAPPED_FIELDS: tuple[tuple[str, str], ...] = (
    ("title", "title"),
    ("category", "category"),
    ("author_email", "authorEmail"),
)

# Dialects with INSERT ... ON CONFLICT DO NOTHING support.
_CONFLICT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _article_to_dict(article: Article) -> dict:
    """Render an Article row as the flat JSON document clients expect."""
    data: dict = {"_id": str(article.id)}
    data.update(article.extra or {})
    for attr, key in _MAPPED_FIELDS:
        value = getattr(article, attr)
        if value is not None:
            data[key] = value
    data["likedBy"] = [like.author_email for like in article.likes]
    data["createdAt"] = article.created_at.isoformat() if article.created_at else None
    return data


async def _list(db: AsyncSession, q) -> list[dict]:
    result = await db.execute(q.options(selectinload(Article.likes)))
    return [_article_to_dict(a) for a in result.scalars().all()]


def _add_liker_stmt(db: AsyncSession, article_id: int, author_email: str):
    """
    Build the add-to-set statement for ``likedBy``.

    Uses ``ON CONFLICT DO NOTHING`` where the dialect has it; elsewhere the
    composite primary key still rejects a duplicate, as an IntegrityError.
    """
    values = {"article_id": article_id, "author_email": author_email}
    dialect = db.get_bind().dialect.name
    conflict_insert = _CONFLICT_INSERTS.get(dialect)
    if conflict_insert is None:
        return insert(ArticleLike).values(**values)
    return (
        conflict_insert(ArticleLike)
        .values(**values)
        .on_conflict_do_nothing(index_elements=["article_id", "author_email"])
    )


async def _advance_id_sequence(db: AsyncSession) -> None:
    """
    Move the Postgres id sequence past any explicitly chosen id.

    SQLite hands out max(id) + 1 on its own and needs nothing.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    await db.execute(
        text(
            "SELECT setval(pg_get_serial_sequence('articles', 'id'), "
            "(SELECT max(id) FROM articles))"
        )
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_recent_articles(db: AsyncSession) -> list[dict]:
    """Return the most recently inserted articles, newest first."""
    q = (
        select(Article)
        .order_by(Article.id.desc())
        .limit(settings.RECENT_ARTICLES_LIMIT)
    )
    return await _list(db, q)


async def get_all_articles(db: AsyncSession) -> list[dict]:
    return await _list(db, select(Article).order_by(Article.id))


async def get_articles_by_author(db: AsyncSession, author_email: str) -> list[dict]:
    q = select(Article).where(Article.author_email == author_email).order_by(Article.id)
    return await _list(db, q)


async def get_articles_by_category(db: AsyncSession, category: str) -> list[dict]:
    q = select(Article).where(Article.category == category).order_by(Article.id)
    return await _list(db, q)


async def get_article(db: AsyncSession, article_id: int) -> dict | None:
    """Return the article document, or None when *article_id* is unknown."""
    q = (
        select(Article)
        .where(Article.id == article_id)
        .options(selectinload(Article.likes))
    )
    article = (await db.execute(q)).scalar_one_or_none()
    if article is None:
        return None
    return _article_to_dict(article)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_article(db: AsyncSession, data: ArticleCreate) -> InsertResult:
    known, extra = data.split_fields()
    article = Article(extra=extra, **known)
    db.add(article)
    await db.flush()
    return InsertResult(insertedId=str(article.id))


async def update_article(
    db: AsyncSession, article_id: int, data: ArticleUpdate
) -> UpdateResult:
    """
    Merge the supplied fields into the article identified by *article_id*.

    Fields the caller did not send are left alone; pass-through fields
    are merged key by key into ``extra``.  When no article has that id
    the payload is inserted as a new article under *article_id*,
    reported back as ``upsertedId``.
    """
    known, extra = data.split_fields()

    result = await db.execute(select(Article).where(Article.id == article_id))
    article = result.scalar_one_or_none()

    if article is None:
        article = Article(id=article_id, extra=extra, **known)
        db.add(article)
        await db.flush()
        await _advance_id_sequence(db)
        logger.info("Article %s not found; upserted", article_id)
        return UpdateResult(
            matchedCount=0,
            modifiedCount=0,
            upsertedCount=1,
            upsertedId=str(article.id),
        )

    modified = False
    for field, value in known.items():
        if getattr(article, field) != value:
            setattr(article, field, value)
            modified = True

    merged = {**(article.extra or {}), **extra}
    if merged != article.extra:
        # Reassign so the JSON column is flagged dirty.
        article.extra = merged
        modified = True

    await db.flush()
    return UpdateResult(matchedCount=1, modifiedCount=int(modified), upsertedCount=0)


async def delete_article(db: AsyncSession, article_id: int) -> DeleteResult:
    """Delete the article; an unknown id acknowledges zero deletions."""
    await db.execute(delete(ArticleLike).where(ArticleLike.article_id == article_id))
    result = await db.execute(delete(Article).where(Article.id == article_id))
    return DeleteResult(deletedCount=result.rowcount)


async def toggle_like(
    db: AsyncSession, article_id: int, author_email: str
) -> LikeResponse | None:
    """
    Flip *author_email*'s membership in the article's ``likedBy`` set.

    The membership read only picks the message; the write itself is an
    unconditional add-to-set or remove-from-set.  Returns None when the
    article does not exist.
    """
    exists = await db.execute(select(Article.id).where(Article.id == article_id))
    if exists.scalar_one_or_none() is None:
        return None

    member_q = select(ArticleLike.author_email).where(
        ArticleLike.article_id == article_id,
        ArticleLike.author_email == author_email,
    )
    already_liked = (await db.execute(member_q)).scalar_one_or_none() is not None

    if already_liked:
        await db.execute(
            delete(ArticleLike).where(
                ArticleLike.article_id == article_id,
                ArticleLike.author_email == author_email,
            )
        )
    else:
        await db.execute(_add_liker_stmt(db, article_id, author_email))

    logger.debug(
        "%s %s article %s", author_email, "unliked" if already_liked else "liked", article_id
    )
    return LikeResponse(
        message="Dislike Successful" if already_liked else "Like Successful",
        liked=not already_liked,
    )
