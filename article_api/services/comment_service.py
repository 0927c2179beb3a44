"""
Comment service: append-only comments attached to articles.

Comments cannot be edited or deleted through the API.  ``article_id`` is
stored as the string the client sent and is not checked against the
articles collection.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from article_api.models import Comment
from article_api.schemas import CommentCreate, InsertResult


def _comment_to_dict(comment: Comment) -> dict:
    data: dict = {"_id": str(comment.id)}
    data.update(comment.extra or {})
    data["article_id"] = comment.article_id
    data["createdAt"] = comment.created_at.isoformat() if comment.created_at else None
    return data


async def add_comment(db: AsyncSession, data: CommentCreate) -> InsertResult:
    comment = Comment(article_id=data.article_id, extra=data.extra_fields())
    db.add(comment)
    await db.flush()
    return InsertResult(insertedId=str(comment.id))


async def get_comments_for_article(db: AsyncSession, article_id: str) -> list[dict]:
    """Return every comment whose ``article_id`` equals *article_id*, oldest first."""
    q = select(Comment).where(Comment.article_id == article_id).order_by(Comment.id)
    result = await db.execute(q)
    return [_comment_to_dict(c) for c in result.scalars().all()]
