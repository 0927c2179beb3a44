from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from article_api.database import get_db
from article_api.schemas import CommentCreate, InsertResult
from article_api.services import comment_service

router = APIRouter(tags=["comments"])

@router.post("/comment-article", response_model=InsertResult)
async def comment_article(data: CommentCreate, db: AsyncSession = Depends(get_db)):
    return await comment_service.add_comment(db, data)

@router.get("/article-comments/{article_id}")
async def article_comments(article_id: str, db: AsyncSession = Depends(get_db)) -> list[dict]:
    return await comment_service.get_comments_for_article(db, article_id)
