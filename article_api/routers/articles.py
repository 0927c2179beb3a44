from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession
from article_api.database import get_db
from article_api.dependencies import require_matching_email
from article_api.schemas import (
    ArticleCreate,
    ArticleUpdate,
    DeleteResult,
    InsertResult,
    LikeRequest,
    LikeResponse,
    UpdateResult,
)
from article_api.services import article_service

router = APIRouter(tags=["articles"])

# Store ids are positive 32-bit integers; anything else is rejected with 422.
ArticleId = Annotated[int, Path(ge=1, le=2**31 - 1)]

@router.get("/recent-articles")
async def recent_articles(db: AsyncSession = Depends(get_db)) -> list[dict]:
    return await article_service.get_recent_articles(db)

@router.post("/post-article", response_model=InsertResult)
async def post_article(data: ArticleCreate, db: AsyncSession = Depends(get_db)):
    return await article_service.create_article(db, data)

@router.get("/all-articles")
async def all_articles(db: AsyncSession = Depends(get_db)) -> list[dict]:
    return await article_service.get_all_articles(db)

@router.get("/all-articles/{article_id}")
async def get_article(article_id: ArticleId, db: AsyncSession = Depends(get_db)) -> dict | None:
    return await article_service.get_article(db, article_id)

@router.get("/my-articles/{email}")
async def my_articles(
    email: str = Depends(require_matching_email),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    return await article_service.get_articles_by_author(db, email)

@router.get("/filter-by-category/{category}")
async def filter_by_category(category: str, db: AsyncSession = Depends(get_db)) -> list[dict]:
    return await article_service.get_articles_by_category(db, category)

@router.delete("/dlt-my-article/{article_id}", response_model=DeleteResult)
async def delete_article(article_id: ArticleId, db: AsyncSession = Depends(get_db)):
    return await article_service.delete_article(db, article_id)

@router.put("/edit-my-article/{article_id}", response_model=UpdateResult)
async def edit_article(article_id: ArticleId, data: ArticleUpdate, db: AsyncSession = Depends(get_db)):
    return await article_service.update_article(db, article_id, data)

@router.patch("/like/{article_id}", response_model=LikeResponse)
async def like_article(article_id: ArticleId, data: LikeRequest, db: AsyncSession = Depends(get_db)):
    result = await article_service.toggle_like(db, article_id, data.author_email)
    if result is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return result
