import logging

from fastapi import APIRouter
from article_api.schemas import TokenRequest, TokenResponse
from article_api.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

@router.post("/jwt", response_model=TokenResponse)
async def issue_token(data: TokenRequest):
    token = create_access_token(data.email)
    logger.info("Issued token for %s", data.email)
    return TokenResponse(token=token, message="Token issued successfully")
