from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Keys owned by the store; dropped from incoming documents.
RESERVED_KEYS: frozenset[str] = frozenset({"_id", "likedBy", "createdAt"})


# --- Article ---

class ArticleBase(BaseModel):
    """
    Loosely validated article document.

    Only the fields the API filters on are declared; anything else the
    caller sends (``body``, ``image``, ``authorName`` ...) is kept as an
    extra and stored as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str | None = Field(None, max_length=300)
    category: str | None = Field(None, max_length=100)
    author_email: str | None = Field(None, alias="authorEmail", max_length=255)

    def split_fields(self) -> tuple[dict[str, Any], dict[str, Any]]:
        """
        Return ``(known, extra)`` for the fields the caller actually sent.

        ``known`` is keyed by model field name, ``extra`` by the raw key.
        """
        sent = self.model_dump(exclude_unset=True)
        known = {k: v for k, v in sent.items() if k in ArticleBase.model_fields}
        extra = {
            k: v
            for k, v in (self.model_extra or {}).items()
            if k not in RESERVED_KEYS
        }
        return known, extra


class ArticleCreate(ArticleBase):
    title: str = Field(min_length=1, max_length=300)
    author_email: str = Field(alias="authorEmail", min_length=1, max_length=255)


class ArticleUpdate(ArticleBase):
    pass


# --- Like ---

class LikeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    author_email: str = Field(alias="authorEmail", min_length=1, max_length=255)


class LikeResponse(BaseModel):
    message: str
    liked: bool


# --- Comment ---

class CommentCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    article_id: str = Field(min_length=1, max_length=64)

    def extra_fields(self) -> dict[str, Any]:
        return {
            k: v
            for k, v in (self.model_extra or {}).items()
            if k not in RESERVED_KEYS
        }


# --- Token ---

class TokenRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)


class TokenResponse(BaseModel):
    token: str
    message: str


# --- Store acknowledgments ---
# Field names follow the document store driver's JSON so existing
# clients keep working.

class InsertResult(BaseModel):
    acknowledged: bool = True
    insertedId: str


class UpdateResult(BaseModel):
    acknowledged: bool = True
    matchedCount: int
    modifiedCount: int
    upsertedCount: int
    upsertedId: str | None = None


class DeleteResult(BaseModel):
    acknowledged: bool = True
    deletedCount: int
