import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from article_api.config import settings
from article_api.database import Database
from article_api.log import setup_logging
from article_api.middleware import RequestLoggingMiddleware
from article_api.routers import articles, auth, comments

logger = logging.getLogger(__name__)

setup_logging(settings.LOG_LEVEL)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    await database.connect()
    app.state.database = database
    yield
    # Shutdown
    await database.disconnect()

app = FastAPI(
    title="Article API",
    description="Articles, likes and comments backed by a document store",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(articles.router)
app.include_router(comments.router)

@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "[%s] Document store failure on %s %s",
        getattr(request.state, "request_id", "-"),
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Document store error"})

@app.get("/", response_class=PlainTextResponse)
async def root():
    return "a new era of knowledge begun"

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}


def run() -> None:
    """Console entry point: serve the app on ``HOST``/``PORT``."""
    uvicorn.run("article_api.main:app", host=settings.HOST, port=settings.PORT)
