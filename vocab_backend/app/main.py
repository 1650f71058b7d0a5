# vocab_backend/app/main.py
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vocab_backend.app.api import words
from vocab_backend.app.core.config import config
from vocab_backend.app.core.database import Database
from vocab_backend.app.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from vocab_backend.app.repositories.word_store import WordStore

logger = logging.getLogger(__name__)


def get_app(database: Optional[Database] = None) -> FastAPI:
    if database is None:
        database = Database(config.DATABASE_URL, echo=config.DATABASE_ECHO)

    # --- 启动时打开数据库，关闭时释放 ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        logger.info("✅ Vocabulary API started")
        yield
        database.close()
        logger.info("👋 Vocabulary API stopped")

    app = FastAPI(title="Vocabulary API", lifespan=lifespan)
    app.state.database = database
    app.state.word_store = WordStore(database)

    # --- 中间件 ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- 注册路由 ---
    app.include_router(words.router, prefix="/api", tags=["words"])

    # --- 错误映射 ---
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def store_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Database error"})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    # --- 健康检查 ---
    @app.get("/")
    def health_check():
        return {"status": "running", "words": app.state.word_store.count_words()}

    return app
