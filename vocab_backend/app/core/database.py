"""
关系型数据库连接管理

Database 是显式创建、显式关闭的存储句柄：
应用启动时 open()，关闭时 close()，不再使用模块级全局 engine。
"""
from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from vocab_backend.app.core.errors import StorageError, WordStoreError

logger = logging.getLogger(__name__)

# 创建基本的声明模型
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite 默认不执行外键约束，ON DELETE CASCADE 依赖这一项
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """SQLAlchemy engine + session 工厂"""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def open(self) -> "Database":
        """创建 engine 并建表（幂等）"""
        if self.engine is not None:
            return self

        connect_args = {}
        if self.is_sqlite:
            # FastAPI 在线程池里执行同步路由
            connect_args["check_same_thread"] = False

        try:
            self.engine = create_engine(self.database_url, echo=self.echo, connect_args=connect_args)
            if self.is_sqlite:
                event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self.engine,
            )
            self.create_schema()
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to open database {self.database_url}: {e}")
            self.close()
            raise StorageError(f"Failed to open database: {e}") from e

        logger.info(f"✅ Connected to database: {self.database_url}")
        return self

    def create_schema(self):
        # 确保模型已注册到 Base.metadata
        import vocab_backend.app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready")

    def close(self):
        """释放连接池"""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection closed")
        self.engine = None
        self.SessionLocal = None

    def _new_session(self) -> Session:
        if self.SessionLocal is None:
            raise RuntimeError("Database not opened. Call Database.open() first.")
        return self.SessionLocal()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """只读会话：不提交，结束时关闭"""
        db = self._new_session()
        try:
            yield db
        except SQLAlchemyError as e:
            logger.error(f"Read failed: {e}", exc_info=True)
            raise StorageError(str(e)) from e
        finally:
            db.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        写事务作用域:
            正常退出 -> commit
            任何异常 -> rollback 后重新抛出
            最后总是关闭 session
        SQLAlchemy 异常统一包装为 StorageError
        """
        db = self._new_session()
        try:
            yield db
            db.commit()
        except WordStoreError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Transaction rolled back: {e}", exc_info=True)
            raise StorageError(str(e)) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
