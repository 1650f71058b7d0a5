import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./vocabulary.db")
    DATABASE_ECHO = _as_bool(os.getenv("DATABASE_ECHO", "false"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    # 前端直接调用本服务，默认放开
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

config = Config()
