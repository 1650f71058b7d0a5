# vocab_backend/app/models/__init__.py
# ============================================================
# 单词聚合：words + 四个子表
# ============================================================
from .word import (
    # 常量
    WordStatus,
    VALID_WORD_STATUSES,

    # 模型
    Word,
    Definition,
    Example,
    Etymology,
    RelatedWord,
)

# ============================================================
# 暴露的公共接口
# ============================================================
__all__ = [
    "WordStatus",
    "VALID_WORD_STATUSES",
    "Word",
    "Definition",
    "Example",
    "Etymology",
    "RelatedWord",
]
