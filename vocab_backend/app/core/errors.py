"""
WordStore 错误类型

API 层按类型映射状态码:
    NotFoundError   -> 404
    ConflictError   -> 409
    ValidationError -> 422
    StorageError    -> 500
"""


class WordStoreError(Exception):
    """所有 WordStore 错误的基类"""


class ValidationError(WordStoreError):
    """缺少必填字段或 status 取值非法"""


class NotFoundError(WordStoreError):
    """引用的单词 id 不存在"""

    def __init__(self, word_id: int):
        super().__init__(f"Word {word_id} not found")
        self.word_id = word_id


class ConflictError(WordStoreError):
    """word 字段违反唯一约束"""

    def __init__(self, word: str):
        super().__init__(f"Word '{word}' already exists")
        self.word = word


class StorageError(WordStoreError):
    """底层数据库失败（事务已回滚）"""
