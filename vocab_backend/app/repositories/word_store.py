"""
WordStore - 单词聚合的事务性读写

一个单词 = words 表一行 + 四个子集合（definitions / examples / etymologies / related_words）。
所有写操作都在 Database.transaction() 中完成：要么全部提交，要么全部回滚。
"""
from typing import Any, Iterable, List, Mapping, Optional, Union
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from vocab_backend.app.core.database import Database
from vocab_backend.app.core.errors import ConflictError, NotFoundError, ValidationError
from vocab_backend.app.models.word import (
    Word,
    WordStatus,
    Definition,
    Example,
    Etymology,
    RelatedWord,
)
from vocab_backend.app.schemas.word import ImportResult, WordDetail, WordSummary

logger = logging.getLogger(__name__)

MIN_ROW_ID = -(2 ** 63)
MAX_ROW_ID = 2 ** 63 - 1

CREATE_FIELDS = frozenset((
    "word", "phonetic", "part_of_speech", "status",
    "definitions", "examples", "etymologies", "related_words",
))

# (payload 键, 模型, 必填文本字段, 可选字段)
CHILD_COLLECTIONS = (
    ("definitions", Definition, "definition", ("part_of_speech",)),
    ("examples", Example, "example", ("translation",)),
    ("etymologies", Etymology, "etymology", ()),
    ("related_words", RelatedWord, "related_word", ("relationship_type",)),
)


def _as_dict(item: Any) -> dict:
    # 同时接受 pydantic 模型和普通 dict
    if hasattr(item, "model_dump"):
        return item.model_dump()
    if isinstance(item, Mapping):
        return dict(item)
    raise ValidationError(f"Expected an object, got {type(item).__name__}: {item!r}")


def _is_storable_id(word_id: Any) -> bool:
    # SQLite INTEGER 为有符号 64 位，超出范围的 id 不可能存在
    return isinstance(word_id, int) and MIN_ROW_ID <= word_id <= MAX_ROW_ID


def _coerce_status(status: Union[str, WordStatus]) -> WordStatus:
    try:
        return WordStatus(status)
    except ValueError:
        raise ValidationError(
            f"Invalid status '{status}', expected one of: unknown, learning, mastered"
        ) from None


def _build_rows(model, required: str, optional: Iterable[str], items) -> list:
    """校验并构造子表行（尚未绑定 word_id）"""
    rows = []
    for item in items or ():
        data = _as_dict(item)
        text = data.get(required)
        if not isinstance(text, str) or not text.strip():
            raise ValidationError(f"'{required}' is required for every {model.__tablename__} entry")
        fields = {required: text}
        for name in optional:
            fields[name] = data.get(name)
        rows.append(model(**fields))
    return rows


class WordStore:
    """单词仓库，依赖显式传入的 Database 句柄"""

    def __init__(self, database: Database):
        self.database = database

    # ------------------------------------------------------------------
    # 写操作
    # ------------------------------------------------------------------
    def create_word(
        self,
        word: str,
        phonetic: Optional[str] = None,
        part_of_speech: Optional[str] = None,
        status: Union[str, WordStatus] = WordStatus.UNKNOWN,
        definitions: Iterable = (),
        examples: Iterable = (),
        etymologies: Iterable = (),
        related_words: Iterable = (),
    ) -> int:
        """
        新增单词及其全部子数据，返回新单词的 id。
        重复的 word 抛出 ConflictError，数据库不留下任何行。
        """
        if not isinstance(word, str) or not word.strip():
            raise ValidationError("'word' must be a non-empty string")
        status = _coerce_status(status)

        payload = {
            "definitions": definitions,
            "examples": examples,
            "etymologies": etymologies,
            "related_words": related_words,
        }
        children = [
            _build_rows(model, required, optional, payload[key])
            for key, model, required, optional in CHILD_COLLECTIONS
        ]

        with self.database.transaction() as db:
            entry = Word(
                word=word,
                phonetic=phonetic,
                part_of_speech=part_of_speech,
                status=status.value,
                review_count=0,
            )
            db.add(entry)
            try:
                db.flush()
            except IntegrityError as e:
                logger.warning(f"Duplicate word rejected: {word!r}")
                raise ConflictError(word) from e

            for rows in children:
                for row in rows:
                    row.word_id = entry.id
                db.add_all(rows)
            db.flush()
            word_id = entry.id

        logger.info(f"Created word {word!r} (id={word_id})")
        return word_id

    def update_word_status(self, word_id: int, status: Union[str, WordStatus]) -> None:
        """更新掌握程度，同时写入 last_reviewed_at 并将 review_count 加一"""
        status = _coerce_status(status)
        if not _is_storable_id(word_id):
            logger.warning(f"Status update for missing word id={word_id}")
            raise NotFoundError(word_id)
        with self.database.transaction() as db:
            affected = (
                db.query(Word)
                .filter(Word.id == word_id)
                .update(
                    {
                        Word.status: status.value,
                        Word.last_reviewed_at: func.now(),
                        Word.review_count: Word.review_count + 1,
                    },
                    synchronize_session=False,
                )
            )
            if affected == 0:
                logger.warning(f"Status update for missing word id={word_id}")
                raise NotFoundError(word_id)

    def delete_word(self, word_id: int) -> None:
        """删除单词，子表行由外键 ON DELETE CASCADE 一并删除"""
        if not _is_storable_id(word_id):
            logger.warning(f"Delete for missing word id={word_id}")
            raise NotFoundError(word_id)
        with self.database.transaction() as db:
            affected = (
                db.query(Word)
                .filter(Word.id == word_id)
                .delete(synchronize_session=False)
            )
            if affected == 0:
                logger.warning(f"Delete for missing word id={word_id}")
                raise NotFoundError(word_id)
        logger.info(f"Deleted word id={word_id}")

    def update_word_details(self, word_id: int, details: Union[Mapping, Any]) -> None:
        """
        更新单词详情:
        - phonetic / part_of_speech 总是覆盖（缺省为空字符串）
        - details 中出现的集合：先删除该单词的全部旧行，再插入新行
        - 未出现（或为 None）的集合保持不变
        整个过程在同一个事务内完成。
        """
        with self.database.transaction() as db:
            entry = db.get(Word, word_id) if _is_storable_id(word_id) else None
            if entry is None:
                logger.warning(f"Details update for missing word id={word_id}")
                raise NotFoundError(word_id)

            data = _as_dict(details)
            replacements = []
            for key, model, required, optional in CHILD_COLLECTIONS:
                items = data.get(key)
                if items is None:
                    continue
                replacements.append((model, _build_rows(model, required, optional, items)))

            entry.phonetic = data.get("phonetic") or ""
            entry.part_of_speech = data.get("part_of_speech") or ""

            for model, rows in replacements:
                db.query(model).filter(model.word_id == word_id).delete(synchronize_session=False)
                for row in rows:
                    row.word_id = word_id
                db.add_all(rows)

        logger.info(f"Updated details of word id={word_id} ({len(replacements)} collections replaced)")

    def import_words(self, items: Iterable) -> ImportResult:
        """
        批量导入；每个单词单独一个事务。
        已存在的单词计入 skipped，不会中断整批导入。
        """
        imported = 0
        skipped = 0
        for item in items:
            try:
                data = _as_dict(item)
                unknown = set(data) - CREATE_FIELDS
                if unknown:
                    raise ValidationError(f"Unknown word fields: {', '.join(sorted(unknown))}")
                self.create_word(**data)
                imported += 1
            except ConflictError:
                skipped += 1

        logger.info(f"Import finished: {imported} imported, {skipped} skipped")
        return ImportResult(imported=imported, skipped=skipped)

    # ------------------------------------------------------------------
    # 读操作
    # ------------------------------------------------------------------
    def get_all_words(self) -> List[WordSummary]:
        with self.database.session() as db:
            words = db.query(Word).order_by(Word.word.asc()).all()
            return [WordSummary.model_validate(w) for w in words]

    def get_word_details(self, word_id: int) -> Optional[WordDetail]:
        """返回完整聚合；单词不存在时返回 None（让 API 层处理 404）"""
        if not _is_storable_id(word_id):
            return None
        with self.database.session() as db:
            entry = (
                db.query(Word)
                .options(
                    selectinload(Word.definitions),
                    selectinload(Word.examples),
                    selectinload(Word.etymologies),
                    selectinload(Word.related_words),
                )
                .filter(Word.id == word_id)
                .first()
            )
            if entry is None:
                return None
            return WordDetail.model_validate(entry)

    def search_words(self, term: str) -> List[WordSummary]:
        """子串匹配（LIKE，大小写不敏感），% 和 _ 按字面匹配"""
        with self.database.session() as db:
            words = (
                db.query(Word)
                .filter(Word.word.contains(term or "", autoescape=True))
                .order_by(Word.word.asc())
                .all()
            )
            return [WordSummary.model_validate(w) for w in words]

    def get_words_by_status(self, status: Union[str, WordStatus]) -> List[WordSummary]:
        status = _coerce_status(status)
        with self.database.session() as db:
            words = (
                db.query(Word)
                .filter(Word.status == status.value)
                .order_by(Word.word.asc())
                .all()
            )
            return [WordSummary.model_validate(w) for w in words]

    def count_words(self) -> int:
        with self.database.session() as db:
            return db.query(func.count(Word.id)).scalar()
