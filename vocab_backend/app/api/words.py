# vocab_backend/app/api/words.py
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from vocab_backend.app.repositories.word_store import WordStore
from vocab_backend.app.schemas.word import (
    ImportResult,
    MigrateDataRequest,
    WordCreate,
    WordDetail,
    WordDetailsUpdate,
    WordStatusUpdate,
    WordSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# 获取仓库实例（由 get_app 在启动时放到 app.state）
def get_word_store(request: Request) -> WordStore:
    return request.app.state.word_store


def _load_detail(store: WordStore, word_id: int) -> WordDetail:
    detail = store.get_word_details(word_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Word not found")
    return detail


# -------------------- 查询 --------------------
@router.get("/words", response_model=List[WordSummary])
def list_words(store: WordStore = Depends(get_word_store)):
    """按 word 升序返回全部单词（不含子数据）"""
    return store.get_all_words()


@router.get("/words/{word_id}", response_model=WordDetail)
def get_word(word_id: int, store: WordStore = Depends(get_word_store)):
    return _load_detail(store, word_id)


@router.get("/search", response_model=List[WordSummary])
def search_words(term: str = "", store: WordStore = Depends(get_word_store)):
    # 没有匹配时返回空数组，而不是 404
    return store.search_words(term)


@router.get("/words-by-status/{word_status}", response_model=List[WordSummary])
def list_words_by_status(word_status: str, store: WordStore = Depends(get_word_store)):
    return store.get_words_by_status(word_status)


# -------------------- 写入 --------------------
@router.post("/words", response_model=WordDetail, status_code=status.HTTP_201_CREATED)
def create_word(payload: WordCreate, store: WordStore = Depends(get_word_store)):
    word_id = store.create_word(**payload.model_dump())
    return _load_detail(store, word_id)


@router.patch("/words/{word_id}/status", response_model=WordDetail)
def update_word_status(word_id: int, payload: WordStatusUpdate, store: WordStore = Depends(get_word_store)):
    # NotFoundError 由 main.py 的全局处理器映射为 404
    store.update_word_status(word_id, payload.status)
    return _load_detail(store, word_id)


@router.put("/words/{word_id}/details", response_model=WordDetail)
def update_word_details(word_id: int, payload: WordDetailsUpdate, store: WordStore = Depends(get_word_store)):
    store.update_word_details(word_id, payload)
    return _load_detail(store, word_id)


@router.delete("/words/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_word(word_id: int, store: WordStore = Depends(get_word_store)):
    """删除单词及其所有子数据"""
    store.delete_word(word_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/migrate-data", response_model=ImportResult)
def migrate_data(payload: MigrateDataRequest, store: WordStore = Depends(get_word_store)):
    """从浏览器本地存储（VocabularyItem 格式）批量导入；已存在的单词跳过"""
    result = store.import_words(item.to_word_payload() for item in payload.words)
    logger.info(f"📦 migrate-data: {result.imported} imported, {result.skipped} skipped")
    return result
