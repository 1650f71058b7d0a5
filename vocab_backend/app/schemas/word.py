from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from vocab_backend.app.models.word import WordStatus


# ---------- 子表：写入 ----------
class DefinitionIn(BaseModel):
    definition: str
    part_of_speech: Optional[str] = None


class ExampleIn(BaseModel):
    example: str
    translation: Optional[str] = None


class EtymologyIn(BaseModel):
    etymology: str


class RelatedWordIn(BaseModel):
    related_word: str
    relationship_type: Optional[str] = None


# ---------- 子表：读取 ----------
class DefinitionOut(DefinitionIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    word_id: int


class ExampleOut(ExampleIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    word_id: int


class EtymologyOut(EtymologyIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    word_id: int


class RelatedWordOut(RelatedWordIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    word_id: int


# ---------- 单词 ----------
class WordCreate(BaseModel):
    word: str
    phonetic: Optional[str] = None
    part_of_speech: Optional[str] = None
    status: WordStatus = WordStatus.UNKNOWN
    definitions: List[DefinitionIn] = []
    examples: List[ExampleIn] = []
    etymologies: List[EtymologyIn] = []
    related_words: List[RelatedWordIn] = []


class WordStatusUpdate(BaseModel):
    status: WordStatus


class WordDetailsUpdate(BaseModel):
    """
    None 的集合保持不变；给出的集合（包括空列表）整体替换。
    phonetic / part_of_speech 总是被覆盖，缺省写入空字符串。
    """
    phonetic: Optional[str] = None
    part_of_speech: Optional[str] = None
    definitions: Optional[List[DefinitionIn]] = None
    examples: Optional[List[ExampleIn]] = None
    etymologies: Optional[List[EtymologyIn]] = None
    related_words: Optional[List[RelatedWordIn]] = None


class WordSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    word: str
    phonetic: Optional[str] = None
    part_of_speech: Optional[str] = None
    status: WordStatus
    created_at: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None
    review_count: int


class WordDetail(WordSummary):
    definitions: List[DefinitionOut] = []
    examples: List[ExampleOut] = []
    etymologies: List[EtymologyOut] = []
    related_words: List[RelatedWordOut] = []


# ---------- 批量导入 ----------
class VocabularyItem(BaseModel):
    """
    浏览器本地存储中的单词格式（字段为 camelCase）。
    id / createdAt / tags 等前端字段直接忽略。
    """
    word: str
    meaning: Optional[str] = None
    examples: List[str] = []
    examplesTranslation: List[Optional[str]] = []
    etymology: Optional[str] = None
    relatedWords: List[str] = []
    proficiency: Optional[str] = None  # UNKNOWN / LEARNING / MASTERED
    phonetic: Optional[str] = None
    partOfSpeech: Optional[str] = None

    def to_word_payload(self) -> dict:
        """转换为 WordStore.create_word 的参数"""
        translations = self.examplesTranslation
        examples = []
        for i, example in enumerate(self.examples):
            if not example.strip():
                continue
            translation = translations[i] if i < len(translations) else None
            examples.append({"example": example, "translation": translation or None})

        definitions = []
        if self.meaning and self.meaning.strip():
            definitions.append({"definition": self.meaning, "part_of_speech": self.partOfSpeech or None})

        return {
            "word": self.word,
            "phonetic": self.phonetic or None,
            "part_of_speech": self.partOfSpeech or None,
            "status": (self.proficiency or WordStatus.UNKNOWN.value).lower(),
            "definitions": definitions,
            "examples": examples,
            "etymologies": [{"etymology": self.etymology}] if self.etymology and self.etymology.strip() else [],
            "related_words": [
                {"related_word": rel, "relationship_type": None}
                for rel in self.relatedWords if rel.strip()
            ],
        }


class MigrateDataRequest(BaseModel):
    words: List[VocabularyItem]


class ImportResult(BaseModel):
    imported: int
    skipped: int
