# vocab_backend/app/models/word.py
import enum

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from vocab_backend.app.core.database import Base


class WordStatus(str, enum.Enum):
    """掌握程度"""
    UNKNOWN = "unknown"
    LEARNING = "learning"
    MASTERED = "mastered"


VALID_WORD_STATUSES = tuple(s.value for s in WordStatus)


class Word(Base):
    __tablename__ = "words"

    id = Column(Integer, primary_key=True, autoincrement=True)
    word = Column(Text, nullable=False, unique=True)
    phonetic = Column(Text, nullable=True)
    part_of_speech = Column(Text, nullable=True)  # noun, verb, adj...

    created_at = Column(TIMESTAMP, server_default=func.now())
    last_reviewed_at = Column(TIMESTAMP, nullable=True)  # 只在更新 status 时写入

    status = Column(String(16), nullable=False, default=WordStatus.UNKNOWN.value, server_default=WordStatus.UNKNOWN.value)
    review_count = Column(Integer, nullable=False, default=0, server_default="0")

    # 子表由数据库 ON DELETE CASCADE 删除
    definitions = relationship(
        "Definition", order_by="Definition.id", back_populates="word",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    examples = relationship(
        "Example", order_by="Example.id", back_populates="word",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    etymologies = relationship(
        "Etymology", order_by="Etymology.id", back_populates="word",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    related_words = relationship(
        "RelatedWord", order_by="RelatedWord.id", back_populates="word",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('unknown', 'learning', 'mastered')",
            name="check_word_status",
        ),
        {"sqlite_autoincrement": True},
    )


class Definition(Base):
    __tablename__ = "definitions"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    definition = Column(Text, nullable=False)
    part_of_speech = Column(Text, nullable=True)

    word = relationship("Word", back_populates="definitions")


class Example(Base):
    __tablename__ = "examples"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    example = Column(Text, nullable=False)
    translation = Column(Text, nullable=True)

    word = relationship("Word", back_populates="examples")


class Etymology(Base):
    __tablename__ = "etymologies"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    etymology = Column(Text, nullable=False)

    word = relationship("Word", back_populates="etymologies")


class RelatedWord(Base):
    __tablename__ = "related_words"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    related_word = Column(Text, nullable=False)
    relationship_type = Column(Text, nullable=True)

    word = relationship("Word", back_populates="related_words")
