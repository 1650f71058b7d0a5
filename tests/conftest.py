import pytest
from fastapi.testclient import TestClient

from vocab_backend.app.core.database import Database
from vocab_backend.app.main import get_app
from vocab_backend.app.repositories.word_store import WordStore


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'vocabulary.db'}").open()
    yield db
    db.close()


@pytest.fixture
def store(database):
    return WordStore(database)


@pytest.fixture
def client(database):
    app = get_app(database)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def apple_payload():
    return {
        "word": "apple",
        "phonetic": "/ˈæp.əl/",
        "part_of_speech": "noun",
        "definitions": [
            {"definition": "a fruit", "part_of_speech": "noun"},
            {"definition": "the tree bearing apples"},
        ],
        "examples": [
            {"example": "I eat an apple every day.", "translation": "我每天吃一个苹果。"},
        ],
        "etymologies": [
            {"etymology": "From Old English æppel."},
        ],
        "related_words": [
            {"related_word": "pear", "relationship_type": "similar"},
            {"related_word": "orchard"},
        ],
    }
