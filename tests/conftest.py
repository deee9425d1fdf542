import json
import random

import pytest
from fastapi.testclient import TestClient

from vocabmix.config import settings
from vocabmix.database import init_db
from vocabmix.scheduler import Scheduler
from vocabmix.session import QuizSession
from vocabmix.speech import Speaker
from vocabmix.storage import InputStore, SQLiteKeyValueStore
from vocabmix.vocabulary import VocabularyManager

ABCD = [
    {"word": "A", "translation": "1"},
    {"word": "B", "translation": "2"},
    {"word": "C", "translation": "3"},
    {"word": "D", "translation": "4"},
]


class ManualHandle:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Fake clock: callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def schedule(self, delay, callback):
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds):
        self.now += seconds
        due = [h for h in self.pending if h.when <= self.now]
        self.handles = [h for h in self.pending if h.when > self.now]
        for handle in due:
            handle.callback()


class RecordingSpeaker(Speaker):
    def __init__(self):
        self.spoken = []

    def speak(self, text):
        self.spoken.append(text)


@pytest.fixture
def abcd_text():
    return json.dumps(ABCD)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def speaker():
    return RecordingSpeaker()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def session(scheduler, speaker, rng):
    return QuizSession(scheduler=scheduler, speaker=speaker, rng=rng)


@pytest.fixture
def store(tmp_path):
    db_path = str(tmp_path / "test.db")
    init_db(db_path)
    return InputStore(SQLiteKeyValueStore(db_path))


@pytest.fixture
def vocab(tmp_path):
    manager = VocabularyManager(str(tmp_path / "vocabulary"))
    manager.load_all()
    return manager


@pytest.fixture
def client(tmp_path, monkeypatch, session, store, vocab):
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setattr(settings, "DB_DIR", str(tmp_path / "db"))
    monkeypatch.setattr(settings, "SPEECH_ENABLED", False)

    from vocabmix.app import create_app
    from vocabmix.router import get_input_store, get_quiz_session, get_vocab_manager

    app = create_app()
    app.dependency_overrides[get_quiz_session] = lambda: session
    app.dependency_overrides[get_input_store] = lambda: store
    app.dependency_overrides[get_vocab_manager] = lambda: vocab
    with TestClient(app) as test_client:
        yield test_client
