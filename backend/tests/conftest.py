"""
Pytest configuration and fixtures
Provides an in-memory test database, test client, stub translators and seed data
"""
import os
import sys
import threading
import pytest
from typing import Dict, Generator, List
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

# Point the app at throwaway backends before anything reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import app
from core.database import get_db, build_engine
from core.errors import TranslationUnavailable
from models.base import Base
from models.video import Movie
from api.scan import get_translator, get_backfill_targets
from api.theme import get_theme_store
from services.repository import SqlTranslationRepository
from services.targets import default_target
from services.theme_config import ThemeConfigStore


class MappingTranslator:
    """
    Stub translator answering from a fixed mapping
    Texts missing from the mapping raise TranslationUnavailable
    """

    def __init__(self, mapping: Dict[str, str]):
        self.mapping = mapping
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def __call__(self, text: str) -> str:
        with self._lock:
            self.calls.append(text)
        if text not in self.mapping:
            raise TranslationUnavailable(f"No translation for {text!r}")
        return self.mapping[text]


def failing_translator(text: str) -> str:
    raise TranslationUnavailable("translation service down")


@pytest.fixture(scope="function")
def test_engine():
    """
    Fresh in-memory database with all tables for each test
    """
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db(test_engine) -> Generator[Session, None, None]:
    """
    Database session for one test
    """
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def translator() -> MappingTranslator:
    return MappingTranslator({"电影A": "MovieA", "电影B": "MovieB", "电影C": "MovieC"})


@pytest.fixture
def theme_store(tmp_path) -> ThemeConfigStore:
    return ThemeConfigStore(str(tmp_path / "mctheme.json"))


@pytest.fixture(scope="function")
def client(test_db: Session, translator, theme_store) -> Generator[TestClient, None, None]:
    """
    Create FastAPI test client with test database, stub translator and temp theme file
    """
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_translator] = lambda: translator
    app.dependency_overrides[get_backfill_targets] = lambda: [default_target()]
    app.dependency_overrides[get_theme_store] = lambda: theme_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def movie_repository(test_db: Session) -> SqlTranslationRepository:
    return SqlTranslationRepository(test_db, default_target())


@pytest.fixture
def seed_movies(test_db: Session):
    """
    Insert movies given as (name, translated) pairs, adding the flag column first
    """
    def _seed(rows):
        SqlTranslationRepository(test_db, default_target()).ensure_flag_column()
        for name, translated in rows:
            test_db.execute(
                text("INSERT INTO mac_movie (name, translated) VALUES (:name, :translated)"),
                {"name": name, "translated": translated},
            )
        test_db.commit()

    return _seed


# Helper functions for tests
def fetch_movies(db: Session) -> List[Dict]:
    """All movie rows including the translated flag, ordered by id"""
    rows = db.execute(text("SELECT id, name, translated FROM mac_movie ORDER BY id")).mappings().all()
    return [dict(row) for row in rows]


def add_movies(db: Session, names: List[str]) -> List[Movie]:
    """Insert movies before the flag column exists"""
    movies = [Movie(name=name) for name in names]
    db.add_all(movies)
    db.commit()
    return movies
