"""Pytest fixtures: in-memory SQLite, fixed clock, FastAPI client with overrides."""
import logging
import uuid
import warnings
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

logging.getLogger("sqlalchemy").setLevel(logging.ERROR)
logging.getLogger("sqlalchemy.engine").setLevel(logging.ERROR)
logging.getLogger("sqlalchemy.pool").setLevel(logging.ERROR)

warnings.filterwarnings("ignore", category=DeprecationWarning)

import flashbox.models  # noqa: E402,F401
from flashbox.api.dependencies import get_clock, get_session_factory, get_session_registry  # noqa: E402
from flashbox.core.clock import FixedClock  # noqa: E402
from flashbox.db.base import Base  # noqa: E402
from flashbox.main import app  # noqa: E402
from flashbox.models.deck import Deck  # noqa: E402
from flashbox.models.flashcard import Flashcard  # noqa: E402
from flashbox.services.flashcard_store import SqlAlchemyFlashcardStore  # noqa: E402
from flashbox.services.session_registry import SessionRegistry  # noqa: E402

TODAY = date(2024, 3, 4)


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def store(session_factory) -> SqlAlchemyFlashcardStore:
    return SqlAlchemyFlashcardStore(session_factory)


@pytest.fixture(scope="function")
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture(scope="function")
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture(scope="function")
def deck(session_factory, owner_id) -> Deck:
    with session_factory() as db:
        deck = Deck(owner_id=owner_id, name="Kanji N5")
        db.add(deck)
        db.commit()
    return deck


@pytest.fixture(scope="function")
def make_card(session_factory, owner_id, deck):
    """Insert a flashcard with explicit scheduling fields."""

    def _make(box=1, next_review_date=TODAY, card_id=None, text="猫", deck_id=None):
        with session_factory() as db:
            card = Flashcard(
                id=card_id or uuid.uuid4(),
                owner_id=owner_id,
                deck_id=deck_id or deck.id,
                original_text=text,
                translated_text="cat",
                box=box,
                next_review_date=next_review_date,
            )
            db.add(card)
            db.commit()
        return card

    return _make


@pytest.fixture(scope="function")
def registry() -> SessionRegistry:
    return SessionRegistry(ttl_seconds=3600)


@pytest.fixture(scope="function")
def client(session_factory, clock, registry) -> TestClient:
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_session_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def headers(owner_id) -> dict:
    return {"X-Owner-Id": str(owner_id)}
