from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from flashbox.core.clock import SystemClock
from flashbox.core.config import settings
from flashbox.db.session import SessionLocal
from flashbox.services.flashcard_store import SqlAlchemyFlashcardStore
from flashbox.services.review_service import ReviewService
from flashbox.services.session_registry import SessionRegistry


def get_session_factory():
    return SessionLocal


def get_db(session_factory=Depends(get_session_factory)):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def get_clock():
    return SystemClock(settings.TIMEZONE)


def get_store(session_factory=Depends(get_session_factory)) -> SqlAlchemyFlashcardStore:
    return SqlAlchemyFlashcardStore(session_factory)


def get_review_service(store=Depends(get_store), clock=Depends(get_clock)) -> ReviewService:
    return ReviewService(store=store, clock=clock)


@lru_cache
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(ttl_seconds=settings.SESSION_TTL_MINUTES * 60)


def get_owner_id(x_owner_id: str | None = Header(default=None)) -> UUID:
    """
    Owner of the request, forwarded by the gateway in front of this service.
    """
    if not x_owner_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing owner")
    try:
        return UUID(x_owner_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid owner")
