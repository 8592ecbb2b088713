# backend/flashbox/api/routes/review.py
import logging
from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from starlette import status

from flashbox.api.dependencies import get_owner_id, get_review_service, get_session_registry
from flashbox.core.exceptions import NotFoundError, PersistenceError, SessionExhaustedError
from flashbox.schemas.flashcards import FlashcardOut
from flashbox.schemas.review import (
    OutcomeRequest,
    OutcomeResponse,
    SessionState,
    SessionSummaryOut,
    StartSessionRequest,
)
from flashbox.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


def _state(session_id: UUID, session) -> SessionState:
    current = session.current()
    summary = session.summary()
    return SessionState(
        session_id=session_id,
        current=FlashcardOut.model_validate(current) if current is not None else None,
        remaining=session.remaining_count(),
        exhausted=current is None,
        summary=SessionSummaryOut(**asdict(summary)),
    )


def _entry(registry: SessionRegistry, session_id: UUID, owner_id: UUID):
    try:
        return registry.get(session_id, owner_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Review session not found")


@router.post("/sessions", response_model=SessionState, status_code=status.HTTP_201_CREATED)
def start_review_session(
    payload: StartSessionRequest,
    owner_id: UUID = Depends(get_owner_id),
    review_service=Depends(get_review_service),
    registry: SessionRegistry = Depends(get_session_registry),
):
    try:
        session = review_service.start(owner_id, deck_ids=payload.deck_ids, limit=payload.limit)
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Flashcards temporarily unavailable")
    session_id = registry.add(session, owner_id)
    logger.info("Review session %s started for owner %s", session_id, owner_id)
    return _state(session_id, session)


@router.get("/sessions/{session_id}", response_model=SessionState)
def get_review_session(
    session_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    entry = _entry(registry, session_id, owner_id)
    with entry.lock:
        return _state(session_id, entry.session)


@router.post("/sessions/{session_id}/outcome", response_model=OutcomeResponse)
def report_outcome(
    session_id: UUID,
    request: OutcomeRequest,
    owner_id: UUID = Depends(get_owner_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    entry = _entry(registry, session_id, owner_id)
    with entry.lock:
        try:
            result = entry.session.report_outcome(request.outcome)
        except SessionExhaustedError:
            raise HTTPException(status_code=409, detail="Review session is exhausted")

        return OutcomeResponse(
            flashcard_id=result.flashcard_id,
            box=result.box,
            next_review_date=result.next_review_date,
            synced=result.synced,
            deleted=result.deleted,
            session=_state(session_id, entry.session),
        )


@router.post("/sessions/{session_id}/skip", response_model=SessionState)
def skip_card(
    session_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    entry = _entry(registry, session_id, owner_id)
    with entry.lock:
        try:
            entry.session.skip()
        except SessionExhaustedError:
            raise HTTPException(status_code=409, detail="Review session is exhausted")
        return _state(session_id, entry.session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def abandon_review_session(
    session_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    try:
        registry.discard(session_id, owner_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Review session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
