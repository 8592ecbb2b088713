# backend/flashbox/api/routes/flashcards.py
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from starlette import status

from flashbox.api.dependencies import get_clock, get_db, get_owner_id, get_review_service, get_store
from flashbox.core.exceptions import PersistenceError
from flashbox.domain.review.entities import MAX_BOX, MIN_BOX
from flashbox.models.deck import Deck
from flashbox.models.flashcard import Flashcard
from flashbox.schemas.flashcards import BoxStats, FlashcardCreate, FlashcardOut
from flashbox.services.flashcard_service import new_flashcard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=FlashcardOut, status_code=status.HTTP_201_CREATED)
def create_flashcard(
    payload: FlashcardCreate,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db),
    clock=Depends(get_clock),
):
    deck = db.get(Deck, payload.deck_id)
    if not deck or deck.owner_id != owner_id:
        raise HTTPException(status_code=404, detail="Deck not found")

    text = payload.original_text.strip()
    if not text:
        raise HTTPException(status_code=422, detail="Original text is required")

    card = new_flashcard(
        owner_id=owner_id,
        deck_id=deck.id,
        today=clock.today(),
        original_text=text,
        readings_text=payload.readings_text,
        translated_text=payload.translated_text,
        target_language=payload.target_language,
        image_url=payload.image_url,
        scope_analysis=payload.scope_analysis,
    )
    db.add(card)
    db.commit()
    db.refresh(card)
    return card


@router.get("/", response_model=List[FlashcardOut])
def list_flashcards(
    deck_id: Optional[UUID] = None,
    owner_id: UUID = Depends(get_owner_id),
    store=Depends(get_store),
):
    try:
        cards = store.get_flashcards(owner_id, deck_id=deck_id)
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Flashcards temporarily unavailable")
    return sorted(cards, key=lambda c: c.created_at)


@router.get("/due", response_model=List[FlashcardOut])
def list_due_flashcards(
    deck_id: Optional[List[UUID]] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=0),
    owner_id: UUID = Depends(get_owner_id),
    review_service=Depends(get_review_service),
):
    try:
        return review_service.due_cards(owner_id, deck_ids=deck_id, limit=limit)
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Flashcards temporarily unavailable")


@router.get("/stats", response_model=BoxStats)
def flashcard_stats(
    deck_id: Optional[UUID] = None,
    owner_id: UUID = Depends(get_owner_id),
    store=Depends(get_store),
    review_service=Depends(get_review_service),
):
    try:
        counts = store.box_counts(owner_id, deck_id=deck_id)
        due = review_service.due_cards(owner_id, deck_ids=[deck_id] if deck_id else None)
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Flashcards temporarily unavailable")

    boxes = {box: counts.get(box, 0) for box in range(MIN_BOX, MAX_BOX + 1)}
    return BoxStats(boxes=boxes, total=sum(boxes.values()), due=len(due))


@router.delete("/{flashcard_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_flashcard(
    flashcard_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    card = db.get(Flashcard, flashcard_id)
    if not card or card.owner_id != owner_id:
        raise HTTPException(status_code=404, detail="Flashcard not found")

    db.delete(card)
    db.commit()
    logger.info("Deleted flashcard %s", flashcard_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
