# backend/flashbox/api/routes/decks.py
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from starlette import status

from flashbox.api.dependencies import get_db, get_owner_id
from flashbox.models.deck import Deck
from flashbox.schemas.decks import DeckCreate, DeckSummary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=DeckSummary, status_code=status.HTTP_201_CREATED)
def create_deck(
    payload: DeckCreate,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Name is required")

    deck = Deck(owner_id=owner_id, name=name, order_index=payload.order_index)
    db.add(deck)
    db.commit()
    db.refresh(deck)
    return deck


@router.get("/", response_model=List[DeckSummary])
def list_decks(owner_id: UUID = Depends(get_owner_id), db: Session = Depends(get_db)):
    return (
        db.query(Deck)
        .filter(Deck.owner_id == owner_id)
        .order_by(Deck.order_index.asc(), Deck.created_at.asc())
        .all()
    )


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deck(
    deck_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    deck = db.get(Deck, deck_id)
    if not deck or deck.owner_id != owner_id:
        raise HTTPException(status_code=404, detail="Deck not found")

    # flashcards go with the deck (ORM cascade)
    db.delete(deck)
    db.commit()
    logger.info("Deleted deck %s of owner %s", deck_id, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
