from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from flashbox.core.enums import ReviewOutcome
from flashbox.schemas.flashcards import FlashcardOut


class StartSessionRequest(BaseModel):
    deck_ids: Optional[List[UUID]] = None
    limit: Optional[int] = Field(default=None, ge=0)


class OutcomeRequest(BaseModel):
    outcome: ReviewOutcome


class SessionSummaryOut(BaseModel):
    total: int
    remembered: int
    forgotten: int
    skipped: int
    dropped: int
    remaining: int
    unsynced: int


class SessionState(BaseModel):
    session_id: UUID
    current: Optional[FlashcardOut] = None
    remaining: int
    exhausted: bool
    summary: SessionSummaryOut


class OutcomeResponse(BaseModel):
    flashcard_id: UUID
    box: int
    next_review_date: date
    synced: bool
    deleted: bool = False
    session: SessionState
