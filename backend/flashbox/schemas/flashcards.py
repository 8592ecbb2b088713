from datetime import date, datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FlashcardCreate(BaseModel):
    deck_id: UUID
    original_text: str = Field(min_length=1)
    readings_text: Optional[str] = None
    translated_text: Optional[str] = None
    target_language: str = "en"
    image_url: Optional[str] = None
    scope_analysis: Optional[str] = None


class FlashcardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    deck_id: UUID
    original_text: str
    readings_text: Optional[str] = None
    translated_text: Optional[str] = None
    target_language: str
    image_url: Optional[str] = None
    scope_analysis: Optional[str] = None

    box: int
    next_review_date: date
    created_at: datetime


class BoxStats(BaseModel):
    boxes: Dict[int, int]
    total: int
    due: int
