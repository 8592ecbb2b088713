from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DeckCreate(BaseModel):
    name: str = Field(min_length=1)
    order_index: int = 0


class DeckSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    order_index: int
    created_at: datetime
