import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flashbox.db.base import Base

if TYPE_CHECKING:
    from flashbox.models.deck import Deck


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Flashcard(Base):
    __tablename__ = "flashcards"

    __table_args__ = (
        CheckConstraint("box >= 1 AND box <= 5", name="ck_flashcards_box_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    deck_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    readings_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    translated_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_language: Mapped[str] = mapped_column(String(16), default="en", nullable=False)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    scope_analysis: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Leitner scheduling; no column defaults, new_flashcard() sets both
    box: Mapped[int] = mapped_column(Integer, nullable=False)
    next_review_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    deck: Mapped["Deck"] = relationship("Deck", back_populates="flashcards")
