import uuid
from datetime import date

from flashbox.domain.review.entities import CardSchedule
from flashbox.models.flashcard import Flashcard


def new_flashcard(
    *,
    owner_id: uuid.UUID,
    deck_id: uuid.UUID,
    today: date,
    original_text: str,
    readings_text: str | None = None,
    translated_text: str | None = None,
    target_language: str = "en",
    image_url: str | None = None,
    scope_analysis: str | None = None,
) -> Flashcard:
    """
    The only place scheduling defaults are applied: box 1, due today.
    """
    schedule = CardSchedule.new(today=today)
    return Flashcard(
        id=schedule.id,
        owner_id=owner_id,
        deck_id=deck_id,
        original_text=original_text,
        readings_text=readings_text,
        translated_text=translated_text,
        target_language=target_language,
        image_url=image_url,
        scope_analysis=scope_analysis,
        box=schedule.box,
        next_review_date=schedule.next_review_date,
    )
