"""
Flashcard persistence used by the review scheduler.

``FlashcardStore`` is the boundary the review session depends on;
``SqlAlchemyFlashcardStore`` is the database-backed implementation. Each call
opens and closes its own database session, so one store instance can outlive
a single HTTP request (review sessions span many requests).
"""
import logging
import uuid
from datetime import date
from typing import Callable, Iterable, Protocol

from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session

from flashbox.core.exceptions import PersistenceError
from flashbox.domain.review.entities import CardSchedule
from flashbox.models.flashcard import Flashcard

logger = logging.getLogger(__name__)


class FlashcardStore(Protocol):
    def get_flashcards(
        self,
        owner_id: uuid.UUID,
        deck_id: uuid.UUID | None = None,
        deck_ids: Iterable[uuid.UUID] | None = None,
    ) -> list[Flashcard]:
        ...

    def get_flashcard(self, flashcard_id: uuid.UUID) -> Flashcard | None:
        ...

    def update_schedule(self, flashcard_id: uuid.UUID, box: int, next_review_date: date) -> bool:
        ...

    def box_counts(self, owner_id: uuid.UUID, deck_id: uuid.UUID | None = None) -> dict[int, int]:
        ...


class SqlAlchemyFlashcardStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_flashcards(self, owner_id, deck_id=None, deck_ids=None) -> list[Flashcard]:
        """All of an owner's cards, due or not, optionally scoped to one or more decks."""
        query = select(Flashcard).where(Flashcard.owner_id == owner_id)
        if deck_id is not None:
            query = query.where(Flashcard.deck_id == deck_id)
        if deck_ids is not None:
            query = query.where(Flashcard.deck_id.in_(list(deck_ids)))

        with self.session_factory() as db:
            try:
                return list(db.scalars(query).all())
            except (OperationalError, DBAPIError) as exc:
                raise PersistenceError(f"could not load flashcards for owner {owner_id}") from exc

    def get_flashcard(self, flashcard_id) -> Flashcard | None:
        with self.session_factory() as db:
            try:
                return db.get(Flashcard, flashcard_id)
            except (OperationalError, DBAPIError) as exc:
                raise PersistenceError(f"could not load flashcard {flashcard_id}") from exc

    def update_schedule(self, flashcard_id, box: int, next_review_date: date) -> bool:
        """
        Write a new box and review date.

        Setting the same values twice leaves the row unchanged, so callers may
        retry freely. Returns False if the card no longer exists.
        """
        schedule = CardSchedule(id=flashcard_id, box=box, next_review_date=next_review_date)

        with self.session_factory() as db:
            try:
                card = db.get(Flashcard, flashcard_id)
                if card is None:
                    logger.info("Flashcard %s not found, schedule update dropped", flashcard_id)
                    return False

                card.box = schedule.box
                card.next_review_date = schedule.next_review_date
                db.commit()
            except (OperationalError, DBAPIError) as exc:
                db.rollback()
                raise PersistenceError(f"could not update schedule of flashcard {flashcard_id}") from exc

        logger.debug("Flashcard %s -> box %s, due %s", flashcard_id, box, next_review_date)
        return True

    def box_counts(self, owner_id, deck_id=None) -> dict[int, int]:
        query = (
            select(Flashcard.box, func.count(Flashcard.id))
            .where(Flashcard.owner_id == owner_id)
            .group_by(Flashcard.box)
        )
        if deck_id is not None:
            query = query.where(Flashcard.deck_id == deck_id)

        with self.session_factory() as db:
            try:
                rows = db.execute(query).all()
            except (OperationalError, DBAPIError) as exc:
                raise PersistenceError(f"could not count flashcards for owner {owner_id}") from exc
        return {box: count for box, count in rows}
