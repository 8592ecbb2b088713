import logging
import uuid
from typing import Iterable

from flashbox.core.clock import Clock
from flashbox.core.config import settings
from flashbox.domain.review.policy import LeitnerPolicy
from flashbox.domain.review.session import ReviewSession, start_session
from flashbox.services.flashcard_store import FlashcardStore

logger = logging.getLogger(__name__)


class ReviewService:
    """Builds review sessions and due-set previews from the store and the clock."""

    def __init__(self, *, store: FlashcardStore, clock: Clock, policy: LeitnerPolicy | None = None):
        self.store = store
        self.clock = clock
        self.policy = policy or LeitnerPolicy(settings.DEMOTION_POLICY)

    def due_cards(self, owner_id: uuid.UUID, deck_ids: Iterable[uuid.UUID] | None = None, limit: int | None = None):
        cards = self.store.get_flashcards(owner_id, deck_ids=deck_ids)
        return self.policy.select_due(cards, self.clock.today(), limit=limit)

    def start(self, owner_id: uuid.UUID, deck_ids: Iterable[uuid.UUID] | None = None, limit: int | None = None) -> ReviewSession:
        if limit is None:
            limit = settings.DEFAULT_SESSION_LIMIT

        cards = self.store.get_flashcards(owner_id, deck_ids=deck_ids)
        logger.info("Owner %s: %s candidate card(s) for review", owner_id, len(cards))
        return start_session(
            cards,
            self.clock.today(),
            store=self.store,
            policy=self.policy,
            limit=limit,
            retry_attempts=settings.PERSIST_RETRY_ATTEMPTS,
            retry_delay=settings.PERSIST_RETRY_DELAY_SECONDS,
        )
