# backend/flashbox/domain/review/session.py

import logging
import time
from datetime import date
from typing import Callable, Iterable

from flashbox.core.enums import ReviewOutcome
from flashbox.core.exceptions import PersistenceError, SessionExhaustedError
from flashbox.services.flashcard_store import FlashcardStore

from .dto import ReviewResult, SessionSummary
from .policy import LeitnerPolicy

logger = logging.getLogger(__name__)


class ReviewSession:
    """
    One pass over a fixed snapshot of due cards.

    The snapshot is taken once, when the session starts; cards that become due
    later are picked up by the next session. Each card is re-read from the
    store right before it is shown, and cards deleted in the meantime are
    skipped silently.

    Persistence failures never stop the session: the write is retried with
    exponential backoff and, if it still fails, the card is recorded in
    ``unsynced_ids`` and the session moves on.
    """

    def __init__(
            self,
            cards: list,
            *,
            store: FlashcardStore,
            today: date,
            policy: LeitnerPolicy,
            retry_attempts: int = 3,
            retry_delay: float = 0.2,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.today = today
        self.policy = policy
        self.retry_attempts = max(1, retry_attempts)
        self.retry_delay = retry_delay
        self._sleep = sleep

        self._snapshot = list(cards)
        self._cursor = 0
        self._current = None

        self.remembered = 0
        self.forgotten = 0
        self.skipped = 0
        self.dropped = 0
        self.unsynced_ids = []

    # -----
    # State
    # -----

    def current(self):
        """The card to present now, or None once the snapshot is used up."""
        while self._cursor < len(self._snapshot):
            if self._current is not None:
                return self._current

            snapshot_card = self._snapshot[self._cursor]
            try:
                card = self.store.get_flashcard(snapshot_card.id)
            except PersistenceError:
                logger.warning("Could not refresh flashcard %s, using session copy", snapshot_card.id)
                card = snapshot_card

            if card is None:
                logger.info("Flashcard %s was removed mid-session, skipping", snapshot_card.id)
                self.dropped += 1
                self._cursor += 1
                continue

            self._current = card
            return card

        return None

    @property
    def is_exhausted(self) -> bool:
        return self.current() is None

    def remaining_count(self) -> int:
        """Cards still to be answered or skipped, the current one included."""
        self.current()
        return len(self._snapshot) - self._cursor

    def summary(self) -> SessionSummary:
        return SessionSummary(
            total=len(self._snapshot),
            remembered=self.remembered,
            forgotten=self.forgotten,
            skipped=self.skipped,
            dropped=self.dropped,
            remaining=self.remaining_count(),
            unsynced=len(self.unsynced_ids),
        )

    # -------
    # Actions
    # -------

    def report_outcome(self, outcome: ReviewOutcome | str) -> ReviewResult:
        card = self._require_current()
        update = self.policy.apply_outcome(
            current_box=card.box,
            outcome=outcome,
            today=self.today,
        )

        synced = True
        deleted = False
        try:
            deleted = not self._persist(card.id, update.box, update.next_review_date)
        except PersistenceError:
            synced = False
            self.unsynced_ids.append(card.id)

        if deleted:
            logger.info("Flashcard %s was removed while shown, outcome dropped", card.id)
            self.dropped += 1
        elif ReviewOutcome(outcome) == ReviewOutcome.remembered:
            self.remembered += 1
        else:
            self.forgotten += 1

        self._advance()
        return ReviewResult(
            flashcard_id=card.id,
            box=update.box,
            next_review_date=update.next_review_date,
            synced=synced,
            deleted=deleted,
        )

    def skip(self):
        """Defer the current card; its schedule is left untouched."""
        card = self._require_current()
        self.skipped += 1
        self._advance()
        return card

    # -------
    # Helpers
    # -------

    def _require_current(self):
        card = self.current()
        if card is None:
            raise SessionExhaustedError("review session has no cards left")
        return card

    def _advance(self):
        self._current = None
        self._cursor += 1

    def _persist(self, card_id, box: int, next_review_date: date) -> bool:
        delay = self.retry_delay
        for attempt in range(1, self.retry_attempts + 1):
            try:
                return self.store.update_schedule(card_id, box, next_review_date)
            except PersistenceError as exc:
                if attempt == self.retry_attempts:
                    logger.warning(
                        "Giving up on flashcard %s after %s attempts: %s",
                        card_id, attempt, exc,
                    )
                    raise
                logger.info("Retrying schedule write for flashcard %s (attempt %s)", card_id, attempt)
                self._sleep(delay)
                delay *= 2
        return False


def start_session(
        cards: Iterable,
        today: date,
        *,
        store: FlashcardStore,
        policy: LeitnerPolicy | None = None,
        limit: int | None = None,
        retry_attempts: int = 3,
        retry_delay: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
) -> ReviewSession:
    policy = policy or LeitnerPolicy()
    due = policy.select_due(cards, today, limit=limit)
    logger.info("Starting review session with %s due card(s)", len(due))
    return ReviewSession(
        due,
        store=store,
        today=today,
        policy=policy,
        retry_attempts=retry_attempts,
        retry_delay=retry_delay,
        sleep=sleep,
    )
