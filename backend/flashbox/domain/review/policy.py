# backend/flashbox/domain/review/policy.py

from datetime import date, timedelta
from typing import Iterable, TypeVar

from flashbox.core.enums import DemotionPolicy, ReviewOutcome
from flashbox.core.exceptions import InvalidScheduleError

from .dto import ScheduleUpdate
from .entities import MAX_BOX, MIN_BOX, check_box, check_review_date

# Days to wait before a card in the given box is due again.
BOX_INTERVALS: dict[int, int] = {
    1: 1,
    2: 2,
    3: 4,
    4: 7,
    5: 14,
}

CardT = TypeVar("CardT")


class LeitnerPolicy:
    """
    Fixed five-box Leitner scheduling.
    Pure domain logic: every method works on plain values and never touches storage.

    Cards passed in only need ``id``, ``box`` and ``next_review_date`` attributes,
    so ORM rows and ``CardSchedule`` values are both accepted.
    """

    BOX_INTERVALS = BOX_INTERVALS

    def __init__(self, demotion: DemotionPolicy = DemotionPolicy.step_down):
        self.demotion = DemotionPolicy(demotion)

    # ---------
    # Intervals
    # ---------

    def interval_for_box(self, box: int) -> int:
        return self.BOX_INTERVALS[check_box(box)]

    # -----------
    # Transitions
    # -----------

    def next_box(self, box: int, outcome: ReviewOutcome | str) -> int:
        check_box(box)
        outcome = _coerce_outcome(outcome)

        if outcome == ReviewOutcome.remembered:
            return min(box + 1, MAX_BOX)

        if self.demotion == DemotionPolicy.reset:
            return MIN_BOX
        return max(box - 1, MIN_BOX)

    def apply_outcome(self, *, current_box: int, outcome: ReviewOutcome | str, today: date) -> ScheduleUpdate:
        check_review_date(today, field="today")
        new_box = self.next_box(current_box, outcome)
        return ScheduleUpdate(
            box=new_box,
            next_review_date=today + timedelta(days=self.interval_for_box(new_box)),
        )

    # -------
    # Due-set
    # -------

    def is_due(self, card, today: date) -> bool:
        check_review_date(today, field="today")
        return check_review_date(card.next_review_date) <= today

    def select_due(self, cards: Iterable[CardT], today: date, limit: int | None = None) -> list[CardT]:
        """
        Cards due on ``today``, struggling ones first.

        Sorted by box, then by the oldest review date, then by id so identical
        input always produces identical output. ``limit`` keeps a prefix.
        """
        if limit is not None and limit < 0:
            raise InvalidScheduleError(f"limit must be non-negative, got {limit}")
        check_review_date(today, field="today")

        seen = set()
        due = []
        for card in cards:
            if card.id in seen:
                raise InvalidScheduleError(f"duplicate flashcard id {card.id}")
            seen.add(card.id)

            check_box(card.box)
            if self.is_due(card, today):
                due.append(card)

        due.sort(key=_due_order)
        if limit is not None:
            return due[:limit]
        return due


def _due_order(card):
    return (card.box, card.next_review_date, str(card.id))


def _coerce_outcome(outcome) -> ReviewOutcome:
    try:
        return ReviewOutcome(outcome)
    except ValueError as exc:
        raise InvalidScheduleError(f"unknown review outcome {outcome!r}") from exc
