# backend/flashbox/domain/review/entities.py

import uuid
from dataclasses import dataclass
from datetime import date, datetime

from flashbox.core.exceptions import InvalidScheduleError

MIN_BOX = 1
MAX_BOX = 5


def check_box(box) -> int:
    # bool is an int subclass; True would otherwise pass as box 1
    if isinstance(box, bool) or not isinstance(box, int):
        raise InvalidScheduleError(f"box must be an integer, got {box!r}")
    if box < MIN_BOX or box > MAX_BOX:
        raise InvalidScheduleError(f"box must be between {MIN_BOX} and {MAX_BOX}, got {box}")
    return box


def check_review_date(value, *, field: str = "next_review_date") -> date:
    if value is None:
        raise InvalidScheduleError(f"{field} is missing")
    if isinstance(value, datetime) or not isinstance(value, date):
        raise InvalidScheduleError(f"{field} must be a calendar date, got {value!r}")
    return value


@dataclass
class CardSchedule:
    """
    Scheduling state of one flashcard.
    Knows nothing about the database; ORM rows with the same attributes are
    accepted wherever a CardSchedule is.
    """

    id: uuid.UUID
    box: int
    next_review_date: date

    def __post_init__(self):
        self._validate()

    @classmethod
    def new(cls, *, today: date, card_id: uuid.UUID | None = None) -> "CardSchedule":
        """Unseen cards start in the lowest box and are due immediately."""
        return cls(id=card_id or uuid.uuid4(), box=MIN_BOX, next_review_date=today)

    def is_due(self, today: date) -> bool:
        return self.next_review_date <= check_review_date(today, field="today")

    def _validate(self):
        check_box(self.box)
        check_review_date(self.next_review_date)
