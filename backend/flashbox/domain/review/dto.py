import uuid
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ScheduleUpdate:
    box: int
    next_review_date: date


@dataclass(frozen=True)
class ReviewResult:
    flashcard_id: uuid.UUID
    box: int
    next_review_date: date
    # False when every persistence attempt failed; the update lives only in memory
    synced: bool
    # card vanished from the store between being shown and being answered
    deleted: bool = False


@dataclass(frozen=True)
class SessionSummary:
    total: int
    remembered: int
    forgotten: int
    skipped: int
    dropped: int
    remaining: int
    unsynced: int
