from enum import Enum


class ReviewOutcome(str, Enum):
    remembered = "remembered"
    forgotten = "forgotten"


class DemotionPolicy(str, Enum):
    # step_down: box - 1 (min 1); reset: straight back to box 1
    step_down = "step_down"
    reset = "reset"
