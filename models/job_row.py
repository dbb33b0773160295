"""
Job table records and poll bookkeeping.

A JobRow is a snapshot of one rendered row of an asynchronous job list
(Post Charges or Claims Generation). It has no identity beyond its text:
two rows with the same description and owner cannot be told apart, and
callers always act on the first match in document order.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional


class CompletionSignal(str, Enum):
    """Observable cue used to decide that a job has finished."""
    ACTIONS_AVAILABLE = "actions_available"
    STATUS_CONCLUDED = "status_concluded"
    NOT_RUNNING = "not_running"


class TimeoutPolicy(str, Enum):
    """What happens when a poll budget runs out."""
    SOFT = "soft"
    HARD = "hard"


@dataclass(frozen=True)
class JobRow:
    """Text content of one job table row, read fresh on every poll."""
    description_text: str
    owner_text: str
    status_text: str
    action_affordances: FrozenSet[str] = field(default_factory=frozenset)
    row_text: str = ""

    def matches(self, match_text: Optional[str], owner: Optional[str] = None) -> bool:
        if owner and owner not in self.owner_text:
            return False
        if not match_text:
            return True
        return match_text in self.description_text or match_text in self.owner_text

    def has_any_marker(self, markers) -> bool:
        text = self.row_text or f"{self.description_text} {self.status_text}"
        return any(marker in text for marker in markers)


@dataclass(frozen=True)
class PollBudget:
    """
    Bounds for a single poll.

    At least one of max_attempts / max_duration_s must be given. A duration
    budget is converted to an attempt cap of ceil(duration / interval).
    """
    max_attempts: Optional[int] = None
    max_duration_s: Optional[float] = None
    interval_s: float = 2.0
    settle_s: float = 0.0

    def __post_init__(self):
        if self.max_attempts is None and self.max_duration_s is None:
            raise ValueError("PollBudget needs max_attempts or max_duration_s")
        if self.interval_s <= 0:
            raise ValueError("interval_s must be positive")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def attempt_limit(self) -> int:
        limits = []
        if self.max_attempts is not None:
            limits.append(self.max_attempts)
        if self.max_duration_s is not None:
            limits.append(max(1, math.ceil(self.max_duration_s / self.interval_s)))
        return min(limits)


@dataclass
class PollState:
    """Ephemeral state owned by one poll invocation."""
    start_timestamp: float
    max_attempts: int
    max_duration_s: Optional[float] = None
    attempt_count: int = 0

    def elapsed(self, now: float) -> float:
        return now - self.start_timestamp

    def exhausted(self, now: float) -> bool:
        if self.attempt_count >= self.max_attempts:
            return True
        if self.max_duration_s is not None and self.elapsed(now) >= self.max_duration_s:
            return True
        return False
