"""
Verdicts produced by a negotiation and the outcome handed back to the caller.
"""
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Unlock:
    """Release the screen now."""


@dataclass(frozen=True)
class ExtendLock:
    """Keep the screen locked for ``minutes`` more minutes."""
    minutes: int


Verdict = Union[Unlock, ExtendLock]


@dataclass(frozen=True)
class Unlocked:
    pass


@dataclass(frozen=True)
class TimedLock:
    minutes: int


LockOutcome = Union[Unlocked, TimedLock]


UNLOCK_TOKEN = "UNLOCK"
LOCK_TOKEN = "LOCK:"


def parse_verdict(
    reply: str,
    min_minutes: int = 1,
    max_minutes: int = 10,
    default: Optional[Verdict] = None,
) -> Optional[Verdict]:
    """
    Read a verdict out of the judge's reply.

    ``UNLOCK`` anywhere wins. Otherwise everything after ``LOCK:``, stripped,
    must be an integer; it gives ``ExtendLock`` with the minutes clamped to
    ``[min_minutes, max_minutes]``. Anything else there falls back to
    ``min_minutes``. With neither token the reply carries no verdict and
    ``default`` is returned.
    """
    if UNLOCK_TOKEN in reply:
        return Unlock()

    if LOCK_TOKEN in reply:
        try:
            minutes = int(reply.split(LOCK_TOKEN, 1)[1].strip())
        except ValueError:
            minutes = min_minutes
        return ExtendLock(max(min_minutes, min(max_minutes, minutes)))

    return default


def decision_text(verdict: Verdict, manual: bool = False) -> str:
    """Banner text recorded in the transcript when the session ends."""
    if isinstance(verdict, Unlock):
        return "UNLOCKING SCREEN (manual unlock)" if manual else "UNLOCKING SCREEN"
    return f"SCREEN LOCKED FOR {verdict.minutes} MINUTES"


def outcome_for(verdict: Verdict) -> LockOutcome:
    if isinstance(verdict, Unlock):
        return Unlocked()
    return TimedLock(verdict.minutes)
