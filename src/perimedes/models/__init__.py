"""
Data models for the lock screen.
"""
from .transcript import EntryKind, Transcript, TranscriptEntry, color_for
from .verdict import (
    ExtendLock,
    LockOutcome,
    TimedLock,
    Unlock,
    Unlocked,
    Verdict,
    decision_text,
    outcome_for,
    parse_verdict,
)

__all__ = [
    "EntryKind", "Transcript", "TranscriptEntry", "color_for",
    "ExtendLock", "LockOutcome", "TimedLock", "Unlock", "Unlocked", "Verdict",
    "decision_text", "outcome_for", "parse_verdict",
]
