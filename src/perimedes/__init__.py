"""
Perimedes: a screen lock you have to talk your way out of.
"""
from perimedes.app import LockScreenController, run_lock_session
from perimedes.config import LockConfig
from perimedes.models.verdict import LockOutcome, TimedLock, Unlocked

__all__ = ["LockConfig", "LockOutcome", "LockScreenController", "TimedLock", "Unlocked", "run_lock_session"]
