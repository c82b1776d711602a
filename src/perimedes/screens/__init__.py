"""
Secondary lock screens.
"""
from .lock_timer import LockTimer

__all__ = ["LockTimer"]
