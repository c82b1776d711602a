"""
Window events delivered to the lock screen.
"""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class KeyEvent:
    keysym: int


@dataclass(frozen=True)
class ExposeEvent:
    pass


Event = Union[KeyEvent, ExposeEvent]
