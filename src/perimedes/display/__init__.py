"""
Windowing server access. ``session`` needs Tk and is imported on demand.
"""
from .events import Event, ExposeEvent, KeyEvent
from .seizure import release_input, seize_input

__all__ = ["Event", "ExposeEvent", "KeyEvent", "release_input", "seize_input"]
