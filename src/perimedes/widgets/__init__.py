"""
Lock screen widgets: key mapping, the input line and the chat log renderer.
"""
from .chat_log import layout, redraw
from .input_line import InputLine
from .keymap import map_key

__all__ = ["InputLine", "layout", "map_key", "redraw"]
