"""
The single line of text the user is typing on the lock screen.
"""
from typing import Optional

from perimedes.widgets.keymap import Action, AppendChar, Cancel, DeleteLast, Submit


class InputLine:
    def __init__(self) -> None:
        self.value = ""

    def apply(self, action: Action) -> tuple[bool, Optional[str]]:
        """
        Apply a key action to the buffer.

        Returns ``(changed, submitted)``: whether the visible buffer changed,
        and the submitted line when ``action`` is a non-empty submit. A submit
        does not clear the buffer; the caller decides with ``clear()`` once
        the line has been accepted.
        """
        if isinstance(action, Submit):
            return False, (self.value or None)

        if isinstance(action, Cancel):
            changed = bool(self.value)
            self.value = ""
            return changed, None

        if isinstance(action, DeleteLast):
            if not self.value:
                return False, None
            self.value = self.value[:-1]
            return True, None

        if isinstance(action, AppendChar):
            self.value += action.char
            return True, None

        return False, None

    def clear(self) -> None:
        self.value = ""
