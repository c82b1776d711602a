"""
Translation of X keysyms into input line actions.

Only single-byte ASCII reaches the input line: space, digits and Latin
letters. Everything else is dropped.
"""
from dataclasses import dataclass
from typing import Union

XK_SPACE = 0x20
XK_RETURN = 0xFF0D
XK_ESCAPE = 0xFF1B
XK_BACKSPACE = 0xFF08


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class DeleteLast:
    pass


@dataclass(frozen=True)
class AppendChar:
    char: str


@dataclass(frozen=True)
class Ignore:
    pass


Action = Union[Submit, Cancel, DeleteLast, AppendChar, Ignore]

_CONTROL_KEYS = {
    XK_RETURN: Submit(),
    XK_ESCAPE: Cancel(),
    XK_BACKSPACE: DeleteLast(),
}


def _is_text_key(keysym: int) -> bool:
    return (
        keysym == XK_SPACE
        or 0x30 <= keysym <= 0x39
        or 0x41 <= keysym <= 0x5A
        or 0x61 <= keysym <= 0x7A
    )


def map_key(keysym: int) -> Action:
    if keysym in _CONTROL_KEYS:
        return _CONTROL_KEYS[keysym]
    if _is_text_key(keysym):
        return AppendChar(chr(keysym))
    return Ignore()
