"""
Connection to the windowing server, backed by a Tk interpreter.

All Tk calls go through this module; a ``tkinter.TclError`` anywhere below is
reported as ``RenderError`` (or ``DisplayConnectionError`` on connect).
"""
import logging
import os
import time
import tkinter as tk
from collections import deque
from contextlib import contextmanager
from typing import Optional

import _tkinter

from perimedes.display.events import Event, ExposeEvent, KeyEvent
from perimedes.errors import DisplayConnectionError, RenderError

log = logging.getLogger(__name__)


@contextmanager
def _tk_call(what: str):
    try:
        yield
    except tk.TclError as exc:
        raise RenderError(f"{what} failed: {exc}") from exc


class LockWindow:
    """A borderless window covering the whole screen, with a canvas to draw on."""

    def __init__(self, toplevel: tk.Toplevel, canvas: tk.Canvas, width: int, height: int):
        self.toplevel = toplevel
        self.canvas = canvas
        self.width = width
        self.height = height


class GraphicsContext:
    def __init__(self, canvas: tk.Canvas, foreground: str, background: str, font):
        self.canvas = canvas
        self.foreground = foreground
        self.background = background
        self.font = font

    def clear(self) -> None:
        with _tk_call("clear"):
            self.canvas.delete("all")

    def draw_text(self, text: str, x: int, y: int, color: Optional[str] = None) -> None:
        # (x, y) is the left end of the text baseline
        with _tk_call("draw_text"):
            self.canvas.create_text(
                x, y, text=text, anchor="sw",
                fill=color or self.foreground, font=self.font,
            )


class DisplaySession:
    """
    One connection to the X server.

    Key presses and expose notifications on windows created here are queued
    and handed out by ``next_event`` / ``poll_event``.
    """

    def __init__(self, root: tk.Tk):
        self._root = root
        self._pending: deque[Event] = deque()

    @classmethod
    def connect(cls, display: Optional[str] = None) -> "DisplaySession":
        try:
            root = tk.Tk(screenName=display)
        except tk.TclError as exc:
            target = display or os.environ.get("DISPLAY") or "<unset>"
            raise DisplayConnectionError(f"cannot connect to display {target}: {exc}") from exc
        root.withdraw()
        log.debug("connected to display %s", display or os.environ.get("DISPLAY"))
        return cls(root)

    @property
    def screen_size(self) -> tuple[int, int]:
        with _tk_call("screen size"):
            return self._root.winfo_screenwidth(), self._root.winfo_screenheight()

    def create_fullscreen_window(self, background: str) -> LockWindow:
        width, height = self.screen_size
        with _tk_call("create window"):
            top = tk.Toplevel(self._root, background=background, cursor="none")
            top.overrideredirect(True)
            top.geometry(f"{width}x{height}+0+0")
            top.attributes("-topmost", True)

            canvas = tk.Canvas(
                top, width=width, height=height, background=background,
                highlightthickness=0, cursor="none",
            )
            canvas.pack(fill="both", expand=True)

            top.bind("<KeyPress>", self._on_key)
            canvas.bind("<Expose>", self._on_expose)

            top.update()
            top.focus_force()
        return LockWindow(top, canvas, width, height)

    def create_graphics_context(self, window: LockWindow, foreground: str, background: str, font) -> GraphicsContext:
        with _tk_call("create graphics context"):
            window.canvas.configure(background=background)
        return GraphicsContext(window.canvas, foreground, background, font)

    def destroy_window(self, window: LockWindow) -> None:
        with _tk_call("destroy window"):
            window.toplevel.withdraw()
            window.toplevel.destroy()
            self._root.update_idletasks()

    def grab_input(self, window: LockWindow) -> bool:
        """One attempt at a global keyboard + pointer grab; True only if both are held."""
        try:
            window.toplevel.grab_set_global()
        except tk.TclError as exc:
            log.debug("grab attempt failed: %s", exc)
            return False
        return window.toplevel.grab_status() == "global"

    def release_input(self, window: LockWindow) -> None:
        with _tk_call("release grab"):
            window.toplevel.grab_release()

    def flush(self) -> None:
        with _tk_call("flush"):
            self._root.update_idletasks()

    def _pump(self) -> None:
        with _tk_call("event dispatch"):
            while self._root.tk.dooneevent(_tkinter.DONT_WAIT):
                pass

    def next_event(self) -> Event:
        """Block until the server delivers a key or expose event."""
        while not self._pending:
            with _tk_call("event wait"):
                self._root.tk.dooneevent(0)
        return self._pending.popleft()

    def poll_event(self) -> Optional[Event]:
        self._pump()
        return self._pending.popleft() if self._pending else None

    def wait(self, seconds: float) -> None:
        """Service the connection, then idle for ``seconds``."""
        self._pump()
        time.sleep(seconds)

    def pause(self, seconds: float) -> None:
        self.flush()
        time.sleep(seconds)

    def close(self) -> None:
        try:
            self._root.destroy()
        except tk.TclError:
            log.warning("display connection already gone", exc_info=True)

    def _on_key(self, event) -> None:
        self._pending.append(KeyEvent(event.keysym_num))

    def _on_expose(self, event) -> None:
        # only the last of a burst of exposes matters
        if event.count == 0:
            self._pending.append(ExposeEvent())
