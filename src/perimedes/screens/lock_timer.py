"""
Countdown screen shown after the judge decides to keep the screen locked.
"""
import logging
import time

from perimedes.config import LockConfig
from perimedes.display.seizure import release_input
from perimedes.errors import RenderError

log = logging.getLogger(__name__)

BOX_WIDTH = 400
BOX_HEIGHT = 200


def format_remaining(seconds: float) -> str:
    seconds = max(0, int(seconds))
    return f"Remaining: {seconds // 60}:{seconds % 60:02d}"


class LockTimer:
    """
    A full-screen countdown that holds the keyboard and pointer until it ends.

    Key presses are read and thrown away; nothing but the clock ends it.
    """

    def __init__(self, session, config: LockConfig, clock=time.monotonic):
        self.session = session
        self.config = config
        self.clock = clock

    def run(self, minutes: int, seize) -> None:
        """
        Show the countdown for ``minutes`` minutes.

        ``seize(session, window)`` takes exclusive input for the timer window
        and raises ``GrabError`` if it cannot.
        """
        palette = self.config.palette
        window = self.session.create_fullscreen_window(palette.background)
        seized = False
        try:
            gc = self.session.create_graphics_context(window, palette.text, palette.background, self.config.font)
            seize(self.session, window)
            seized = True

            duration = minutes * 60
            start = self.clock()
            while True:
                self._discard_events()
                elapsed = self.clock() - start
                if elapsed >= duration:
                    break
                self._draw(window, gc, minutes, duration - elapsed)
                self.session.wait(self.config.timer_tick)
            log.debug("lock timer of %d minutes elapsed", minutes)
        finally:
            if seized:
                release_input(self.session, window)
            try:
                self.session.destroy_window(window)
                self.session.flush()
            except RenderError:
                log.warning("could not destroy lock timer window", exc_info=True)

    def _discard_events(self) -> None:
        while self.session.poll_event() is not None:
            pass

    def _draw(self, window, gc, minutes: int, remaining: float) -> None:
        x = (window.width - BOX_WIDTH) // 2 + 50
        y = (window.height - BOX_HEIGHT) // 2 + 50
        text_color = self.config.palette.text

        gc.clear()
        gc.draw_text(f"Screen locked for {minutes} more minutes", x, y, text_color)
        gc.draw_text(format_remaining(remaining), x, y + 40, text_color)
        gc.draw_text("Please wait for timer to complete...", x, y + 80, text_color)
        self.session.flush()
