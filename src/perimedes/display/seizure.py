"""
Exclusive keyboard and pointer seizure with bounded retry.
"""
import logging
import time

from perimedes.errors import GrabError, RenderError

log = logging.getLogger(__name__)

GRAB_ATTEMPTS = 6
GRAB_DELAY = 0.1


def seize_input(session, window, attempts: int = GRAB_ATTEMPTS, delay: float = GRAB_DELAY, sleep=time.sleep) -> None:
    """
    Grab keyboard and pointer for ``window``.

    Tries ``attempts`` times, ``delay`` seconds apart. An attempt only counts
    when both devices are held.
    """
    for attempt in range(1, attempts + 1):
        if session.grab_input(window):
            log.debug("input seized on attempt %d", attempt)
            return
        if attempt < attempts:
            sleep(delay)
    raise GrabError(f"failed to grab keyboard and mouse after {attempts} attempts")


def release_input(session, window) -> None:
    """Best-effort release; a failure is logged, not raised."""
    try:
        session.release_input(window)
    except RenderError:
        log.warning("could not release input grab", exc_info=True)
