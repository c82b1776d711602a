"""
Perimedes lock screen
"""

import argparse
import logging
import queue
import sys
from functools import partial
from pathlib import Path
from typing import Optional

from perimedes.config import LockConfig
from perimedes.core.judge import build_judge, initial_history
from perimedes.core.negotiation import THINKING_STATUS
from perimedes.core.orchestrator import Orchestrator
from perimedes.display.events import ExposeEvent, KeyEvent
from perimedes.display.seizure import release_input, seize_input
from perimedes.errors import ChannelError, LockError, RenderError
from perimedes.models import (
    ExtendLock, LockOutcome, TimedLock, Transcript, Unlock, Verdict, decision_text, outcome_for,
)
from perimedes.screens import LockTimer
from perimedes.widgets import InputLine, map_key, redraw

log = logging.getLogger(__name__)

WORKER_JOIN_TIMEOUT = 2.0


class LockScreenController:
    def __init__(self, session, judge, config: LockConfig):
        """Initialize the lock screen with an empty transcript and input line."""
        self.session = session
        self.judge = judge
        self.config = config

        self.events_q: queue.Queue = queue.Queue()
        self.cmd_q: queue.Queue = queue.Queue()

        self.transcript = Transcript()
        self.input_line = InputLine()

        self.window = None
        self.gc = None
        self._seized = False
        self._awaiting_input = False
        self._worker = None

    def run(self, screen_context: str = "") -> Verdict:
        """
        Lock the screen and negotiate until a verdict is reached.

        1. Creates the lock window and seizes keyboard and pointer
        2. Starts the negotiation worker seeded with ``screen_context``
        3. Runs the window loop until the worker or the unlock phrase decides
        """
        palette = self.config.palette
        self.window = self.session.create_fullscreen_window(palette.background)
        try:
            self.gc = self.session.create_graphics_context(
                self.window, palette.text, palette.background, self.config.font,
            )
            seize_input(self.session, self.window, self.config.grab_attempts, self.config.grab_delay)
            self._seized = True

            self.transcript.system("Locked:")
            self.redraw()

            orchestrator = Orchestrator(self.judge, self.config, self.events_q, self.cmd_q)
            self._worker = orchestrator.start(initial_history(self.config, screen_context))

            try:
                return self._event_loop()
            except ChannelError:
                log.warning("negotiation channel lost, forcing minimum lock", exc_info=True)
                return self._finish(ExtendLock(self.config.min_lock_minutes))
        finally:
            self.cmd_q.put(None)
            self._close_window()
            self._join_worker()

    def redraw(self) -> None:
        redraw(self.session, self.window, self.gc, self.transcript, self.input_line.value, self.config)

    def _event_loop(self) -> Verdict:
        """
        Window loop.

        Every message already on the channel is rendered before the next
        window event is taken. Window events are only consumed while the
        worker is waiting for a line.
        """
        while True:
            verdict = self._drain_channel()
            if verdict is not None:
                return self._finish(verdict)

            if self._awaiting_input:
                event = self.session.poll_event()
                if event is not None:
                    if self._handle_event(event):
                        return self._finish(Unlock(), manual=True)
                    continue

            self.session.wait(self.config.poll_interval)

    def _drain_channel(self) -> Optional[Verdict]:
        while True:
            try:
                ev = self.events_q.get_nowait()
            except queue.Empty:
                if self._worker is not None and not self._worker.is_alive() and self.events_q.empty():
                    raise ChannelError("negotiation worker exited without a decision")
                return None

            verdict = self._apply(ev)
            if verdict is not None:
                return verdict

    def _apply(self, ev) -> Optional[Verdict]:
        type = ev.get("type", "")

        if type == "awaiting_input":
            self._awaiting_input = True
        elif type == "entry":
            self.transcript.append(ev["kind"], ev["text"])
            self.redraw()
        elif type == "thinking":
            self.transcript.status = THINKING_STATUS if ev["active"] else None
            self.redraw()
        elif type == "decision":
            return ev["verdict"]
        elif type == "error":
            raise ev["error"]
        elif type == "closed":
            raise ChannelError("negotiation worker closed the channel without a decision")
        return None

    def _handle_event(self, event) -> bool:
        """Handle one window event; True when the unlock phrase was submitted."""
        if isinstance(event, ExposeEvent):
            self.redraw()
            return False

        if not isinstance(event, KeyEvent):
            return False

        changed, line = self.input_line.apply(map_key(event.keysym))
        if line is not None:
            if line.casefold() == self.config.unlock_phrase.casefold():
                log.info("unlock phrase entered")
                return True
            self.input_line.clear()
            self._awaiting_input = False
            self.cmd_q.put(line)
            self.redraw()
        elif changed:
            self.redraw()
        return False

    def _finish(self, verdict: Verdict, manual: bool = False) -> Verdict:
        self.transcript.decision(decision_text(verdict, manual=manual))
        self.redraw()
        self.session.pause(self.config.decision_pause)
        return verdict

    def _join_worker(self) -> None:
        if self._worker is None:
            return
        self._worker.join(WORKER_JOIN_TIMEOUT)
        if self._worker.is_alive():
            log.warning("negotiation worker still running after %.1fs", WORKER_JOIN_TIMEOUT)

    def _close_window(self) -> None:
        if self.window is None:
            return
        if self._seized:
            release_input(self.session, self.window)
            self._seized = False
        try:
            self.session.destroy_window(self.window)
        except RenderError:
            log.warning("could not destroy lock window", exc_info=True)
        self.window = None


def run_lock_session(
    unlock_phrase: str = "UNLOCK",
    screen_context: str = "",
    *,
    config: Optional[LockConfig] = None,
    judge=None,
    session_factory=None,
) -> LockOutcome:
    """
    Lock the screen until the judge or the unlock phrase releases it.

    A "keep locked" verdict is enforced with a countdown before this returns.
    Raises a ``LockError`` subclass if the lock could not be established or
    the session failed.
    """
    config = (config or LockConfig()).with_overrides(unlock_phrase=unlock_phrase)
    if judge is None:
        judge = build_judge(config)
    if session_factory is None:
        from perimedes.display.session import DisplaySession
        session_factory = DisplaySession.connect

    log.info("Locking screen with interactive chat.")
    session = session_factory(config.display)
    try:
        verdict = LockScreenController(session, judge, config).run(screen_context)
        if isinstance(verdict, ExtendLock):
            log.info("Starting lock timer for %d minutes.", verdict.minutes)
            seize = partial(seize_input, attempts=config.grab_attempts, delay=config.grab_delay)
            LockTimer(session, config).run(verdict.minutes, seize)
            log.info("Lock timer completed.")
        else:
            log.info("Screen unlocked.")
        return outcome_for(verdict)
    finally:
        session.close()


def _read_context(path: Optional[str]) -> str:
    if not path:
        return ""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="perimedes-lock",
        description="Lock the screen until you talk your way out of it.",
    )
    parser.add_argument("--phrase", help="manual unlock phrase (default: PERIMEDES_UNLOCK_PHRASE or UNLOCK)")
    parser.add_argument("--context-file", help="file with captured screen text, or - for stdin")
    parser.add_argument("--display", help="X display to lock (default: $DISPLAY)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides = {"display": args.display} if args.display else {}
    config = LockConfig.from_env(**overrides)

    try:
        outcome = run_lock_session(
            args.phrase or config.unlock_phrase,
            _read_context(args.context_file),
            config=config,
        )
    except LockError as exc:
        log.error("lock session failed: %s", exc)
        return 1

    if isinstance(outcome, TimedLock):
        print(f"Locked for {outcome.minutes} minutes.")
    else:
        print("Unlocked.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
