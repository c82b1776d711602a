"""
Configuration for a lock session.

Everything a session needs (colors, font, layout metrics, prompts and limits)
lives in one frozen dataclass so sessions can be built and tested in isolation.
"""
import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import load_dotenv


JUDGE_PROMPT = """You are a productivity enforcer. Your job is to \
decide whether to unlock the user's screen or keep it locked for another \
{min_minutes}-{max_minutes} minutes. The user's screen was locked because they were detected \
to be procrastinating. Ask them about what they were doing and what they \
intend to do if unlocked.

First, reason through the content; common patterns of procrastination are:
* Spending lots of time scrolling through twitter, LessWrong, the EA Forum, lobste.rs, Hacker News, reddit and reading random blogposts
* Watching YouTube videos

Non-cases of procrastination are:

* Responding to WhatsApp/Telegram/Signal messages

The conversation will last at most {max_turns} messages, after which you MUST make \
a decision. If you decide to unlock, respond with exactly 'UNLOCK'. If \
you decide to keep it locked, respond with 'LOCK:X' where X is a number \
of minutes between {min_minutes} and {max_minutes}."""

CONTEXT_PROMPT = "Here's what was on my screen that triggered the lock:\n\n{context}"

CONTEXT_ACK = (
    "I've reviewed the content that was on your screen. "
    "Now, please explain why you should be allowed to continue."
)


@dataclass(frozen=True)
class Palette:
    background: str = "#282828"
    text: str = "#ebdbb2"
    system: str = "#fabd2f"
    user: str = "#83a598"
    assistant: str = "#b8bb26"


@dataclass(frozen=True)
class LockConfig:
    unlock_phrase: str = "UNLOCK"

    # negotiation
    max_turns: int = 4
    min_lock_minutes: int = 1
    max_lock_minutes: int = 10
    model: str = "claude-3-7-sonnet-20250219"
    max_tokens: int = 300
    judge_prompt: str = JUDGE_PROMPT
    context_prompt: str = CONTEXT_PROMPT
    context_ack: str = CONTEXT_ACK

    # input seizure
    grab_attempts: int = 6
    grab_delay: float = 0.1

    # rendering
    palette: Palette = field(default_factory=Palette)
    font: tuple = ("Courier", 12)
    line_height: int = 20
    top_margin: int = 50
    bottom_reserve: int = 120
    left_margin: int = 20
    input_offset: int = 50
    input_text_x: int = 80
    wrap_columns: int = 80

    # timing
    timer_tick: float = 0.1
    decision_pause: float = 1.0
    poll_interval: float = 0.02

    display: Optional[str] = None

    def instruction(self) -> str:
        """The judge's fixed instruction with this session's limits filled in."""
        return self.judge_prompt.format(
            max_turns=self.max_turns,
            min_minutes=self.min_lock_minutes,
            max_minutes=self.max_lock_minutes,
        )

    def with_overrides(self, **changes) -> "LockConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls, **overrides) -> "LockConfig":
        """
        Build a config from the process environment (and a .env file if present).

        Recognised variables:
            PERIMEDES_UNLOCK_PHRASE, PERIMEDES_MODEL,
            PERIMEDES_MAX_TURNS, PERIMEDES_DISPLAY
        """
        load_dotenv()

        values = {}
        if phrase := os.getenv("PERIMEDES_UNLOCK_PHRASE"):
            values["unlock_phrase"] = phrase
        if model := os.getenv("PERIMEDES_MODEL"):
            values["model"] = model
        if turns := os.getenv("PERIMEDES_MAX_TURNS"):
            try:
                values["max_turns"] = int(turns)
            except ValueError:
                raise ValueError(f"PERIMEDES_MAX_TURNS must be an integer, got {turns!r}") from None
            if values["max_turns"] < 1:
                raise ValueError("PERIMEDES_MAX_TURNS must be at least 1")
        if display := os.getenv("PERIMEDES_DISPLAY"):
            values["display"] = display

        values.update(overrides)
        return cls(**values)
