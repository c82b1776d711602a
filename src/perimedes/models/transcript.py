"""
Data models for the lock screen chat transcript.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from perimedes.config import Palette


class EntryKind(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    DECISION = "decision"


def color_for(kind: EntryKind, palette: Palette) -> str:
    """Map an entry kind to the color it is drawn in."""
    return {
        EntryKind.SYSTEM: palette.system,
        EntryKind.USER: palette.user,
        EntryKind.ASSISTANT: palette.assistant,
        EntryKind.DECISION: palette.text,
    }[kind]


@dataclass(frozen=True)
class TranscriptEntry:
    """
    A single line of the chat shown on the lock screen.
    """
    kind: EntryKind
    text: str


@dataclass
class Transcript:
    """
    Append-only log of entries drawn on the lock window.

    ``status`` is a transient system line (e.g. "Claude is thinking...") drawn
    after the entries; setting or clearing it never touches the log.
    """
    entries: list[TranscriptEntry] = field(default_factory=list)
    status: Optional[str] = None

    def append(self, kind: EntryKind, text: str) -> TranscriptEntry:
        entry = TranscriptEntry(kind=EntryKind(kind), text=text)
        self.entries.append(entry)
        return entry

    def system(self, text: str) -> TranscriptEntry:
        return self.append(EntryKind.SYSTEM, text)

    def user(self, text: str) -> TranscriptEntry:
        return self.append(EntryKind.USER, text)

    def assistant(self, text: str) -> TranscriptEntry:
        return self.append(EntryKind.ASSISTANT, text)

    def decision(self, text: str) -> TranscriptEntry:
        return self.append(EntryKind.DECISION, text)

    def visible_entries(self) -> list[TranscriptEntry]:
        """Entries followed by the transient status line, if any."""
        if self.status is None:
            return list(self.entries)
        return [*self.entries, TranscriptEntry(EntryKind.SYSTEM, self.status)]

    def __len__(self) -> int:
        return len(self.entries)
