"""
Rendering of the chat transcript and input line onto the lock window.
"""
from dataclasses import dataclass

from perimedes.config import LockConfig
from perimedes.models.transcript import EntryKind, Transcript, TranscriptEntry, color_for

_LABELS = {
    EntryKind.SYSTEM: "System: ",
    EntryKind.USER: "You: ",
    EntryKind.ASSISTANT: "Claude: ",
}
_CONTINUATION_INDENT = " " * len(_LABELS[EntryKind.ASSISTANT])


@dataclass(frozen=True)
class DrawText:
    text: str
    x: int
    y: int
    color: str


def wrap_words(text: str, width: int) -> list[str]:
    """Greedy word wrap; a single word longer than ``width`` gets its own line."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        if current and len(current) + len(word) + 1 > width:
            lines.append(current)
            current = word
        else:
            current = f"{current} {word}" if current else word
    if current:
        lines.append(current)
    return lines or [""]


def entry_lines(entry: TranscriptEntry, config: LockConfig) -> list[str]:
    if entry.kind is EntryKind.DECISION:
        return [f"=== {entry.text} ==="]
    if entry.kind is EntryKind.ASSISTANT:
        first, *rest = wrap_words(entry.text, config.wrap_columns)
        return [_LABELS[entry.kind] + first, *(_CONTINUATION_INDENT + line for line in rest)]
    return [_LABELS[entry.kind] + entry.text]


def entry_height(line_count: int, config: LockConfig) -> int:
    # continuation lines sit half a line apart
    return config.line_height + (line_count - 1) * (config.line_height // 2)


def visible_slice(entries: list[TranscriptEntry], height: int, config: LockConfig) -> int:
    """Index of the oldest entry drawn so that the newest ones fill the window."""
    available = height - config.bottom_reserve
    used = 0
    start = len(entries)
    for idx in range(len(entries) - 1, -1, -1):
        needed = entry_height(len(entry_lines(entries[idx], config)), config)
        if used + needed > available:
            break
        used += needed
        start = idx
    return start


def layout(transcript: Transcript, input_line: str, height: int, config: LockConfig) -> list[DrawText]:
    """
    Compute every text item for one frame.

    Older entries that do not fit are skipped; they stay in the transcript.
    """
    palette = config.palette
    entries = transcript.visible_entries()
    ops: list[DrawText] = []

    y = config.top_margin
    for entry in entries[visible_slice(entries, height, config):]:
        color = color_for(entry.kind, palette)
        lines = entry_lines(entry, config)
        ops.append(DrawText(lines[0], config.left_margin, y, color))
        for idx, line in enumerate(lines[1:], start=1):
            ops.append(DrawText(line, config.left_margin, y + idx * (config.line_height // 2), color))
        y += entry_height(len(lines), config)

    input_y = height - config.input_offset
    ops.append(DrawText("Input: ", config.left_margin, input_y, palette.text))
    ops.append(DrawText(input_line, config.input_text_x, input_y, palette.text))
    return ops


def redraw(session, window, gc, transcript: Transcript, input_line: str, config: LockConfig) -> None:
    """Clear ``window`` and draw the current frame. Safe to call any number of times."""
    gc.clear()
    for op in layout(transcript, input_line, window.height, config):
        gc.draw_text(op.text, op.x, op.y, op.color)
    session.flush()
