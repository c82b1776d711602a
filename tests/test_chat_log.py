import unittest

from perimedes.config import LockConfig, Palette
from perimedes.models.transcript import EntryKind, Transcript, color_for
from perimedes.widgets.chat_log import layout, redraw, wrap_words

from tests.fakes import FakeDisplaySession

CONFIG = LockConfig()
PALETTE = Palette()


class WrapWordsTests(unittest.TestCase):
    def test_greedy_wrap(self):
        text = " ".join(["word"] * 40)
        lines = wrap_words(text, 80)
        self.assertEqual([len(line.split()) for line in lines], [16, 16, 8])
        self.assertTrue(all(len(line) <= 80 for line in lines))

    def test_long_word_gets_own_line(self):
        self.assertEqual(wrap_words("a " + "x" * 90 + " b", 80), ["a", "x" * 90, "b"])

    def test_empty(self):
        self.assertEqual(wrap_words("", 80), [""])


class LayoutTests(unittest.TestCase):
    def test_labels_and_colors(self):
        transcript = Transcript()
        transcript.system("Locked:")
        transcript.user("I was reading docs")
        transcript.assistant("Which docs?")
        transcript.decision("UNLOCKING SCREEN")

        ops = layout(transcript, "draft", 768, CONFIG)
        self.assertEqual(
            [(op.text, op.y, op.color) for op in ops[:4]],
            [
                ("System: Locked:", 50, PALETTE.system),
                ("You: I was reading docs", 70, PALETTE.user),
                ("Claude: Which docs?", 90, PALETTE.assistant),
                ("=== UNLOCKING SCREEN ===", 110, PALETTE.text),
            ],
        )

    def test_input_line_drawn_above_bottom(self):
        ops = layout(Transcript(), "hello", 768, CONFIG)
        self.assertEqual([(op.text, op.x, op.y) for op in ops], [("Input: ", 20, 718), ("hello", 80, 718)])

    def test_assistant_continuation_lines_are_half_spaced(self):
        transcript = Transcript()
        transcript.assistant(" ".join(["word"] * 40))
        transcript.user("next")

        ops = layout(transcript, "", 768, CONFIG)
        self.assertEqual([op.y for op in ops[:4]], [50, 60, 70, 90])
        self.assertTrue(ops[0].text.startswith("Claude: word"))
        self.assertTrue(ops[1].text.startswith("        word"))
        self.assertEqual(ops[3].text, "You: next")

    def test_only_newest_entries_that_fit_are_drawn(self):
        transcript = Transcript()
        for i in range(100):
            transcript.system(f"msg {i}")

        ops = layout(transcript, "", 768, CONFIG)
        entry_ops = ops[:-2]
        # (768 - 120) // 20 rows
        self.assertEqual(len(entry_ops), 32)
        self.assertEqual(entry_ops[0].text, "System: msg 68")
        self.assertEqual(entry_ops[-1].text, "System: msg 99")
        self.assertEqual(len(transcript), 100)

    def test_fit_accounts_for_wrapped_entries(self):
        transcript = Transcript()
        for i in range(5):
            transcript.user(f"line {i}")
        transcript.assistant(" ".join(["word"] * 40))

        # 80px available: the 40px assistant entry plus two 20px entries
        ops = layout(transcript, "", 200, CONFIG)
        self.assertEqual(ops[0].text, "You: line 3")
        self.assertEqual(ops[1].text, "You: line 4")
        self.assertTrue(ops[2].text.startswith("Claude: "))

    def test_status_line_is_drawn_last(self):
        transcript = Transcript()
        transcript.user("hi")
        transcript.status = "Claude is thinking..."
        ops = layout(transcript, "", 768, CONFIG)
        self.assertEqual(ops[1].text, "System: Claude is thinking...")
        self.assertEqual(ops[1].color, color_for(EntryKind.SYSTEM, PALETTE))


class RedrawTests(unittest.TestCase):
    def test_redraw_is_idempotent(self):
        session = FakeDisplaySession()
        window = session.create_fullscreen_window(PALETTE.background)
        gc = session.create_graphics_context(window, PALETTE.text, PALETTE.background, CONFIG.font)
        transcript = Transcript()
        transcript.system("Locked:")

        redraw(session, window, gc, transcript, "abc", CONFIG)
        first = list(gc.current)
        redraw(session, window, gc, transcript, "abc", CONFIG)

        self.assertEqual(gc.clears, 2)
        self.assertEqual(gc.current, first)
        self.assertEqual(session.flushes, 2)
        self.assertEqual(len(transcript), 1)


if __name__ == "__main__":
    unittest.main()
