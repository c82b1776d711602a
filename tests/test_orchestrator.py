import queue
import unittest

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from perimedes.config import LockConfig
from perimedes.core.judge import initial_history
from perimedes.core.orchestrator import Orchestrator
from perimedes.errors import RemoteError
from perimedes.models.verdict import ExtendLock, Unlock

from tests.fakes import ScriptedJudge


def drain(q: queue.Queue) -> list:
    events = []
    while not q.empty():
        events.append(q.get_nowait())
    return events


class OrchestratorTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.config = LockConfig()
        self.events_q = queue.Queue()
        self.cmd_q = queue.Queue()

    async def _run(self, judge, lines, context=""):
        for line in lines:
            self.cmd_q.put(line)
        orch = Orchestrator(judge, self.config, self.events_q, self.cmd_q)
        await orch.run(initial_history(self.config, context))
        return drain(self.events_q)

    async def test_event_sequence_until_decision(self):
        judge = ScriptedJudge(["What were you doing?", "Back to work. LOCK:15"])
        events = await self._run(judge, ["reading twitter", "sorry"])

        self.assertEqual(
            [(ev["type"], ev.get("kind") or ev.get("turn") or ev.get("active")) for ev in events[:-2]],
            [
                ("awaiting_input", 1),
                ("entry", "user"),
                ("thinking", True),
                ("thinking", False),
                ("entry", "assistant"),
                ("awaiting_input", 2),
                ("entry", "user"),
                ("thinking", True),
                ("thinking", False),
                ("entry", "assistant"),
            ],
        )
        self.assertEqual(events[-2], {"type": "decision", "verdict": ExtendLock(10)})
        self.assertEqual(events[-1], {"type": "closed"})

    async def test_history_grows_one_user_and_one_assistant_per_turn(self):
        judge = ScriptedJudge(["Why?", "UNLOCK"])
        await self._run(judge, ["first", "second"], context="screen text")

        first, second = judge.calls
        self.assertEqual([type(m) for m in first], [SystemMessage, HumanMessage, AIMessage, HumanMessage])
        self.assertEqual(first[-1].content, "first")
        self.assertEqual(len(second), len(first) + 2)
        self.assertEqual([m.content for m in second[-3:]], ["first", "Why?", "second"])

    async def test_unlock_reply(self):
        events = await self._run(ScriptedJudge(["OK, UNLOCK"]), ["I was checking a bug report"])
        self.assertEqual(events[-2]["verdict"], Unlock())

    async def test_unparsable_lock_is_minimum(self):
        events = await self._run(ScriptedJudge(["LOCK:abc"]), ["hi"])
        self.assertEqual(events[-2]["verdict"], ExtendLock(1))

    async def test_turn_limit_forces_minimum_lock(self):
        judge = ScriptedJudge(["Tell me more."] * 5)
        events = await self._run(judge, ["one", "two", "three", "four", "five"])

        self.assertEqual(len(judge.calls), 4)
        self.assertEqual(events[-2], {"type": "decision", "verdict": ExtendLock(1)})
        self.assertEqual(self.cmd_q.get_nowait(), "five")
        self.assertEqual(max(ev["turn"] for ev in events if ev["type"] == "awaiting_input"), 4)

    async def test_custom_turn_limit(self):
        self.config = LockConfig(max_turns=2)
        judge = ScriptedJudge(["?", "?", "?"])
        events = await self._run(judge, ["a", "b", "c"])
        self.assertEqual(len(judge.calls), 2)
        self.assertEqual(events[-2]["verdict"], ExtendLock(1))

    async def test_stop_sentinel_closes_without_decision(self):
        judge = ScriptedJudge([])
        events = await self._run(judge, [None])
        self.assertEqual([ev["type"] for ev in events], ["awaiting_input", "closed"])
        self.assertEqual(judge.calls, [])

    async def test_remote_error_is_reported(self):
        error = RemoteError("timeout")
        events = await self._run(ScriptedJudge([error]), ["hi"])
        types = [ev["type"] for ev in events]
        self.assertEqual(types[-2:], ["error", "closed"])
        self.assertIs(events[-2]["error"], error)
        self.assertNotIn("decision", types)
        # the thinking indicator is cleared even when the call fails
        self.assertEqual(events[-3], {"type": "thinking", "active": False})

    async def test_unexpected_failure_only_closes(self):
        with self.assertLogs("perimedes.core.orchestrator", level="ERROR"):
            events = await self._run(ScriptedJudge([RuntimeError("bug")]), ["hi"])
        types = [ev["type"] for ev in events]
        self.assertEqual(types[-1], "closed")
        self.assertNotIn("decision", types)
        self.assertNotIn("error", types)


if __name__ == "__main__":
    unittest.main()
