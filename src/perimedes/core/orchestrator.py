import asyncio
import logging
import queue
import threading
from typing import Optional, Sequence

from langchain_core.messages import BaseMessage
from langgraph.types import Command

from perimedes.config import LockConfig
from perimedes.core.domain import DomainEvent
from perimedes.core.negotiation import build_negotiation, decode_verdict
from perimedes.errors import RemoteError

log = logging.getLogger(__name__)


class Orchestrator:
    """
    Runs the negotiation graph on its own thread.

    Transcript changes and the final decision go out on ``events_q``; the
    user's submitted lines come in on ``cmd_q``. A ``None`` on ``cmd_q`` stops
    the negotiation. The last message on ``events_q`` is always ``closed``.
    """

    def __init__(self, judge, config: LockConfig, events_q: queue.Queue, cmd_q: queue.Queue,
                 thread_id: str = 'lock-session'):
        self.lock_config = config
        self.graph = build_negotiation(judge, config, self._emit)
        self.config = {'configurable': {'thread_id': thread_id}}
        self.events_q = events_q
        self.cmd_q = cmd_q

    def _emit(self, ev: DomainEvent) -> None:
        self.events_q.put(ev)

    def _pending_turn(self) -> Optional[int]:
        snapshot = self.graph.get_state(self.config)
        for task in snapshot.tasks:
            for intr in task.interrupts:
                return intr.value['turn']
        return None

    async def run(self, history: Sequence[BaseMessage]) -> None:
        payload = {'messages': list(history), 'turns': 0, 'verdict': None}
        try:
            state = await self.graph.ainvoke(payload, config=self.config)

            while (turn := self._pending_turn()) is not None:
                log.debug('waiting for user input (message %d/%d)', turn, self.lock_config.max_turns)
                self._emit({'type': 'awaiting_input', 'turn': turn})

                line = await asyncio.to_thread(self.cmd_q.get)
                if line is None:
                    log.debug('negotiation stopped by the lock window')
                    return
                state = await self.graph.ainvoke(Command(resume=line), config=self.config)

            self._emit({'type': 'decision', 'verdict': decode_verdict(state['verdict'], self.lock_config)})
        except RemoteError as exc:
            self._emit({'type': 'error', 'error': exc})
        except Exception:
            # reported to the lock window as a lost channel
            log.exception('negotiation worker failed')
        finally:
            self._emit({'type': 'closed'})

    def start(self, history: Sequence[BaseMessage]) -> threading.Thread:
        thread = threading.Thread(
            target=asyncio.run, args=(self.run(history),),
            name='negotiation', daemon=True,
        )
        thread.start()
        return thread
