"""
The negotiation as a LangGraph state machine.

    collect_input --> consult --+--> END           (verdict found)
          ^                     +--> force_lock --> END   (turn limit reached)
          +---------------------+                  (no verdict yet)

``collect_input`` suspends the graph with ``interrupt()`` until the lock
window resumes it with the user's line.
"""
import logging
from typing import Annotated, Callable, Optional, TypedDict

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, START, StateGraph
from langgraph.graph.message import add_messages
from langgraph.types import interrupt

from perimedes.config import LockConfig
from perimedes.core.domain import DomainEvent
from perimedes.models.transcript import EntryKind
from perimedes.models.verdict import ExtendLock, Unlock, Verdict, parse_verdict

log = logging.getLogger(__name__)

THINKING_STATUS = "Claude is thinking..."


class NegotiationState(TypedDict):
    messages: Annotated[list[BaseMessage], add_messages]
    turns: int
    # verdict in its reply-text form, e.g. "UNLOCK" or "LOCK:3"
    verdict: Optional[str]


def verdict_token(verdict: Verdict) -> str:
    if isinstance(verdict, Unlock):
        return "UNLOCK"
    return f"LOCK:{verdict.minutes}"


def decode_verdict(token: str, config: LockConfig) -> Verdict:
    return parse_verdict(
        token, config.min_lock_minutes, config.max_lock_minutes,
        default=ExtendLock(config.min_lock_minutes),
    )


def build_negotiation(judge, config: LockConfig, emit: Callable[[DomainEvent], None]):
    """
    Compile the negotiation graph.

    ``judge`` provides ``async negotiate(history) -> str``; ``emit`` receives
    every transcript change as it happens.
    """

    def collect_input(state: NegotiationState):
        turn = state["turns"] + 1
        line = interrupt({"turn": turn})
        emit({"type": "entry", "kind": EntryKind.USER.value, "text": line})
        return {"messages": [HumanMessage(line)], "turns": turn}

    async def consult(state: NegotiationState):
        emit({"type": "thinking", "active": True})
        try:
            reply = await judge.negotiate(state["messages"])
        finally:
            emit({"type": "thinking", "active": False})
        emit({"type": "entry", "kind": EntryKind.ASSISTANT.value, "text": reply})

        verdict = parse_verdict(reply, config.min_lock_minutes, config.max_lock_minutes)
        return {
            "messages": [AIMessage(reply)],
            "verdict": verdict_token(verdict) if verdict is not None else None,
        }

    def force_lock(state: NegotiationState):
        log.debug("no decision after %d turns, forcing minimum lock", state["turns"])
        return {"verdict": verdict_token(ExtendLock(config.min_lock_minutes))}

    def route(state: NegotiationState) -> str:
        if state.get("verdict"):
            return END
        if state["turns"] >= config.max_turns:
            return "force_lock"
        return "collect_input"

    builder = StateGraph(NegotiationState)
    builder.add_node("collect_input", collect_input)
    builder.add_node("consult", consult)
    builder.add_node("force_lock", force_lock)

    builder.add_edge(START, "collect_input")
    builder.add_edge("collect_input", "consult")
    builder.add_conditional_edges(
        "consult", route,
        {END: END, "force_lock": "force_lock", "collect_input": "collect_input"},
    )
    builder.add_edge("force_lock", END)

    return builder.compile(name="negotiation", checkpointer=MemorySaver())
