"""
Messages the negotiation worker sends to the lock window over ``events_q``.
"""

from typing import Literal, TypedDict, Union

from perimedes.models.verdict import Verdict


class AwaitingInputEvent(TypedDict):
    type: Literal['awaiting_input']
    turn: int


class EntryEvent(TypedDict):
    type: Literal['entry']
    kind: str
    text: str


class ThinkingEvent(TypedDict):
    type: Literal['thinking']
    active: bool


class DecisionEvent(TypedDict):
    type: Literal['decision']
    verdict: Verdict


class ErrorEvent(TypedDict):
    type: Literal['error']
    error: Exception


class ClosedEvent(TypedDict):
    type: Literal['closed']


DomainEvent = Union[
    AwaitingInputEvent, EntryEvent, ThinkingEvent, DecisionEvent, ErrorEvent, ClosedEvent,
]
