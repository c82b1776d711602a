import logging
from typing import Any, Optional, Sequence

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from perimedes.config import LockConfig
from perimedes.errors import RemoteError

log = logging.getLogger(__name__)


def initial_history(config: LockConfig, screen_context: Optional[str] = None) -> list[BaseMessage]:
    """
    Conversation the judge sees before the user's first line: the fixed
    instruction, then (if there is one) the captured screen text and an
    acknowledgement of it.
    """
    history: list[BaseMessage] = [SystemMessage(config.instruction())]
    if screen_context:
        history.append(HumanMessage(config.context_prompt.format(context=screen_context)))
        history.append(AIMessage(config.context_ack))
    return history


def build_llm(config: LockConfig) -> BaseChatModel:
    # one request per turn, no retries
    return ChatAnthropic(
        model=config.model,
        max_tokens=config.max_tokens,
        max_retries=0,
    )


def _reply_text(reply: Any) -> str:
    content = getattr(reply, 'content', None)
    if isinstance(content, list):
        content = ''.join(
            block.get('text', '') if isinstance(block, dict) else str(block)
            for block in content
        )
    if not isinstance(content, str) or not content.strip():
        raise RemoteError(f'malformed reply from decision service: {reply!r}')
    return content.strip()


class Judge:
    """The remote decision service: full history in, reply text out."""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    async def negotiate(self, history: Sequence[BaseMessage]) -> str:
        log.debug('calling decision service with %d messages', len(history))
        try:
            reply = await self.llm.ainvoke(list(history))
        except Exception as exc:
            raise RemoteError(f'decision service call failed: {exc}') from exc

        text = _reply_text(reply)
        log.debug('decision service replied: %s', text)
        return text


def build_judge(config: LockConfig) -> Judge:
    return Judge(build_llm(config))
