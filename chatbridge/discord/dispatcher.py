"""
Trigger-word command: acknowledge, ask the model, reply.

Each invocation walks IDLE -> AWAITING_COMPLETION -> SUCCESS | FAILURE -> IDLE
and always ends with a reply string; upstream failures become the configured
error message.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
import logging
import re
from typing import Protocol

from chatbridge.config.settings import PluginConfiguration
from chatbridge.llm.completion import CompletionService
from chatbridge.llm.errors import CompletionSuccess
from chatbridge.llm.request import build_request

logger = logging.getLogger(__name__)


class Session(Protocol):
    async def send(self, content: str) -> None: ...


class DispatchState(str, Enum):
    IDLE = "idle"
    AWAITING_COMPLETION = "awaiting_completion"
    SUCCESS = "success"
    FAILURE = "failure"


_TRANSITIONS = {
    DispatchState.IDLE: {DispatchState.AWAITING_COMPLETION},
    DispatchState.AWAITING_COMPLETION: {DispatchState.SUCCESS, DispatchState.FAILURE},
    DispatchState.SUCCESS: {DispatchState.IDLE},
    DispatchState.FAILURE: {DispatchState.IDLE},
}


@dataclass
class Invocation:
    argument: str
    state: DispatchState = DispatchState.IDLE
    history: list[DispatchState] = field(default_factory=list)

    def advance(self, state: DispatchState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid transition {self.state.value} -> {state.value}")
        self.history.append(self.state)
        self.state = state


def parse_command(text: str, trigger_word: str) -> str | None:
    """
    Return the argument of `<trigger_word> <argument>`, or None if `text` is not the command.

    The argument is everything after the single whitespace character that
    follows the trigger word, including any further leading whitespace.
    """
    match = re.match(rf"{re.escape(trigger_word)}(?:\s(.*))?\Z", text, flags=re.DOTALL)
    if not match:
        return None
    return match.group(1) or ""


# Acknowledgement tasks are kept referenced until they finish.
_background_tasks: set[asyncio.Task] = set()


def _log_ack_failure(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.warning("Could not send acknowledgement: %s", task.exception())


class CommandDispatcher:
    def __init__(self, config: PluginConfiguration, completion: CompletionService):
        self.config = config
        self.completion = completion

    def acknowledge(self, session: Session) -> asyncio.Task:
        """Send the pending notice without making the completion wait for it."""
        task = asyncio.create_task(session.send(self.config.pending_message))
        _background_tasks.add(task)
        task.add_done_callback(_log_ack_failure)
        return task

    async def handle(self, session: Session, argument: str) -> str:
        invocation = Invocation(argument)
        self.acknowledge(session)
        invocation.advance(DispatchState.AWAITING_COMPLETION)

        try:
            result = await self.completion.complete(build_request(self.config, argument))
        except Exception as e:
            logger.error("Command '%s' failed unexpectedly: %s", self.config.trigger_word, e, exc_info=e)
            invocation.advance(DispatchState.FAILURE)
            invocation.advance(DispatchState.IDLE)
            return self.config.error_message

        if isinstance(result, CompletionSuccess):
            invocation.advance(DispatchState.SUCCESS)
            reply = result.content
        else:
            invocation.advance(DispatchState.FAILURE)
            logger.warning("Replying with error message (%s: %s)", result.reason.value, result.detail)
            reply = self.config.error_message

        invocation.advance(DispatchState.IDLE)
        return reply

    async def dispatch(self, session: Session, text: str) -> str | None:
        argument = parse_command(text, self.config.trigger_word)
        if argument is None:
            return None
        logger.info("Command '%s' (len:%d)", self.config.trigger_word, len(argument))
        reply = await self.handle(session, argument)
        await session.send(reply)
        return reply
