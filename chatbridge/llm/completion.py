"""
chatbridge/llm/completion.py

One outbound chat-completion call per command invocation.

The service never raises for upstream trouble: every outcome comes back as a
CompletionResult so the dispatcher can pick between the reply text and the
operator's error message without inspecting exception objects.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
import openai
from openai import AsyncOpenAI

from chatbridge.config.settings import PluginConfiguration
from .errors import (
    CompletionFailure,
    CompletionResult,
    CompletionSuccess,
    FailureReason,
    describe_error,
)
from .request import ChatRequest

logger = logging.getLogger(__name__)


def build_openai_client(
    config: PluginConfiguration, http_client: httpx.AsyncClient | None = None
) -> AsyncOpenAI:
    # No retries: each invocation either succeeds once or falls back to the error message.
    return AsyncOpenAI(
        base_url=config.api_address,
        api_key=config.api_key,
        max_retries=0,
        http_client=http_client,
    )


class CompletionService:
    def __init__(self, config: PluginConfiguration, client: AsyncOpenAI | None = None):
        self.config = config
        self.client = client or build_openai_client(config)

    async def complete(self, request: ChatRequest) -> CompletionResult:
        call = self.client.chat.completions.create(
            **request.to_payload(),
            extra_headers=dict(self.config.default_headers) or None,
        )
        try:
            if self.config.request_timeout:
                completion = await asyncio.wait_for(call, timeout=self.config.request_timeout)
            else:
                completion = await call
        except openai.APIStatusError as e:
            body = e.body if e.body is not None else e.response.text
            logger.error("Completion failed: HTTP %s %s", e.status_code, body)
            return CompletionFailure(
                FailureReason.UPSTREAM_STATUS, describe_error(e), status_code=e.status_code, body=body
            )
        except (openai.APIConnectionError, asyncio.TimeoutError) as e:
            logger.error("Completion failed: %s", describe_error(e))
            return CompletionFailure(FailureReason.NETWORK, describe_error(e))
        except openai.APIResponseValidationError as e:
            logger.error("Completion failed: invalid response body: %s", e)
            return CompletionFailure(FailureReason.PARSE, str(e), status_code=e.status_code, body=e.body)
        except ValueError as e:
            # JSONDecodeError from a 2xx body that claims to be JSON but is not.
            logger.error("Completion failed: undecodable response body: %s", e)
            return CompletionFailure(FailureReason.PARSE, f"undecodable response: {e}")
        except openai.OpenAIError as e:
            logger.error("Completion failed: %s", describe_error(e))
            return CompletionFailure(FailureReason.NETWORK, describe_error(e))

        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            logger.error("Completion failed: malformed response %r (%s)", completion, e)
            return CompletionFailure(FailureReason.PARSE, f"malformed response: {e}")
        if not isinstance(content, str) or not content:
            logger.error("Completion failed: first choice has no text content (%r)", content)
            return CompletionFailure(FailureReason.PARSE, "first choice has no text content")

        logger.info("Completion ok: model=%s chars=%d", request.model, len(content))
        return CompletionSuccess(content)

    async def close(self) -> None:
        await self.client.close()
