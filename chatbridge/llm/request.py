from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chatbridge.config.settings import PluginConfiguration


@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: tuple[dict[str, str], ...]
    temperature: float
    max_tokens: int
    top_p: float
    frequency_penalty: float
    presence_penalty: float
    stop: tuple[str, ...] | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body for POST /chat/completions. `stop` is omitted when unset."""
        payload: dict[str, Any] = dict(
            model=self.model,
            messages=[dict(m) for m in self.messages],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            top_p=self.top_p,
            frequency_penalty=self.frequency_penalty,
            presence_penalty=self.presence_penalty,
        )
        if self.stop:
            payload["stop"] = list(self.stop)
        return payload


def build_request(config: PluginConfiguration, user_message: str) -> ChatRequest:
    # The command argument goes upstream untouched: no trimming, no length checks.
    messages = []
    if config.system_prompt:
        messages.append({"role": "system", "content": config.system_prompt})
    messages.append({"role": "user", "content": user_message})
    return ChatRequest(
        model=config.model,
        messages=tuple(messages),
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        top_p=config.top_p,
        frequency_penalty=config.frequency_penalty,
        presence_penalty=config.presence_penalty,
        stop=config.stop or None,
    )
