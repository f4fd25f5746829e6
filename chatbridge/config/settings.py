from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


OPENROUTER_MODELS_URL = "https://openrouter.ai/api/v1/models"

DEFAULT_ERROR_MESSAGE = "В ответе ошибка, свяжитесь с администратором."
DEFAULT_PENDING_MESSAGE = "Запрос продолжается, пожалуйста, подождите..."


@dataclass(frozen=True)
class VariantDefaults:
    api_address: str
    fallback_models: tuple[str, ...]
    system_prompt: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)


# Per-deployment presets. Anything here can be overridden key by key in config.yaml.
VARIANTS: dict[str, VariantDefaults] = {
    "openai": VariantDefaults(
        api_address="https://api.openai.com/v1",
        fallback_models=("gpt-3.5-turbo",),
    ),
    "openrouter": VariantDefaults(
        api_address="https://openrouter.ai/api/v1",
        fallback_models=("gpt-3.5-turbo", "google/gemini-pro"),
        system_prompt="You are a helpful poet assistant.",
        default_headers={
            "HTTP-Referer": "https://github.com/chatbridge/chatbridge",
            "X-Title": "chatbridge",
        },
    ),
}
DEFAULT_VARIANT = "openai"


@dataclass(frozen=True)
class PluginConfiguration:
    """
    Everything the chat command and the picture-mode hook need.

    Built once from the validated config mapping and handed to the
    completion service, dispatcher and Discord adapter.
    """

    api_key: str
    api_address: str
    model: str = "gpt-3.5-turbo"
    temperature: float = 1
    max_tokens: int = 100
    top_p: float = 1
    frequency_penalty: float = 0
    presence_penalty: float = 0
    stop: tuple[str, ...] | None = None
    error_message: str = DEFAULT_ERROR_MESSAGE
    pending_message: str = DEFAULT_PENDING_MESSAGE
    trigger_word: str = "chat"
    picture_mode: bool = False
    default_headers: Mapping[str, str] = field(default_factory=dict)
    system_prompt: str | None = None
    variant: str = DEFAULT_VARIANT
    catalog_url: str = OPENROUTER_MODELS_URL
    fallback_models: tuple[str, ...] = ("gpt-3.5-turbo",)
    request_timeout: float | None = None

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "PluginConfiguration":
        variant = cfg.get("variant") or DEFAULT_VARIANT
        preset = VARIANTS[variant]

        def pick(key: str, default: Any) -> Any:
            value = cfg.get(key)
            return default if value is None else value

        stop = cfg.get("stop")
        headers = cfg.get("default_headers")
        return cls(
            api_key=cfg["api_key"],
            api_address=pick("api_address", preset.api_address),
            model=pick("model", cls.model),
            temperature=pick("temperature", cls.temperature),
            max_tokens=pick("max_tokens", cls.max_tokens),
            top_p=pick("top_p", cls.top_p),
            frequency_penalty=pick("frequency_penalty", cls.frequency_penalty),
            presence_penalty=pick("presence_penalty", cls.presence_penalty),
            stop=tuple(stop) if stop else None,
            error_message=pick("error_message", cls.error_message),
            pending_message=pick("pending_message", cls.pending_message),
            trigger_word=pick("trigger_word", cls.trigger_word),
            picture_mode=bool(cfg.get("picture_mode", False)),
            default_headers=dict(preset.default_headers if headers is None else headers),
            # An explicit empty string disables the preset's system prompt.
            system_prompt=(cfg["system_prompt"] or None) if "system_prompt" in cfg else preset.system_prompt,
            variant=variant,
            catalog_url=pick("catalog_url", OPENROUTER_MODELS_URL),
            fallback_models=preset.fallback_models,
            request_timeout=cfg.get("request_timeout"),
        )
