from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Awaitable, Callable, Protocol

from .template import build_picture_html

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outgoing:
    content: str
    image: bytes | None = None


class HtmlRenderer(Protocol):
    async def render(self, html: str) -> bytes: ...


BeforeSendHook = Callable[[Outgoing], Awaitable[Outgoing]]


class PictureModeHook:
    """
    Pre-send hook that swaps the text of every outbound message for a PNG.

    Disabled hooks pass messages through untouched.
    """

    def __init__(self, enabled: bool, renderer: HtmlRenderer | None = None):
        if enabled and renderer is None:
            raise ValueError("picture mode needs a renderer")
        self.enabled = enabled
        self.renderer = renderer

    async def __call__(self, outgoing: Outgoing) -> Outgoing:
        if not self.enabled or outgoing.image is not None:
            return outgoing
        image = await self.renderer.render(build_picture_html(outgoing.content))
        logger.debug("Rendered %d chars into %d byte image", len(outgoing.content), len(image))
        return Outgoing(content="", image=image)


class OutboundPipeline:
    """Ordered before-send hooks applied to every message the bot sends."""

    def __init__(self, hooks: list[BeforeSendHook] | None = None):
        self.hooks: list[BeforeSendHook] = list(hooks or [])

    def before_send(self, hook: BeforeSendHook) -> BeforeSendHook:
        self.hooks.append(hook)
        return hook

    async def run(self, outgoing: Outgoing) -> Outgoing:
        for hook in self.hooks:
            outgoing = await hook(outgoing)
        return outgoing
