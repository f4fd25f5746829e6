from __future__ import annotations

from io import BytesIO
import logging

import discord

from chatbridge.render.hooks import OutboundPipeline, Outgoing

MAX_MESSAGE_LENGTH = 2000
IMAGE_FILENAME = "reply.png"

logger = logging.getLogger(__name__)


def split_message(text: str, max_len: int = MAX_MESSAGE_LENGTH) -> list[str]:
    return [text[i:i + max_len] for i in range(0, len(text), max_len)] if text else []


class DiscordSession:
    """
    Replies to one triggering Discord message.

    Everything sent goes through the outbound pipeline first, so picture mode
    applies to the acknowledgement and the answer alike.
    """

    def __init__(self, message: discord.Message, pipeline: OutboundPipeline):
        self.message = message
        self.pipeline = pipeline

    async def send(self, content: str) -> None:
        outgoing = await self.pipeline.run(Outgoing(content))
        if outgoing.image is not None:
            await self.message.reply(
                content=outgoing.content or None,
                file=discord.File(BytesIO(outgoing.image), filename=IMAGE_FILENAME),
                silent=True,
            )
            return
        chunks = split_message(outgoing.content)
        if not chunks:
            logger.warning("Nothing to send in reply to message %s", self.message.id)
        for chunk in chunks:
            await self.message.reply(content=chunk, silent=True)
