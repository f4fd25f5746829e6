"""
Entrypoint: `python -m chatbridge.main` or the `chatbridge` console script.

Loads config.yaml, resolves the model catalog once, wires the chat command
and the picture-mode hook into a Discord bot, and runs it until interrupted.
"""

import asyncio
import logging
import os

from chatbridge.config.loader import load_plugin_configuration
from chatbridge.discord.client import build_bot
from chatbridge.discord.dispatcher import CommandDispatcher
from chatbridge.llm.catalog import fetch_available_models
from chatbridge.llm.completion import CompletionService
from chatbridge.render.hooks import OutboundPipeline, PictureModeHook


def setup_logging() -> None:
    if os.environ.get("DEBUG"):
        logging.basicConfig(level=logging.DEBUG)
        logging.getLogger("httpx").setLevel(logging.DEBUG)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")


async def run_bot(config_path: str | None = None) -> None:
    config, raw = load_plugin_configuration(config_path)

    catalog = await fetch_available_models(config.catalog_url, config.fallback_models)
    if config.model not in catalog:
        logging.warning("Configured model '%s' is not in the model catalog", config.model)

    renderer = None
    if config.picture_mode:
        from chatbridge.render.renderer import PlaywrightRenderer

        renderer = PlaywrightRenderer()

    completion = CompletionService(config)
    pipeline = OutboundPipeline([PictureModeHook(config.picture_mode, renderer)])
    dispatcher = CommandDispatcher(config, completion)
    discord_bot = build_bot(config, dispatcher, pipeline, catalog, raw.get("status_message"))

    logging.info(
        "🚀 Bot starting | variant: %s | api: %s | model: %s",
        config.variant, config.api_address, config.model,
    )
    try:
        await discord_bot.start(raw["bot_token"])
    finally:
        await discord_bot.close()
        await completion.close()
        if renderer is not None:
            await renderer.close()


def main() -> None:
    setup_logging()
    try:
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
