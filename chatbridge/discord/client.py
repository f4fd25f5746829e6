from __future__ import annotations

import logging
from typing import Sequence

import discord
from discord import app_commands
from discord.ext import commands

from chatbridge.config.settings import PluginConfiguration
from chatbridge.render.hooks import OutboundPipeline
from .dispatcher import CommandDispatcher
from .errors import handle_app_command_error
from .session import DiscordSession

MAX_CHOICES = 25
DEFAULT_STATUS = "chat <message>"


def list_models(catalog: Sequence[str], current: str, query: str = "") -> list[str]:
    """Catalog entries matching `query`, current model first, at most MAX_CHOICES."""
    query = query.lower()
    lines = [f"◉ {current} (current)"] if query in current.lower() else []
    lines += [f"○ {m}" for m in catalog if m != current and query in m.lower()]
    return lines[:MAX_CHOICES]


def build_bot(
    config: PluginConfiguration,
    dispatcher: CommandDispatcher,
    pipeline: OutboundPipeline,
    catalog: Sequence[str],
    status_message: str | None = None,
) -> commands.Bot:
    intents = discord.Intents.default()
    intents.message_content = True
    intents.dm_messages = True
    activity = discord.CustomActivity(name=(status_message or DEFAULT_STATUS)[:128])
    discord_bot = commands.Bot(intents=intents, activity=activity, command_prefix=None)

    @discord_bot.tree.command(name="models", description="List the models this bot can use")
    @app_commands.describe(query="Only show models containing this text")
    async def models_command(interaction: discord.Interaction, query: str = "") -> None:
        lines = list_models(catalog, config.model, query)
        out = "\n".join(lines) if lines else f"No models match `{query}`."
        await interaction.response.send_message(out, ephemeral=True)

    @discord_bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: Exception) -> None:
        await handle_app_command_error(interaction, error)

    @discord_bot.event
    async def on_ready() -> None:
        await discord_bot.tree.sync()
        logging.info(
            "Logged in as %s | trigger: '%s' | model: %s | picture mode: %s",
            discord_bot.user, config.trigger_word, config.model, config.picture_mode,
        )

    @discord_bot.event
    async def on_message(new_msg: discord.Message) -> None:
        if new_msg.author.bot:
            return
        session = DiscordSession(new_msg, pipeline)
        await dispatcher.dispatch(session, new_msg.content)

    return discord_bot
