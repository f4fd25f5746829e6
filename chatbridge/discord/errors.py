from __future__ import annotations

import logging

import discord

from chatbridge.llm.errors import describe_error

APP_COMMAND_ERROR_MESSAGE = "Команда завершилась с ошибкой, попробуйте позже."


async def handle_app_command_error(interaction: discord.Interaction, error: Exception) -> None:
    """
    Standard handler for slash command errors.
    """
    logging.error(
        "App command error in /%s: %s",
        getattr(interaction.command, "name", "unknown"),
        describe_error(error),
        exc_info=error,
    )
    try:
        if not interaction.response.is_done():
            await interaction.response.send_message(APP_COMMAND_ERROR_MESSAGE, ephemeral=True)
        else:
            await interaction.followup.send(APP_COMMAND_ERROR_MESSAGE, ephemeral=True)
    except discord.HTTPException as e:
        logging.warning("Could not report app command error: %s", e)
