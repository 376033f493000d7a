from __future__ import annotations

import logging
from typing import Final

import discord

log: Final = logging.getLogger("gatekeeper")


async def resolve_channel(
    bot: discord.Client,
    channel_id: int,
) -> discord.abc.Messageable | None:
    """Return a channel or thread that accepts messages, or None if unavailable.

    Looks in the client cache first, then tries REST fetch as fallback.
    """
    if not channel_id:
        return None

    channel = bot.get_channel(channel_id)
    if isinstance(channel, discord.abc.Messageable):
        return channel

    try:
        channel = await bot.fetch_channel(channel_id)
    except discord.NotFound:
        log.warning("Channel %s not found", channel_id)
        return None
    except discord.Forbidden:
        log.warning("No access to channel %s – check bot permissions", channel_id)
        return None
    except discord.HTTPException as exc:
        log.warning("Cannot fetch channel %s – HTTP error: %s", channel_id, exc)
        return None

    if not isinstance(channel, discord.abc.Messageable):
        log.warning("Channel ID %s does not accept messages", channel_id)
        return None
    return channel


async def resolve_user(bot: discord.Client, user_id: int) -> discord.abc.User | None:
    user = bot.get_user(user_id)
    if user is not None:
        return user
    try:
        return await bot.fetch_user(user_id)
    except discord.NotFound:
        log.warning("User %s not found", user_id)
    except discord.HTTPException as exc:
        log.warning("Cannot fetch user %s – HTTP error: %s", user_id, exc)
    return None
