"""Messaging gateway: inbound event types and outbound operations.

The workflow only talks to :class:`MessagingGateway`. :class:`DiscordGateway`
is the production implementation; tests use a recording fake.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Final, Protocol

import discord

from .actions import ActionButton
from .channels import resolve_channel, resolve_user

log: Final = logging.getLogger("gatekeeper")

MESSAGE_LIMIT: Final[int] = 2000

_BUTTON_STYLES: Final[dict[str, discord.ButtonStyle]] = {
    "primary": discord.ButtonStyle.primary,
    "secondary": discord.ButtonStyle.secondary,
    "success": discord.ButtonStyle.success,
    "danger": discord.ButtonStyle.danger,
}


class GatewayError(RuntimeError):
    """A send, edit or delete call was refused by the messaging provider."""


@dataclass(slots=True)
class InboundMessage:
    author_id: int
    author_name: str
    channel_id: int
    message_id: int
    text: str | None = None
    parent_id: int | None = None

    def posted_in(self, channel_id: int) -> bool:
        return channel_id in (self.channel_id, self.parent_id)


@dataclass(slots=True)
class CallbackQuery:
    caller_id: int
    caller_name: str
    payload: str | None
    handle: Any = None


@dataclass(slots=True)
class CommandInvocation:
    caller_id: int
    caller_name: str
    argument: str = ""
    handle: Any = None


class MessagingGateway(Protocol):
    async def send_to_user(
        self, user_id: int, text: str, *, buttons: Sequence[ActionButton] = ()
    ) -> None: ...

    async def send_to_channel(
        self, channel_id: int, text: str, *, buttons: Sequence[ActionButton] = ()
    ) -> int: ...

    async def edit_message(
        self,
        channel_id: int,
        message_id: int,
        text: str,
        *,
        buttons: Sequence[ActionButton] = (),
    ) -> None: ...

    async def delete_message(self, channel_id: int, message_id: int) -> None: ...

    async def acknowledge(self, query: CallbackQuery) -> None: ...

    async def notify(self, query: CallbackQuery, text: str) -> None: ...

    async def close_actions(self, query: CallbackQuery, result: str) -> None: ...

    async def reply(self, command: CommandInvocation, text: str) -> None: ...


def split_text(text: str, limit: int = MESSAGE_LIMIT) -> Iterator[str]:
    """Yield chunks no longer than ``limit``, preferring line breaks."""
    remaining = text
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        yield remaining[:cut]
        remaining = remaining[cut:].lstrip("\n")
    if remaining:
        yield remaining


def build_view(buttons: Sequence[ActionButton]) -> discord.ui.View | None:
    if not buttons:
        return None
    view = discord.ui.View(timeout=None)
    for button in buttons:
        view.add_item(
            discord.ui.Button(
                label=button.label,
                custom_id=button.payload,
                style=_BUTTON_STYLES.get(button.style, discord.ButtonStyle.secondary),
            )
        )
    # Presses are routed by custom_id in on_interaction, so the view is never
    # dispatched and must not be kept in the client view store.
    view.stop()
    return view


class DiscordGateway:
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def _channel(self, channel_id: int) -> discord.abc.Messageable:
        channel = await resolve_channel(self._bot, channel_id)
        if channel is None:
            raise GatewayError(f"Channel {channel_id} is unavailable")
        return channel

    async def send_to_user(
        self, user_id: int, text: str, *, buttons: Sequence[ActionButton] = ()
    ) -> None:
        user = await resolve_user(self._bot, user_id)
        if user is None:
            return
        chunks = list(split_text(text))
        try:
            for index, chunk in enumerate(chunks):
                last = index == len(chunks) - 1
                view = build_view(buttons) if last else None
                if view is None:
                    await user.send(chunk)
                else:
                    await user.send(chunk, view=view)
        except discord.Forbidden:
            log.warning("Cannot send direct message to %s – DMs closed", user_id)
        except discord.HTTPException as exc:
            log.exception("Failed to send direct message to %s: %s", user_id, exc)

    async def send_to_channel(
        self, channel_id: int, text: str, *, buttons: Sequence[ActionButton] = ()
    ) -> int:
        channel = await self._channel(channel_id)
        view = build_view(buttons)
        try:
            if view is None:
                message = await channel.send(text)
            else:
                message = await channel.send(text, view=view)
        except discord.HTTPException as exc:
            raise GatewayError(
                f"Failed to send to channel {channel_id}: {exc}"
            ) from exc
        return message.id

    async def edit_message(
        self,
        channel_id: int,
        message_id: int,
        text: str,
        *,
        buttons: Sequence[ActionButton] = (),
    ) -> None:
        channel = await self._channel(channel_id)
        if not hasattr(channel, "get_partial_message"):
            raise GatewayError(f"Channel {channel_id} does not support editing")
        try:
            await channel.get_partial_message(message_id).edit(
                content=text, view=build_view(buttons)
            )
        except discord.HTTPException as exc:
            raise GatewayError(f"Failed to edit message {message_id}: {exc}") from exc

    async def delete_message(self, channel_id: int, message_id: int) -> None:
        channel = await self._channel(channel_id)
        if not hasattr(channel, "get_partial_message"):
            raise GatewayError(f"Channel {channel_id} does not support deletion")
        try:
            await channel.get_partial_message(message_id).delete()
        except discord.HTTPException as exc:
            raise GatewayError(
                f"Failed to delete message {message_id}: {exc}"
            ) from exc

    async def acknowledge(self, query: CallbackQuery) -> None:
        interaction: discord.Interaction = query.handle
        if interaction.response.is_done():
            return
        try:
            await interaction.response.defer(ephemeral=True)
        except discord.HTTPException as exc:
            log.warning(
                "Failed to acknowledge interaction from %s: %s", query.caller_id, exc
            )

    async def notify(self, query: CallbackQuery, text: str) -> None:
        interaction: discord.Interaction = query.handle
        try:
            if interaction.response.is_done():
                await interaction.followup.send(text, ephemeral=True)
            else:
                await interaction.response.send_message(text, ephemeral=True)
        except discord.HTTPException as exc:
            log.warning("Failed to notify %s: %s", query.caller_id, exc)

    async def close_actions(self, query: CallbackQuery, result: str) -> None:
        interaction: discord.Interaction = query.handle
        message = getattr(interaction, "message", None)
        if message is None:
            return
        content = f"{message.content}\n\n{result}" if message.content else result
        try:
            await message.edit(content=content[:MESSAGE_LIMIT], view=None)
        except discord.NotFound:
            log.warning("Approval message not found when recording the decision")
        except discord.Forbidden:
            log.warning("No permission to edit approval message")
        except discord.HTTPException as exc:
            log.exception("Failed to update approval message: %s", exc)

    async def reply(self, command: CommandInvocation, text: str) -> None:
        interaction: discord.Interaction = command.handle
        try:
            for chunk in split_text(text):
                if interaction.response.is_done():
                    await interaction.followup.send(chunk, ephemeral=True)
                else:
                    await interaction.response.send_message(chunk, ephemeral=True)
        except discord.HTTPException as exc:
            log.exception("Failed to reply to %s: %s", command.caller_id, exc)
