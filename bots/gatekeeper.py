#!/usr/bin/env python3
"""Discord topic gatekeeper
--------------------------
* Deletes posts by anyone but the admin in the restricted topic.
* Runs a question/answer verification flow approved by the admin in DMs.
* `/sendverify` (admin) posts or refreshes the "apply to verify" prompt.
* `/chat <question>` answers questions about the verification reference.

Required env‑vars: DISCORD_TOKEN, TOGETHER_AI_API_KEY, ADMIN_ID,
PUBLIC_CHANNEL_ID, RESTRICTED_TOPIC_ID
Optional: INFERENCE_BASE_URL, INFERENCE_MODEL, DATA_FILE, VERIFIED_USERS_FILE,
LAST_PROMPT_FILE, LOG_LEVEL
A .env file in the working directory is loaded first; real env-vars win.
"""

from __future__ import annotations

import asyncio
import logging

import discord
from discord import app_commands
from dotenv import load_dotenv

from bots.config import GatekeeperConfig
from gatekeeper import (
    CallbackQuery,
    CommandInvocation,
    DiscordGateway,
    GatekeeperStore,
    InboundMessage,
    InferenceClient,
    SessionRegistry,
    VerificationWorkflow,
)

log = logging.getLogger("gatekeeper")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def message_event(message: discord.Message) -> InboundMessage:
    channel = message.channel
    return InboundMessage(
        author_id=message.author.id,
        author_name=message.author.display_name,
        channel_id=channel.id,
        message_id=message.id,
        text=message.content,
        parent_id=getattr(channel, "parent_id", None),
    )


def callback_query(interaction: discord.Interaction) -> CallbackQuery | None:
    """Translate a button press; other interaction types return None."""
    if interaction.type is not discord.InteractionType.component:
        return None
    data = interaction.data or {}
    return CallbackQuery(
        caller_id=interaction.user.id,
        caller_name=interaction.user.display_name,
        payload=data.get("custom_id"),
        handle=interaction,
    )


def command_invocation(
    interaction: discord.Interaction, argument: str = ""
) -> CommandInvocation:
    return CommandInvocation(
        caller_id=interaction.user.id,
        caller_name=interaction.user.display_name,
        argument=argument,
        handle=interaction,
    )


class GatekeeperRuntime:
    def __init__(self, config: GatekeeperConfig) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.members = True
        intents.messages = True
        intents.dm_messages = True
        intents.message_content = True

        self.config = config
        self.bot = discord.Client(intents=intents)
        self.tree = app_commands.CommandTree(self.bot)

        self.store = GatekeeperStore.from_files(
            data_file=config.data_file,
            verified_users_file=config.verified_users_file,
            last_prompt_file=config.last_prompt_file,
        )
        self.reference = self.store.load_reference()
        self.inference = InferenceClient.create(
            config.inference_api_key,
            self.reference.reference,
            base_url=config.inference_base_url,
            model=config.inference_model,
        )
        self.registry = SessionRegistry()
        self.gateway = DiscordGateway(self.bot)
        self.workflow = VerificationWorkflow(
            self.gateway,
            self.store,
            self.registry,
            self.inference,
            operator_id=config.admin_id,
            public_channel_id=config.public_channel_id,
            restricted_topic_id=config.restricted_topic_id,
        )

        self.register_events()
        self.register_commands()

    def register_events(self) -> None:
        bot = self.bot

        @bot.event
        async def on_ready() -> None:
            await self.tree.sync()
            log.info("Bot ready as %s (%s)", bot.user, bot.user.id)

        @bot.event
        async def on_message(message: discord.Message) -> None:
            if message.author.bot:
                return
            await self.workflow.handle_message(message_event(message))

        @bot.event
        async def on_interaction(interaction: discord.Interaction) -> None:
            query = callback_query(interaction)
            if query is None:
                return
            await self.workflow.handle_callback(query)

    def register_commands(self) -> None:
        @self.tree.command(
            name="sendverify",
            description="Post or refresh the verification prompt (admin only).",
        )
        async def sendverify(interaction: discord.Interaction) -> None:
            await interaction.response.defer(ephemeral=True)
            await self.workflow.publish_prompt(command_invocation(interaction))

        @self.tree.command(
            name="chat",
            description="Ask a question about the verification process.",
        )
        @app_commands.describe(question="Your question")
        async def chat(interaction: discord.Interaction, question: str) -> None:
            await self.workflow.answer_question(
                command_invocation(interaction, question)
            )

    async def run(self) -> None:
        log.info(
            "Loaded verification reference (%d keywords)", len(self.reference.keywords)
        )
        async with self.bot:
            await self.bot.start(self.config.discord_token)


async def main() -> None:
    load_dotenv()
    config = GatekeeperConfig.load()
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    runtime = GatekeeperRuntime(config)
    await runtime.run()


def run_cli() -> None:
    asyncio.run(main())


__all__ = ["GatekeeperRuntime", "main", "run_cli"]
