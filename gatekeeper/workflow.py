"""Routes inbound events to moderation, verification and question answering."""

from __future__ import annotations

import logging
from typing import Final, Protocol

from . import messages
from .actions import (
    START_VERIFICATION_PAYLOAD,
    ActionButton,
    ApproveParticipant,
    InvalidActionError,
    RejectParticipant,
    StartVerification,
    decode_action,
)
from .gateway import (
    CallbackQuery,
    CommandInvocation,
    GatewayError,
    InboundMessage,
    MessagingGateway,
)
from .sessions import SessionRegistry
from .storage import GatekeeperStore, StorageError

log: Final = logging.getLogger("gatekeeper")


class Answerer(Protocol):
    async def answer(self, question: str) -> str: ...


class VerificationWorkflow:
    def __init__(
        self,
        gateway: MessagingGateway,
        store: GatekeeperStore,
        registry: SessionRegistry,
        answerer: Answerer,
        *,
        operator_id: int,
        public_channel_id: int,
        restricted_topic_id: int,
    ) -> None:
        self.gateway = gateway
        self.store = store
        self.registry = registry
        self.answerer = answerer
        self.operator_id = operator_id
        self.public_channel_id = public_channel_id
        self.restricted_topic_id = restricted_topic_id

    def is_operator(self, user_id: int) -> bool:
        return user_id == self.operator_id

    # ---------- Messages ----------
    async def handle_message(self, message: InboundMessage) -> None:
        if await self.enforce_restriction(message):
            return
        await self.capture_answer(message)

    async def enforce_restriction(self, message: InboundMessage) -> bool:
        """Delete non-operator posts in the restricted topic.

        Returns True when the message must not be processed any further.
        """
        if not message.posted_in(self.restricted_topic_id):
            return False
        if self.is_operator(message.author_id):
            return False

        try:
            await self.gateway.delete_message(message.channel_id, message.message_id)
            log.info(
                "Deleted message %s from %s in restricted topic",
                message.message_id,
                message.author_id,
            )
        except GatewayError as exc:
            log.error("Error deleting message %s: %s", message.message_id, exc)
        return True

    async def capture_answer(self, message: InboundMessage) -> bool:
        answer = (message.text or "").strip()
        if not answer:
            return False

        approval = self.registry.submit_answer(message.author_id, answer)
        if approval is None:
            return False

        user_id = message.author_id
        log.info("Verification answer from %s forwarded for approval", user_id)
        await self.gateway.send_to_user(
            self.operator_id,
            messages.approval_request(
                message.author_name, approval.question, approval.answer
            ),
            buttons=[
                ActionButton(
                    messages.APPROVE_BUTTON_LABEL,
                    ApproveParticipant(user_id).payload,
                    "success",
                ),
                ActionButton(
                    messages.REJECT_BUTTON_LABEL,
                    RejectParticipant(user_id).payload,
                    "danger",
                ),
            ],
        )
        await self.gateway.send_to_user(user_id, messages.ANSWER_FORWARDED)
        return True

    # ---------- Buttons ----------
    async def handle_callback(self, query: CallbackQuery) -> None:
        await self.gateway.acknowledge(query)

        notice: str | None = None
        try:
            action = decode_action(query.payload)
        except InvalidActionError as exc:
            log.warning("Ignoring callback from %s: %s", query.caller_id, exc)
            return

        if isinstance(action, StartVerification):
            await self.start_verification(query.caller_id)
        elif isinstance(action, ApproveParticipant):
            notice = await self.decide(query, action.user_id, approved=True)
        elif isinstance(action, RejectParticipant):
            notice = await self.decide(query, action.user_id, approved=False)

        if notice:
            await self.gateway.notify(query, notice)

    async def start_verification(self, user_id: int) -> None:
        if self.store.is_verified(user_id):
            await self.gateway.send_to_user(user_id, messages.ALREADY_VERIFIED)
            return

        if self.registry.has_approval(user_id):
            await self.gateway.send_to_user(user_id, messages.ALREADY_PENDING)
            return

        session = self.registry.open_session(user_id, messages.VERIFICATION_QUESTION)
        log.info("Opened verification session for %s", user_id)
        await self.gateway.send_to_user(
            user_id, messages.question_message(session.question)
        )

    async def decide(
        self, query: CallbackQuery, user_id: int, *, approved: bool
    ) -> str | None:
        """Apply an operator decision. Returns a notice for the caller, if any."""
        if not self.is_operator(query.caller_id):
            log.warning(
                "Non-operator %s tried to decide verification of %s",
                query.caller_id,
                user_id,
            )
            return messages.ADMIN_ONLY

        approval = self.registry.resolve_approval(user_id)
        if approval is None:
            log.info("No pending approval for %s, ignoring decision", user_id)
            return None

        if approved:
            try:
                self.store.mark_verified(user_id)
            except StorageError as exc:
                log.exception("Failed to store verification for %s: %s", user_id, exc)
            log.info("Approved verification of %s", user_id)
            await self.gateway.send_to_user(user_id, messages.VERIFIED_SUCCESS)
            await self.gateway.close_actions(query, messages.RESULT_APPROVED)
        else:
            log.info("Rejected verification of %s", user_id)
            await self.gateway.send_to_user(user_id, messages.VERIFICATION_REJECTED)
            await self.gateway.close_actions(query, messages.RESULT_REJECTED)
        return None

    # ---------- Commands ----------
    async def publish_prompt(self, command: CommandInvocation) -> None:
        if not self.is_operator(command.caller_id):
            await self.gateway.reply(command, messages.ADMIN_ONLY)
            return

        buttons = [
            ActionButton(
                messages.PROMPT_BUTTON_LABEL, START_VERIFICATION_PAYLOAD, "primary"
            )
        ]

        last_id = self.store.last_prompt_id()
        if last_id is not None:
            try:
                await self.gateway.edit_message(
                    self.public_channel_id,
                    last_id,
                    messages.PROMPT_TEXT,
                    buttons=buttons,
                )
            except GatewayError as exc:
                log.warning(
                    "Previous verification message %s not found, sending a new one: %s",
                    last_id,
                    exc,
                )
            else:
                await self.gateway.reply(command, messages.PROMPT_UPDATED)
                return

        try:
            message_id = await self.gateway.send_to_channel(
                self.public_channel_id, messages.PROMPT_TEXT, buttons=buttons
            )
        except GatewayError as exc:
            log.exception("Failed to post verification message: %s", exc)
            await self.gateway.reply(command, messages.PROMPT_FAILED)
            return

        try:
            self.store.set_last_prompt_id(message_id)
        except StorageError as exc:
            log.exception("Failed to store verification message id: %s", exc)
        await self.gateway.reply(command, messages.PROMPT_SENT)

    async def answer_question(self, command: CommandInvocation) -> None:
        question = command.argument.strip()
        if not question:
            await self.gateway.reply(command, messages.CHAT_USAGE)
            return

        await self.gateway.reply(command, messages.THINKING)
        response = await self.answerer.answer(question)
        await self.gateway.reply(command, response)
