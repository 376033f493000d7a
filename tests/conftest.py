from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from gatekeeper.gateway import CallbackQuery, CommandInvocation, GatewayError
from gatekeeper.sessions import SessionRegistry
from gatekeeper.storage import GatekeeperStore, MemoryBackend
from gatekeeper.workflow import VerificationWorkflow

ADMIN_ID = 1000
PUBLIC_CHANNEL_ID = 2000
RESTRICTED_TOPIC_ID = 3000


@dataclass
class FakeGateway:
    """Records outbound calls instead of talking to Discord."""

    user_messages: list[tuple[int, str, list]] = field(default_factory=list)
    channel_messages: list[tuple[int, str, list]] = field(default_factory=list)
    edits: list[tuple[int, int, str]] = field(default_factory=list)
    deletions: list[tuple[int, int]] = field(default_factory=list)
    acknowledgements: list[CallbackQuery] = field(default_factory=list)
    notices: list[tuple[CallbackQuery, str]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    closed: list[tuple[CallbackQuery, str]] = field(default_factory=list)
    replies: list[tuple[CommandInvocation, str]] = field(default_factory=list)
    fail_delete: bool = False
    fail_edit: bool = False
    fail_send_channel: bool = False
    next_message_id: int = 500

    async def send_to_user(self, user_id, text, *, buttons=()):
        self.calls.append("send_to_user")
        self.user_messages.append((user_id, text, list(buttons)))

    async def send_to_channel(self, channel_id, text, *, buttons=()):
        if self.fail_send_channel:
            raise GatewayError("send refused")
        self.channel_messages.append((channel_id, text, list(buttons)))
        self.next_message_id += 1
        return self.next_message_id

    async def edit_message(self, channel_id, message_id, text, *, buttons=()):
        if self.fail_edit:
            raise GatewayError("message too old")
        self.edits.append((channel_id, message_id, text))

    async def delete_message(self, channel_id, message_id):
        if self.fail_delete:
            raise GatewayError("missing permissions")
        self.deletions.append((channel_id, message_id))

    async def acknowledge(self, query):
        self.calls.append("acknowledge")
        self.acknowledgements.append(query)

    async def notify(self, query, text):
        self.calls.append("notify")
        self.notices.append((query, text))

    async def close_actions(self, query, result):
        self.calls.append("close_actions")
        self.closed.append((query, result))

    async def reply(self, command, text):
        self.replies.append((command, text))

    def texts_to(self, user_id: int) -> list[str]:
        return [text for uid, text, _ in self.user_messages if uid == user_id]


class FakeAnswerer:
    def __init__(self, response: str = "generated answer") -> None:
        self.response = response
        self.questions: list[str] = []

    async def answer(self, question: str) -> str:
        self.questions.append(question)
        return self.response


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend) -> GatekeeperStore:
    return GatekeeperStore(backend)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def answerer() -> FakeAnswerer:
    return FakeAnswerer()


@pytest.fixture
def workflow(gateway, store, registry, answerer) -> VerificationWorkflow:
    return VerificationWorkflow(
        gateway,
        store,
        registry,
        answerer,
        operator_id=ADMIN_ID,
        public_channel_id=PUBLIC_CHANNEL_ID,
        restricted_topic_id=RESTRICTED_TOPIC_ID,
    )
