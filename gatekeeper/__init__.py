"""Topic moderation and participant verification helpers."""

from .actions import (
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
    DiscordGateway,
    GatewayError,
    InboundMessage,
    MessagingGateway,
)
from .inference import InferenceClient
from .sessions import PendingApproval, SessionRegistry, VerificationSession
from .storage import (
    GatekeeperStore,
    JsonFileBackend,
    MemoryBackend,
    StorageError,
    VerificationReference,
)
from .workflow import VerificationWorkflow

__all__ = [
    "ActionButton",
    "ApproveParticipant",
    "InvalidActionError",
    "RejectParticipant",
    "StartVerification",
    "decode_action",
    "CallbackQuery",
    "CommandInvocation",
    "DiscordGateway",
    "GatewayError",
    "InboundMessage",
    "MessagingGateway",
    "InferenceClient",
    "PendingApproval",
    "SessionRegistry",
    "VerificationSession",
    "GatekeeperStore",
    "JsonFileBackend",
    "MemoryBackend",
    "StorageError",
    "VerificationReference",
    "VerificationWorkflow",
]
