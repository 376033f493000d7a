from __future__ import annotations

from dataclasses import dataclass
from typing import Final

START_VERIFICATION_PAYLOAD: Final[str] = "start_verification"
APPROVE_PREFIX: Final[str] = "approve_"
REJECT_PREFIX: Final[str] = "reject_"


class InvalidActionError(ValueError):
    """Raised for callback payloads that do not name a known action."""


@dataclass(slots=True, frozen=True)
class StartVerification:
    pass


@dataclass(slots=True, frozen=True)
class ApproveParticipant:
    user_id: int

    @property
    def payload(self) -> str:
        return f"{APPROVE_PREFIX}{self.user_id}"


@dataclass(slots=True, frozen=True)
class RejectParticipant:
    user_id: int

    @property
    def payload(self) -> str:
        return f"{REJECT_PREFIX}{self.user_id}"


CallbackAction = StartVerification | ApproveParticipant | RejectParticipant


@dataclass(slots=True, frozen=True)
class ActionButton:
    """A button attached to an outgoing message."""

    label: str
    payload: str
    style: str = "secondary"


def _parse_user_id(payload: str, prefix: str) -> int:
    raw = payload[len(prefix) :]
    if not raw.isdecimal():
        raise InvalidActionError(f"Invalid participant id in payload {payload!r}")
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidActionError(
            f"Invalid participant id in payload {payload!r}"
        ) from exc


def decode_action(payload: str | None) -> CallbackAction:
    """Turn a raw button payload into a typed action."""
    if not payload:
        raise InvalidActionError("Empty callback payload")
    if payload == START_VERIFICATION_PAYLOAD:
        return StartVerification()
    if payload.startswith(APPROVE_PREFIX):
        return ApproveParticipant(_parse_user_id(payload, APPROVE_PREFIX))
    if payload.startswith(REJECT_PREFIX):
        return RejectParticipant(_parse_user_id(payload, REJECT_PREFIX))
    raise InvalidActionError(f"Unknown callback payload {payload!r}")
