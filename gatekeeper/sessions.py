"""In-memory verification state, keyed by participant id."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class VerificationSession:
    question: str


@dataclass(slots=True, frozen=True)
class PendingApproval:
    question: str
    answer: str


class SessionRegistry:
    """Holds open sessions and approvals awaiting an operator decision.

    Nothing here survives a restart.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, VerificationSession] = {}
        self._approvals: dict[int, PendingApproval] = {}

    # ----- Sessions -----
    def open_session(self, user_id: int, question: str) -> VerificationSession:
        session = VerificationSession(question=question)
        self._sessions[user_id] = session
        return session

    def get_session(self, user_id: int) -> VerificationSession | None:
        return self._sessions.get(user_id)

    def has_session(self, user_id: int) -> bool:
        return user_id in self._sessions

    def submit_answer(self, user_id: int, answer: str) -> PendingApproval | None:
        """Move an open session into the approval queue."""
        session = self._sessions.pop(user_id, None)
        if session is None:
            return None
        approval = PendingApproval(question=session.question, answer=answer)
        self._approvals[user_id] = approval
        return approval

    # ----- Approvals -----
    def get_approval(self, user_id: int) -> PendingApproval | None:
        return self._approvals.get(user_id)

    def has_approval(self, user_id: int) -> bool:
        return user_id in self._approvals

    def resolve_approval(self, user_id: int) -> PendingApproval | None:
        return self._approvals.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._sessions) + len(self._approvals)
