from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Protocol

log: Final = logging.getLogger("gatekeeper")

REFERENCE_KEY: Final[str] = "reference"
VERIFIED_USERS_KEY: Final[str] = "verified_users"
LAST_PROMPT_KEY: Final[str] = "last_prompt"

PLACEHOLDER_REFERENCE: Final[str] = "⚠️ بيانات التوثيق غير متاحة."


class StorageError(RuntimeError):
    """Raised when a document cannot be written back."""


class DocumentBackend(Protocol):
    def get(self, key: str, default: Any) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def flush(self) -> None: ...


class MemoryBackend:
    """Keeps documents in a dict. Used by tests and dry runs."""

    def __init__(self, documents: dict[str, Any] | None = None) -> None:
        self.documents: dict[str, Any] = dict(documents or {})
        self.flush_count = 0

    def get(self, key: str, default: Any) -> Any:
        return self.documents.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.documents[key] = value

    def flush(self) -> None:
        self.flush_count += 1


class JsonFileBackend:
    """One JSON file per document, read lazily and rewritten whole on flush."""

    def __init__(self, paths: dict[str, Path | str]) -> None:
        self._paths = {key: Path(path) for key, path in paths.items()}
        self._cache: dict[str, Any] = {}
        self._dirty: set[str] = set()

    def path_for(self, key: str) -> Path:
        try:
            return self._paths[key]
        except KeyError:
            raise KeyError(f"No file configured for document {key!r}") from None

    def get(self, key: str, default: Any) -> Any:
        if key in self._cache:
            return self._cache[key]
        path = self.path_for(key)
        try:
            with path.open(encoding="utf-8") as fh:
                value = json.load(fh)
        except FileNotFoundError:
            log.info("Document %s not found at %s, using default", key, path)
            value = default
        except (OSError, ValueError) as exc:
            log.warning("Failed to load %s from %s: %s", key, path, exc)
            value = default
        self._cache[key] = value
        return value

    def set(self, key: str, value: Any) -> None:
        self.path_for(key)
        self._cache[key] = value
        self._dirty.add(key)

    def flush(self) -> None:
        for key in sorted(self._dirty):
            path = self._paths[key]
            try:
                with path.open("w", encoding="utf-8") as fh:
                    json.dump(self._cache[key], fh, ensure_ascii=False, indent=2)
            except (OSError, TypeError) as exc:
                raise StorageError(f"Failed to write {key} to {path}: {exc}") from exc
            self._dirty.discard(key)


@dataclass(slots=True)
class VerificationReference:
    keywords: list[str] = field(default_factory=list)
    reference: str = PLACEHOLDER_REFERENCE

    @classmethod
    def from_document(cls, data: object) -> VerificationReference:
        if not isinstance(data, dict):
            return cls()
        keywords = data.get("verification_keywords") or []
        reference = data.get("verification_reference") or PLACEHOLDER_REFERENCE
        return cls(
            keywords=[str(word) for word in keywords],
            reference=str(reference),
        )


class GatekeeperStore:
    """Typed access to the three persisted documents."""

    def __init__(self, backend: DocumentBackend) -> None:
        self._backend = backend

    @classmethod
    def from_files(
        cls,
        *,
        data_file: Path | str,
        verified_users_file: Path | str,
        last_prompt_file: Path | str,
    ) -> GatekeeperStore:
        return cls(
            JsonFileBackend(
                {
                    REFERENCE_KEY: data_file,
                    VERIFIED_USERS_KEY: verified_users_file,
                    LAST_PROMPT_KEY: last_prompt_file,
                }
            )
        )

    # ----- Reference -----
    def load_reference(self) -> VerificationReference:
        return VerificationReference.from_document(
            self._backend.get(REFERENCE_KEY, None)
        )

    # ----- Verified participants -----
    def _verified(self) -> dict[str, bool]:
        data = self._backend.get(VERIFIED_USERS_KEY, {})
        return data if isinstance(data, dict) else {}

    def is_verified(self, user_id: int) -> bool:
        return bool(self._verified().get(str(user_id)))

    def mark_verified(self, user_id: int) -> None:
        users = dict(self._verified())
        users[str(user_id)] = True
        self._backend.set(VERIFIED_USERS_KEY, users)
        self._backend.flush()

    # ----- Last verification prompt -----
    def last_prompt_id(self) -> int | None:
        data = self._backend.get(LAST_PROMPT_KEY, {"messageId": None})
        if not isinstance(data, dict):
            return None
        raw = data.get("messageId")
        try:
            return int(raw) if raw is not None else None
        except (TypeError, ValueError):
            return None

    def set_last_prompt_id(self, message_id: int | None) -> None:
        self._backend.set(LAST_PROMPT_KEY, {"messageId": message_id})
        self._backend.flush()
