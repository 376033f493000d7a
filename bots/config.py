"""Configuration helpers for the gatekeeper runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass

from gatekeeper.inference import DEFAULT_BASE_URL, DEFAULT_MODEL


def env_int(name: str, *, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def env_str(name: str, *, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


@dataclass(frozen=True, slots=True)
class GatekeeperConfig:
    discord_token: str
    inference_api_key: str
    admin_id: int
    public_channel_id: int
    restricted_topic_id: int
    inference_base_url: str = DEFAULT_BASE_URL
    inference_model: str = DEFAULT_MODEL
    data_file: str = "data.json"
    verified_users_file: str = "verified_users.json"
    last_prompt_file: str = "last_verification_message.json"
    log_level: str = "INFO"

    @classmethod
    def load(cls) -> GatekeeperConfig:
        missing: list[str] = []

        def need(name: str) -> str:
            value = os.getenv(name)
            if not value:
                missing.append(name)
                return ""
            return value

        def need_int(name: str) -> int:
            value = env_int(name)
            if value is None:
                missing.append(name)
                return 0
            return value

        discord_token = need("DISCORD_TOKEN")
        inference_api_key = need("TOGETHER_AI_API_KEY")
        admin_id = need_int("ADMIN_ID")
        public_channel_id = need_int("PUBLIC_CHANNEL_ID")
        restricted_topic_id = need_int("RESTRICTED_TOPIC_ID")

        if missing:
            raise RuntimeError("Missing env vars: " + ", ".join(sorted(set(missing))))

        return cls(
            discord_token=discord_token,
            inference_api_key=inference_api_key,
            admin_id=admin_id,
            public_channel_id=public_channel_id,
            restricted_topic_id=restricted_topic_id,
            inference_base_url=env_str("INFERENCE_BASE_URL", default=DEFAULT_BASE_URL),
            inference_model=env_str("INFERENCE_MODEL", default=DEFAULT_MODEL),
            data_file=env_str("DATA_FILE", default="data.json"),
            verified_users_file=env_str(
                "VERIFIED_USERS_FILE", default="verified_users.json"
            ),
            last_prompt_file=env_str(
                "LAST_PROMPT_FILE", default="last_verification_message.json"
            ),
            log_level=env_str("LOG_LEVEL", default="INFO").upper(),
        )
