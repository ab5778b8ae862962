from __future__ import annotations

import importlib
import re
import secrets

ulid_module = importlib.import_module("ulid")

SESSION_KEY_LENGTH = 5
SESSION_KEY_PATTERN = re.compile(r"^[0-9a-f]{5}$")


def new_team_id() -> str:
    return f"team_{ulid_module.new().str}"


def new_announcement_id() -> str:
    return f"ann_{ulid_module.new().str}"


def new_session_key() -> str:
    return secrets.token_hex(3)[:SESSION_KEY_LENGTH]


def normalize_session_key(raw: str) -> str:
    return raw.strip().lower()


def is_valid_session_key(key: str) -> bool:
    return SESSION_KEY_PATTERN.match(key) is not None
