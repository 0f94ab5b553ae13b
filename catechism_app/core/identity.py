"""Nickname handling and the admin passphrase gate."""

from __future__ import annotations

import re

from catechism_app.constants.game_constants import ADMIN_IDENTITY, GUEST_IDENTITY
from catechism_app.constants.storage_constants import ADMIN_PASSPHRASE

# Characters that cannot appear in a store path segment, plus the escape character itself.
_UNSAFE_KEY_CHARS = re.compile(r"[%./#$\[\]\s]")


def normalize_nickname(nickname: str | None) -> str | None:
    """Return the trimmed nickname, or ``None`` when it has no letters or digits."""
    if nickname is None:
        return None
    cleaned = " ".join(nickname.split())
    if not any(char.isalnum() for char in cleaned):
        return None
    return cleaned


def is_sentinel(identity: str | None) -> bool:
    return identity in (None, "", GUEST_IDENTITY, ADMIN_IDENTITY)


def user_key(identity: str) -> str:
    """Map a nickname to the store key holding its points.

    Unsafe characters are percent-escaped, so distinct nicknames never share a key.
    """
    if not identity:
        raise ValueError("Nickname must not be empty.")
    return _UNSAFE_KEY_CHARS.sub(lambda match: f"%{ord(match.group()):02X}", identity)


def verify_admin_passphrase(passphrase: str, expected: str = ADMIN_PASSPHRASE) -> bool:
    """Static shared-secret gate for the admin surface."""
    return passphrase == expected
