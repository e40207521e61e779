from __future__ import annotations

import unicodedata

import bcrypt

from ..config import settings

# bcrypt only looks at the first 72 bytes; newer releases reject longer input.
_BCRYPT_MAX_BYTES = 72


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def _secret_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_secret_bytes(plain), salt).decode()


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_secret_bytes(plain), hashed.encode())
    except ValueError:
        # Stored value is not a bcrypt digest.
        return False


# ---------------------------------------------------------------------------
# Username comparison
# ---------------------------------------------------------------------------

def username_key(username: str) -> str:
    """Case-insensitive comparison key: "Alice", "ALICE" and "alice" collide."""
    return unicodedata.normalize("NFKC", username).casefold()
