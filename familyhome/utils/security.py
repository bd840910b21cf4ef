"""Security utilities: session tokens, invite code generation."""

import secrets
import string
from datetime import datetime, timedelta, timezone

import jwt

from familyhome.config import Settings

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 6


# --- Session Tokens ---

def create_session_token(user_id: str, email: str, settings: Settings) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.session_expire_days)
    payload = {
        "sub": user_id,
        "email": email,
        "exp": expire,
        "type": "session",
    }
    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str, settings: Settings) -> dict:
    """Decode and validate a session token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])


# --- Invite Codes ---

def generate_invite_code() -> str:
    """Generate a random 6-character invite code from [A-Z0-9].

    Uniqueness is not checked here.
    """
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))
