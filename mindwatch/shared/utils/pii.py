"""Log-safe context for MindWatch events.

Services log who sent something and what it looked like, never the raw
values. User ids become salted digests (so they cannot be reversed by
hashing a guessed id); message text becomes an unsalted fingerprint
plus its length, so the same message can be correlated across services.
"""
import hashlib
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

MIN_SALT_LENGTH = 32
ANONYMOUS_USER = "anonymous"

_salt: Optional[bytes] = None


def configure_pii_salt(salt: str) -> None:
    """Set the salt for user id digests. Called once at service startup.

    Raises:
        ValueError: If salt is shorter than MIN_SALT_LENGTH
    """
    global _salt
    if len(salt or "") < MIN_SALT_LENGTH:
        logger.critical("PII_SALT_REJECTED", extra={"min_length": MIN_SALT_LENGTH})
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")
    _salt = salt.encode("utf-8")


def _sha256(*parts: bytes) -> str:
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part)
    return digest.hexdigest()


def hash_pii(value: Any) -> str:
    """Salted digest of a user identifier. Non-string ids are stringified.

    Raises:
        RuntimeError: If configure_pii_salt() has not been called
    """
    if _salt is None:
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")
    return _sha256(_salt, str(value).encode("utf-8"))


def hash_text_for_audit(text: str) -> str:
    """Unsalted fingerprint of message text."""
    return _sha256(text.encode("utf-8"))


def text_log_context(text: str) -> Dict[str, Any]:
    """`extra=` fields describing a piece of user text."""
    return {"text_hash": hash_text_for_audit(text), "text_length": len(text)}


def request_log_context(user_id: Any = None, text: Optional[str] = None) -> Dict[str, Any]:
    """`extra=` fields for an incoming request.

    A missing user id is logged as the digest of ANONYMOUS_USER so every
    request line carries the same keys.
    """
    context = {"user_id_hash": hash_pii(ANONYMOUS_USER if user_id is None else user_id)}
    if text is not None:
        context.update(text_log_context(text))
    return context
