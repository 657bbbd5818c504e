"""Shared utilities for MindWatch services."""
from .pii import (
    configure_pii_salt,
    hash_pii,
    hash_text_for_audit,
    request_log_context,
    text_log_context,
)
from .scoring import round_half_up, clamp, bucket

__all__ = [
    "configure_pii_salt",
    "hash_pii",
    "hash_text_for_audit",
    "request_log_context",
    "text_log_context",
    "round_half_up",
    "clamp",
    "bucket",
]
