"""Shared input sanitizers for API models."""

from __future__ import annotations

# Gateway order notes accept at most 256 characters per value.
NOTE_VALUE_MAX_LENGTH = 256


def _squash_whitespace(text: str) -> str:
    return " ".join(text.split())


def normalize_contact(value: object, *, field: str) -> str:
    """Trim and squash a free-form buyer note; content is not checked."""
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    cleaned = _squash_whitespace(value.strip())
    if len(cleaned) > NOTE_VALUE_MAX_LENGTH:
        raise ValueError(f"{field} must be <= {NOTE_VALUE_MAX_LENGTH} characters")
    return cleaned


__all__ = ["NOTE_VALUE_MAX_LENGTH", "normalize_contact"]
