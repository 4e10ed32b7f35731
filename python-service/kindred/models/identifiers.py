"""Common identifier types and deterministic document keys."""

from __future__ import annotations

from typing import Annotated, Any, Tuple

from pydantic.functional_validators import BeforeValidator


def _validate_user_id(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError("user id must be a string")
    text = value.strip()
    if not text:
        raise ValueError("user id must not be empty")
    return text


UserId = Annotated[str, BeforeValidator(_validate_user_id)]


def clean_user_id(value: Any) -> str:
    """Return a trimmed user id, or an empty string for anything unusable."""
    if isinstance(value, str):
        return value.strip()
    return ""


def sorted_pair(user_a: str, user_b: str) -> Tuple[str, str]:
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


def _key_part(user_id: str) -> str:
    # Escape the separator and the escape char so every pair maps to one key
    return user_id.replace("%", "%25").replace("_", "%5F")


def _join_key(first: str, second: str) -> str:
    return f"{_key_part(first)}_{_key_part(second)}"


def match_key(user_a: str, user_b: str) -> str:
    """Order-independent key shared by both directions of a pair."""
    low, high = sorted_pair(user_a, user_b)
    return _join_key(low, high)


def like_key(from_uid: str, to_uid: str) -> str:
    return _join_key(from_uid, to_uid)


def block_key(blocker_uid: str, subject_uid: str) -> str:
    return _join_key(blocker_uid, subject_uid)


__all__ = [
    "UserId",
    "block_key",
    "clean_user_id",
    "like_key",
    "match_key",
    "sorted_pair",
]
