"""Deterministic backend selection.

Interchangeable backends within a tier are picked by a stable string hash
instead of a random number, so the same user sending the same message is
always served by the same backend, across calls and across restarts.

The hash is the classic multiply-by-31 rolling hash over UTF-16 code units,
wrapped to a signed 32-bit integer after every step. Python's builtin
``hash()`` is salted per process and must not be used here.

Example:
    >>> string_hash("hello")
    99162322
    >>> routing_seed("hello")
    22
    >>> select(routing_seed("hello"), ["a", "b", "c"])
    'b'
"""

from __future__ import annotations

from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

SEED_MODULUS = 100

_UINT32 = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _to_int32(value: int) -> int:
    value &= _UINT32
    return value - 0x100000000 if value & _INT32_SIGN else value


def string_hash(text: str) -> int:
    """Signed 32-bit rolling hash of ``text`` over UTF-16 code units."""
    h = 0
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + code_unit)
    return h


def seed_string(message: str, user_id: Optional[str] = None) -> str:
    """``"{user_id}:{message}"`` when a user id is known, else the message."""
    return f"{user_id}:{message}" if user_id else message


def routing_seed(message: str, user_id: Optional[str] = None) -> int:
    """Stable seed value in ``[0, 100)`` for a message and optional user."""
    return abs(string_hash(seed_string(message, user_id))) % SEED_MODULUS


def select(seed: int, candidates: Sequence[T]) -> T:
    """Pick ``candidates[seed % len(candidates)]``.

    Raises:
        ValueError: If ``candidates`` is empty.
    """
    if not candidates:
        raise ValueError("Cannot select from an empty candidate list")
    return candidates[seed % len(candidates)]


__all__ = ["string_hash", "seed_string", "routing_seed", "select", "SEED_MODULUS"]
