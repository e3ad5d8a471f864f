"""Mutex pool selected by string key."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from ..constants import KEY_LOCK_SIZE

_FNV32_OFFSET_BASIS = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1_32(data: bytes) -> int:
    """Compute the 32-bit FNV-1 hash of ``data``."""
    h = _FNV32_OFFSET_BASIS
    for byte in data:
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
        h ^= byte
    return h


def slot_for(key: str, size: int) -> int:
    """Map a key to a slot index in a pool of ``size`` locks."""
    return fnv1_32(key.encode("utf-8")) % size


class KeyMutexLock:
    """Fixed-size pool of locks indexed by a hash of the key.

    Identical keys always share a lock. Distinct keys may collide on the same
    slot and then contend with each other.
    """

    def __init__(self, size: int = KEY_LOCK_SIZE):
        if size <= 0:
            raise ValueError(f"lock pool size must be positive, got {size}")
        self._locks = [threading.Lock() for _ in range(size)]

    @property
    def size(self) -> int:
        return len(self._locks)

    def lock(self, key: str) -> None:
        """Block until the lock for ``key`` is acquired."""
        self._locks[slot_for(key, self.size)].acquire()

    def unlock(self, key: str) -> None:
        """Release the lock for ``key``."""
        self._locks[slot_for(key, self.size)].release()

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        self.lock(key)
        try:
            yield
        finally:
            self.unlock(key)
