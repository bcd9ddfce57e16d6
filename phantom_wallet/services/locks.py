"""Per-user mutual exclusion for read-modify-write sequences"""

import asyncio
import weakref


class UserLockRegistry:
    """
    Hands out one asyncio.Lock per user id.

    Mutating operations for the same user hold the lock across their whole
    read-compute-write sequence; different users never contend. Locks are
    weakly held and disappear once no operation references them.
    Serialization is per process only.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock
