"""
Little Stars - Per-child write locks
Serializes attempt recording for the same child inside one process
"""
import asyncio
import uuid
import weakref


class ChildLockRegistry:
    """
    Hands out one asyncio.Lock per child.

    Locks are held in a weak-value map, so a child's lock disappears once no
    request is using it and the registry does not grow with every child seen.
    Cross-child calls never share a lock.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def get_lock(self, child_id: uuid.UUID) -> asyncio.Lock:
        """Get or create the lock for a child."""
        lock = self._locks.get(child_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[child_id] = lock
        return lock


# Process-wide registry used by the progress service
child_locks = ChildLockRegistry()
