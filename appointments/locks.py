"""
Per-professional mutual exclusion for ledger mutations.
"""

import threading
from contextlib import contextmanager

from .exceptions import ConflictError


class ProfessionalLocks:
    """
    Registry of one lock per professional.

    Locks are created on first use and kept for the life of the registry;
    the number of professionals bounds its size.
    """

    def __init__(self, timeout: float = 10):
        self.timeout = timeout
        self._locks = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, professional_id):
        with self._registry_lock:
            lock = self._locks.get(professional_id)
            if lock is None:
                lock = self._locks[professional_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, professional_id):
        """
        Hold the professional's lock for the duration of the block.

        Raises:
            ConflictError: If the lock is not acquired within the timeout
        """
        lock = self._lock_for(professional_id)
        if not lock.acquire(timeout=self.timeout):
            raise ConflictError(
                "Calendar is busy, please try again",
                professional_id=professional_id,
            )
        try:
            yield
        finally:
            lock.release()
