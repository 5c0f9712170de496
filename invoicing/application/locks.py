"""
Per-invoice locks.
Serialises commands against the same invoice inside one process; saves
are additionally version-checked by the repositories.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class InvoiceLockRegistry:
    """Hands out one asyncio.Lock per invoice id."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, invoice_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(invoice_id, asyncio.Lock())
        self._waiters[invoice_id] = self._waiters.get(invoice_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[invoice_id] -= 1
            if not self._waiters[invoice_id]:
                # Last user drops the lock so the registry does not grow unbounded
                del self._waiters[invoice_id]
                del self._locks[invoice_id]

    def __len__(self) -> int:
        return len(self._locks)
