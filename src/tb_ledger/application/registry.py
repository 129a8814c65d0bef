"""LedgerRegistry — holds the live ledger of every signed-in user.

Constructed once at application start (see src/main.py lifespan) and injected
into handlers, so tests can build their own with a fake repository.

Reads are served from a bounded ScopeCache. Mutations go through
``checkout``, which holds the scope's lock and re-reads the snapshot from
storage so a copy cached by this process never overwrites a newer one. A
ledger whose last save failed is the exception: it stays in memory, is used
as is, and is written again on the next mutation.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal

from redis.exceptions import RedisError

from src.tb_common.enums import SessionEvent
from src.tb_common.errors import BackendError
from src.tb_common.scope_cache import ScopeCache
from src.tb_ledger.domain.demo import demo_transactions
from src.tb_ledger.domain.ledger import TransactionLedger
from src.tb_ledger.domain.repository import LedgerRepositoryProtocol

logger = logging.getLogger("tb.ledger")


class LedgerRegistry:
    def __init__(
        self,
        repo: LedgerRepositoryProtocol,
        starting_balance: Decimal,
        seed_demo: bool = False,
        cache: ScopeCache[TransactionLedger] | None = None,
    ) -> None:
        self._repo = repo
        self._starting_balance = starting_balance
        self._seed_demo = seed_demo
        self._cache: ScopeCache[TransactionLedger] = (
            cache if cache is not None else ScopeCache(ttl_seconds=1800.0, max_entries=10_000)
        )

    async def get(self, scope: str) -> TransactionLedger:
        """Return the scope's ledger for reading, loading it on a cache miss."""
        async with self._cache.lock(scope):
            ledger = self._cache.get(scope)
            if ledger is None:
                ledger = await self._load(scope)
                self._cache.put(scope, ledger)
            return ledger

    @asynccontextmanager
    async def checkout(self, scope: str) -> AsyncIterator[TransactionLedger]:
        """Exclusive access to the scope's ledger for one mutation and its save."""
        async with self._cache.lock(scope):
            ledger = self._cache.get_unsaved(scope)
            if ledger is None:
                ledger = await self._load(scope)
                self._cache.put(scope, ledger)
            yield ledger

    async def _load(self, scope: str) -> TransactionLedger:
        try:
            ledger = await self._repo.load(scope)
        except (RedisError, OSError) as exc:
            logger.error("ledger load failed scope=%s: %s", scope, exc)
            raise BackendError("Could not load the transaction ledger") from exc
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("ledger snapshot corrupt scope=%s: %s", scope, exc)
            raise BackendError("Stored transaction ledger is unreadable") from exc

        if ledger is None:
            seed = demo_transactions() if self._seed_demo else []
            ledger = TransactionLedger(self._starting_balance, seed)
        return ledger

    async def persist(self, scope: str, ledger: TransactionLedger) -> bool:
        """Write the ledger snapshot. Returns False instead of raising on storage failure."""
        try:
            await self._repo.save(scope, ledger)
        except (RedisError, OSError) as exc:
            logger.warning(
                "ledger persist failed scope=%s size=%d: %s", scope, len(ledger), exc
            )
            self._cache.mark_saved(scope, False)
            return False
        self._cache.mark_saved(scope, True)
        return True

    def drop(self, scope: str) -> None:
        """Forget the in-memory ledger; the stored snapshot stays."""
        self._cache.drop(scope)

    def on_session_event(self, event: SessionEvent, user_id: str) -> None:
        if event == SessionEvent.SIGNED_OUT:
            self.drop(user_id)
