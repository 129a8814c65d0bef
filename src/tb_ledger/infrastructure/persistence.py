"""LedgerRepository — stores each ledger as one snapshot under a named key.

Key layout: banco-tempo-transactions:<scope>, where scope is the owning user id.
"""

from decimal import Decimal

from src.tb_common.snapshot_store import SnapshotStoreProtocol
from src.tb_ledger.domain.ledger import TransactionLedger

KEY_PREFIX = "banco-tempo-transactions"


def ledger_key(scope: str) -> str:
    return f"{KEY_PREFIX}:{scope}"


class LedgerRepository:
    def __init__(self, store: SnapshotStoreProtocol, starting_balance: Decimal) -> None:
        self._store = store
        self._starting_balance = starting_balance

    async def load(self, scope: str) -> TransactionLedger | None:
        snapshot = await self._store.load(ledger_key(scope))
        if snapshot is None:
            return None
        return TransactionLedger.from_snapshot(snapshot, self._starting_balance)

    async def save(self, scope: str, ledger: TransactionLedger) -> None:
        await self._store.save(ledger_key(scope), ledger.to_snapshot())
