"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from src.tb_ledger.domain.ledger import TransactionLedger


class LedgerRepositoryProtocol(Protocol):
    async def load(self, scope: str) -> TransactionLedger | None: ...

    async def save(self, scope: str, ledger: TransactionLedger) -> None: ...
