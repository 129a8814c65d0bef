"""TransactionLedger — the per-user time ledger and its status state machine.

Pure in-memory object. Persistence is the caller's job: the application layer
snapshots the ledger after every mutation.

State machine (per transaction):

    pending ──complete──▶ completed   (terminal)
        └─────cancel────▶ cancelled   (terminal)

A transition requested on a missing id or a terminal transaction changes
nothing; the returned TransitionOutcome says which case applied.
"""

import dataclasses
from collections.abc import Iterable, Iterator
from decimal import Decimal
from typing import Any

from src.tb_common.enums import TransactionStatus, TransactionType, TransitionOutcome
from src.tb_common.errors import InvalidTransactionError
from src.tb_common.hours import validate_hours
from src.tb_ledger.domain.models import Transaction

SNAPSHOT_VERSION = 1


class TransactionLedger:
    def __init__(
        self,
        starting_balance: Decimal,
        transactions: Iterable[Transaction] = (),
    ) -> None:
        self._starting_balance = starting_balance
        # Most-recent-first: index 0 is the latest insert
        self._transactions: list[Transaction] = list(transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._transactions))

    @property
    def starting_balance(self) -> Decimal:
        return self._starting_balance

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def get(self, transaction_id: str) -> Transaction | None:
        for tx in self._transactions:
            if tx.id == transaction_id:
                return tx
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_transaction(self, transaction: Transaction) -> None:
        """Insert at the head. Rejects non-positive hours and duplicate ids."""
        try:
            validate_hours(transaction.hours)
        except ValueError as exc:
            raise InvalidTransactionError(str(exc)) from exc
        if self.get(transaction.id) is not None:
            raise InvalidTransactionError(f"duplicate id {transaction.id}")
        self._transactions.insert(0, transaction)

    def complete_transaction(self, transaction_id: str) -> TransitionOutcome:
        return self._transition(transaction_id, TransactionStatus.COMPLETED)

    def cancel_transaction(self, transaction_id: str) -> TransitionOutcome:
        return self._transition(transaction_id, TransactionStatus.CANCELLED)

    def _transition(self, transaction_id: str, target: TransactionStatus) -> TransitionOutcome:
        for index, tx in enumerate(self._transactions):
            if tx.id != transaction_id:
                continue
            if tx.is_terminal:
                return TransitionOutcome.ALREADY_TERMINAL
            self._transactions[index] = dataclasses.replace(tx, status=target)
            return TransitionOutcome.APPLIED
        return TransitionOutcome.NOT_FOUND

    # ------------------------------------------------------------------
    # Derived values — recomputed on every call
    # ------------------------------------------------------------------

    def get_time_balance(self) -> Decimal:
        balance = self._starting_balance
        for tx in self._transactions:
            if tx.status == TransactionStatus.COMPLETED:
                balance += tx.signed_hours
        return balance

    def total_earned(self) -> Decimal:
        return self._completed_sum(TransactionType.EARNED)

    def total_spent(self) -> Decimal:
        return self._completed_sum(TransactionType.SPENT)

    def pending_count(self) -> int:
        return sum(1 for tx in self._transactions if tx.status == TransactionStatus.PENDING)

    def _completed_sum(self, tx_type: TransactionType) -> Decimal:
        return sum(
            (
                tx.hours
                for tx in self._transactions
                if tx.type == tx_type and tx.status == TransactionStatus.COMPLETED
            ),
            Decimal("0"),
        )

    # ------------------------------------------------------------------
    # Snapshot (de)serialization
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "transactions": [tx.to_dict() for tx in self._transactions],
        }

    @classmethod
    def from_snapshot(
        cls, snapshot: dict[str, Any], starting_balance: Decimal
    ) -> "TransactionLedger":
        """Rebuild from a stored snapshot. The starting balance is configuration, not state."""
        version = snapshot.get("version")
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported ledger snapshot version: {version!r}")
        return cls(
            starting_balance,
            (Transaction.from_dict(item) for item in snapshot.get("transactions", [])),
        )
