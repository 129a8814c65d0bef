"""LedgerApplicationService — thin composition layer over LedgerRegistry.

Every mutation runs inside registry.checkout: domain mutation, then
registry.persist, all under the user's lock.
Transition misses are silent by default; strict mode turns NOT_FOUND and
ALREADY_TERMINAL outcomes into errors.
"""

import logging
import uuid

from src.tb_common.datetime_utils import utc_now
from src.tb_common.enums import TransitionOutcome
from src.tb_common.errors import InvalidTransitionError, TransactionNotFoundError
from src.tb_common.hours import to_hours
from src.tb_ledger.application.registry import LedgerRegistry
from src.tb_ledger.application.schemas import (
    AddTransactionRequest,
    BalanceResponse,
    LedgerResponse,
    TransactionItem,
    TransactionMutationResponse,
)
from src.tb_ledger.domain.ledger import TransactionLedger
from src.tb_ledger.domain.models import ProviderSnapshot, ServiceSnapshot, Transaction

logger = logging.getLogger("tb.ledger")


class LedgerApplicationService:
    def __init__(self, registry: LedgerRegistry, strict: bool = False) -> None:
        self._registry = registry
        self._strict = strict

    async def get_ledger(self, user_id: str) -> LedgerResponse:
        ledger = await self._registry.get(user_id)
        return LedgerResponse.from_ledger(ledger)

    async def get_balance(self, user_id: str) -> BalanceResponse:
        ledger = await self._registry.get(user_id)
        return BalanceResponse.from_ledger(ledger)

    async def add_transaction(
        self, user_id: str, body: AddTransactionRequest
    ) -> TransactionMutationResponse:
        async with self._registry.checkout(user_id) as ledger:
            return await self._add(user_id, ledger, body)

    async def _add(
        self, user_id: str, ledger: TransactionLedger, body: AddTransactionRequest
    ) -> TransactionMutationResponse:
        tx = Transaction(
            id=body.id or f"tx_{uuid.uuid4().hex[:16]}",
            service=ServiceSnapshot(title=body.service.title, category=body.service.category),
            provider=ProviderSnapshot(name=body.provider.name, avatar_url=body.provider.avatar_url),
            hours=to_hours(body.hours),
            date=body.date or utc_now(),
            status=body.status,
            type=body.type,
        )
        ledger.add_transaction(tx)
        logger.info(
            "ledger add user=%s tx=%s hours=%s type=%s", user_id, tx.id, tx.hours, tx.type.value
        )
        return await self._mutation_result(user_id, ledger, tx.id, TransitionOutcome.APPLIED)

    async def complete_transaction(
        self, user_id: str, transaction_id: str
    ) -> TransactionMutationResponse:
        async with self._registry.checkout(user_id) as ledger:
            outcome = ledger.complete_transaction(transaction_id)
            return await self._after_transition(user_id, ledger, transaction_id, outcome)

    async def cancel_transaction(
        self, user_id: str, transaction_id: str
    ) -> TransactionMutationResponse:
        async with self._registry.checkout(user_id) as ledger:
            outcome = ledger.cancel_transaction(transaction_id)
            return await self._after_transition(user_id, ledger, transaction_id, outcome)

    async def _after_transition(
        self,
        user_id: str,
        ledger: TransactionLedger,
        transaction_id: str,
        outcome: TransitionOutcome,
    ) -> TransactionMutationResponse:
        logger.info("ledger transition user=%s tx=%s outcome=%s", user_id, transaction_id, outcome.value)
        if self._strict:
            if outcome == TransitionOutcome.NOT_FOUND:
                raise TransactionNotFoundError(transaction_id)
            if outcome == TransitionOutcome.ALREADY_TERMINAL:
                tx = ledger.get(transaction_id)
                raise InvalidTransitionError(transaction_id, tx.status.value if tx else "unknown")
        return await self._mutation_result(user_id, ledger, transaction_id, outcome)

    async def _mutation_result(
        self,
        user_id: str,
        ledger: TransactionLedger,
        transaction_id: str,
        outcome: TransitionOutcome,
    ) -> TransactionMutationResponse:
        # Nothing changed on a miss, so there is nothing to write
        persisted = True
        if outcome == TransitionOutcome.APPLIED:
            persisted = await self._registry.persist(user_id, ledger)
        tx = ledger.get(transaction_id)
        return TransactionMutationResponse(
            transaction=TransactionItem.from_domain(tx) if tx else None,
            outcome=outcome,
            balance=BalanceResponse.from_ledger(ledger),
            persisted=persisted,
        )
