"""Demo transactions a fresh ledger starts with when LEDGER_SEED_DEMO is on."""

from datetime import datetime, timezone
from decimal import Decimal

from src.tb_common.enums import TransactionStatus, TransactionType
from src.tb_ledger.domain.models import ProviderSnapshot, ServiceSnapshot, Transaction


def demo_transactions() -> list[Transaction]:
    return [
        Transaction(
            id="t1",
            service=ServiceSnapshot(title="Aula de violão", category="Música"),
            provider=ProviderSnapshot(name="Carlos Lima", avatar_url="/avatars/carlos.jpg"),
            hours=Decimal("1.50"),
            date=datetime(2023, 8, 10, tzinfo=timezone.utc),
            status=TransactionStatus.COMPLETED,
            type=TransactionType.SPENT,
        ),
        Transaction(
            id="t2",
            service=ServiceSnapshot(title="Reparo de computador", category="Tecnologia"),
            provider=ProviderSnapshot(name="Ana Costa", avatar_url="/avatars/ana.jpg"),
            hours=Decimal("2.00"),
            date=datetime(2023, 8, 12, tzinfo=timezone.utc),
            status=TransactionStatus.PENDING,
            type=TransactionType.EARNED,
        ),
        Transaction(
            id="t3",
            service=ServiceSnapshot(title="Limpeza de casa", category="Limpeza"),
            provider=ProviderSnapshot(name="Maria Silva", avatar_url="/avatars/maria.jpg"),
            hours=Decimal("3.00"),
            date=datetime(2023, 8, 8, tzinfo=timezone.utc),
            status=TransactionStatus.COMPLETED,
            type=TransactionType.SPENT,
        ),
        Transaction(
            id="t4",
            service=ServiceSnapshot(title="Aula de português", category="Educação"),
            provider=ProviderSnapshot(name="João Santos", avatar_url="/avatars/joao.jpg"),
            hours=Decimal("2.00"),
            date=datetime(2023, 8, 14, tzinfo=timezone.utc),
            status=TransactionStatus.PENDING,
            type=TransactionType.EARNED,
        ),
    ]
