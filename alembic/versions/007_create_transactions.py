"""007: create transactions table (append-only)

Revision ID: 007
Revises: 006
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            from_user_id        UUID            NOT NULL REFERENCES users(id),
            to_user_id          UUID            NOT NULL REFERENCES users(id),
            time_amount         NUMERIC(10,2)   NOT NULL,
            transaction_type    VARCHAR(30)     NOT NULL DEFAULT 'service_payment',
            description         TEXT,
            service_request_id  UUID            REFERENCES service_requests(id),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_amount_positive CHECK (time_amount > 0),
            CONSTRAINT ck_transactions_type CHECK (transaction_type IN ('service_payment')),
            CONSTRAINT uq_transactions_service_request UNIQUE (service_request_id)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_from ON transactions (from_user_id, created_at DESC);")
    op.execute("CREATE INDEX idx_transactions_to ON transactions (to_user_id, created_at DESC);")
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_transactions_append_only()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION 'transactions is append-only';
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER trg_transactions_append_only
            BEFORE UPDATE OR DELETE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_transactions_append_only();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_transactions_append_only();")
