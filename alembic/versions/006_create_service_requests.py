"""006: create service_requests table

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE service_requests (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            service_id          UUID            NOT NULL REFERENCES services(id),
            requester_id        UUID            NOT NULL REFERENCES users(id),
            provider_id         UUID            NOT NULL REFERENCES users(id),
            description         TEXT,
            requested_hours     NUMERIC(10,2)   NOT NULL,
            total_time_cost     NUMERIC(10,2)   NOT NULL,
            scheduled_date      TIMESTAMPTZ,
            status              VARCHAR(20)     NOT NULL DEFAULT 'pending',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_service_requests_status CHECK (
                status IN ('pending', 'accepted', 'completed', 'rejected', 'cancelled')
            ),
            CONSTRAINT ck_service_requests_hours_positive CHECK (requested_hours > 0),
            CONSTRAINT ck_service_requests_cost_positive CHECK (total_time_cost > 0),
            CONSTRAINT ck_service_requests_not_self CHECK (requester_id <> provider_id)
        );
    """)
    op.execute(
        "CREATE INDEX idx_service_requests_provider ON service_requests "
        "(provider_id, created_at DESC);"
    )
    op.execute(
        "CREATE INDEX idx_service_requests_requester ON service_requests "
        "(requester_id, created_at DESC);"
    )
    op.execute("""
        CREATE TRIGGER trg_service_requests_updated_at
            BEFORE UPDATE ON service_requests
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS service_requests CASCADE;")
