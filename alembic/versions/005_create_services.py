"""005: create services table

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE services (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            provider_id     UUID            NOT NULL REFERENCES users(id),
            category_id     UUID            REFERENCES service_categories(id),
            title           VARCHAR(200)    NOT NULL,
            description     TEXT            NOT NULL,
            time_rate       NUMERIC(10,2)   NOT NULL DEFAULT 1,
            tags            TEXT[],
            availability    VARCHAR(200),
            location        VARCHAR(200),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_services_time_rate_positive CHECK (time_rate > 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_services_active_created ON services (created_at DESC) "
        "WHERE is_active;"
    )
    op.execute("CREATE INDEX idx_services_provider ON services (provider_id);")
    op.execute("""
        CREATE TRIGGER trg_services_updated_at
            BEFORE UPDATE ON services
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS services CASCADE;")
