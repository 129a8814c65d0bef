"""003: create profiles table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE profiles (
            id                  UUID            PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            name                VARCHAR(120)    NOT NULL,
            avatar_url          VARCHAR(500),
            time_balance        NUMERIC(10,2)   NOT NULL DEFAULT 15,
            experience_hours    NUMERIC(10,2)   NOT NULL DEFAULT 0,
            zone                VARCHAR(60),
            cpf                 VARCHAR(11),
            phone               VARCHAR(20),
            user_role           VARCHAR(20)     NOT NULL DEFAULT 'standard',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_profiles_time_balance_non_negative CHECK (time_balance >= 0),
            CONSTRAINT ck_profiles_experience_non_negative CHECK (experience_hours >= 0),
            CONSTRAINT ck_profiles_user_role CHECK (
                user_role IN ('standard', 'organization', 'admin')
            ),
            CONSTRAINT ck_profiles_cpf_digits CHECK (cpf IS NULL OR cpf ~ '^[0-9]{11}$')
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_profiles_updated_at
            BEFORE UPDATE ON profiles
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON COLUMN profiles.time_balance IS "
        "'Server-authoritative hours; moved only by request completion';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS profiles CASCADE;")
