"""004: create service_categories table and seed it

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE service_categories (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            name            VARCHAR(60)     NOT NULL,
            description     TEXT,
            icon            VARCHAR(40),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_service_categories_name UNIQUE (name)
        );
    """)
    op.execute("""
        INSERT INTO service_categories (name, description, icon) VALUES
            ('Limpeza',     'Limpeza residencial e faxina',        'sparkles'),
            ('Culinária',   'Aulas e preparo de refeições',        'chef-hat'),
            ('Tecnologia',  'Suporte técnico e aulas de informática', 'laptop'),
            ('Jardim',      'Jardinagem e cuidado de plantas',     'flower'),
            ('Música',      'Aulas de instrumentos e canto',       'music'),
            ('Reforma',     'Pequenos reparos e manutenção',       'hammer'),
            ('Transporte',  'Caronas e pequenas entregas',         'car'),
            ('Organização', 'Organização de espaços e mudanças',   'package');
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS service_categories CASCADE;")
