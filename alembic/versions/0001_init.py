"""init

Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "block_roots",
        sa.Column("block_number", sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column("root_hex", sa.String(length=66), nullable=False),
        sa.Column("leaf_count", sa.Integer(), nullable=False),
        sa.Column("hash_alg", sa.String(length=16), nullable=False, server_default="keccak256"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_table(
        "block_transactions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("block_number", sa.BigInteger(), nullable=False, index=True),
        sa.Column("idx", sa.Integer(), nullable=False),
        sa.Column("tx_hash", sa.String(length=66), nullable=False),
        sa.Column("leaf_hex", sa.String(length=66), nullable=False),
        sa.UniqueConstraint("block_number", "idx", name="uq_block_tx_idx"),
    )
    op.create_index("ix_block_tx_hash", "block_transactions", ["block_number", "tx_hash"])
    op.create_table(
        "audit_log",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("ts", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("actor", sa.String(length=120), nullable=False),
        sa.Column("action", sa.String(length=80), nullable=False),
        sa.Column("block_number", sa.BigInteger(), nullable=True),
        sa.Column("meta_json", sa.Text(), nullable=False),
        sa.Column("ip", sa.String(length=64), nullable=True),
        sa.Column("ua", sa.String(length=200), nullable=True),
    )

def downgrade():
    op.drop_table("audit_log")
    op.drop_index("ix_block_tx_hash", table_name="block_transactions")
    op.drop_table("block_transactions")
    op.drop_table("block_roots")
