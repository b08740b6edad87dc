import datetime as dt
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Integer, BigInteger, DateTime, Text, UniqueConstraint, Index


class Base(DeclarativeBase):
    pass


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class BlockRoot(Base):
    __tablename__ = "block_roots"
    block_number: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    root_hex: Mapped[str] = mapped_column(String(66))
    leaf_count: Mapped[int] = mapped_column(Integer)
    hash_alg: Mapped[str] = mapped_column(String(16), default="keccak256")
    published_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_now)


class BlockTransaction(Base):
    __tablename__ = "block_transactions"
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    block_number: Mapped[int] = mapped_column(BigInteger, index=True)
    idx: Mapped[int] = mapped_column(Integer)
    tx_hash: Mapped[str] = mapped_column(String(66))
    # leaf digest as committed, kept so a stored tree can be audited without rehashing
    leaf_hex: Mapped[str] = mapped_column(String(66))

    __table_args__ = (
        UniqueConstraint("block_number", "idx", name="uq_block_tx_idx"),
        Index("ix_block_tx_hash", "block_number", "tx_hash"),
    )


class AuditLog(Base):
    __tablename__ = "audit_log"
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    ts: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_now)
    actor: Mapped[str] = mapped_column(String(120))
    action: Mapped[str] = mapped_column(String(80))
    block_number: Mapped[int | None] = mapped_column(BigInteger, default=None)
    meta_json: Mapped[str] = mapped_column(Text)
    ip: Mapped[str | None] = mapped_column(String(64), default=None)
    ua: Mapped[str | None] = mapped_column(String(200), default=None)
