"""SQLAlchemy table definitions for the ledger collections.

One table per keyed collection, with primary keys matching each entity's
identity, plus ``id_sequences`` for the monotonic counters. Counter names
are ``project``, ``batch``, ``retirement`` and ``verification:<project_id>``.
The numeric invariants that a single row can express are CHECK
constraints; cross-collection conservation is enforced by the services.

This schema and the alembic migration define the persistent layout only.
No repository reads or writes these tables yet: the services run on the
in-memory repositories in ``carbon_registry.repos`` whether or not
DATABASE_URL is set, and the engine is used for the readiness check.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from carbon_registry.db.engine import Base
from carbon_registry.models.batch import MIN_VINTAGE_YEAR


class ProjectRow(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("start_ts < end_ts", name="project_date_range"),
        CheckConstraint("available_credits >= 0", name="available_non_negative"),
        CheckConstraint("retired_credits >= 0", name="retired_non_negative"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    start_ts: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_ts: Mapped[int] = mapped_column(BigInteger, nullable=False)
    owner: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="pending"
    )  # pending|active|completed|suspended
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    total_credits: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    available_credits: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    retired_credits: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    verification_data: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    registry_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class VerificationRecordRow(Base):
    __tablename__ = "verification_records"
    __table_args__ = (
        CheckConstraint("credits_issued > 0", name="credits_issued_positive"),
        CheckConstraint("period_start <= period_end", name="verification_period"),
    )

    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), primary_key=True
    )
    sequence: Mapped[int] = mapped_column(Integer, primary_key=True)
    verifier: Mapped[str] = mapped_column(String(128), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    credits_issued: Mapped[int] = mapped_column(BigInteger, nullable=False)
    report_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    methodology: Mapped[str] = mapped_column(String(255), nullable=False)
    period_start: Mapped[int] = mapped_column(BigInteger, nullable=False)
    period_end: Mapped[int] = mapped_column(BigInteger, nullable=False)


class VerifierRow(Base):
    __tablename__ = "verifiers"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    credentials: Mapped[str] = mapped_column(Text, nullable=False)
    authorized_by: Mapped[str] = mapped_column(String(128), nullable=False)
    authorized_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="active"
    )  # active|inactive


class CreditBatchRow(Base):
    __tablename__ = "credit_batches"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="batch_quantity_positive"),
        CheckConstraint(
            "remaining >= 0 AND remaining <= quantity", name="batch_remaining_range"
        ),
        CheckConstraint("unit_price > 0", name="batch_price_positive"),
        CheckConstraint(
            f"vintage_year >= {MIN_VINTAGE_YEAR}", name="batch_vintage_floor"
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False, index=True
    )
    vintage_year: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(BigInteger, nullable=False)
    remaining: Mapped[int] = mapped_column(BigInteger, nullable=False)
    unit_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="available"
    )  # available|sold|retired


class CreditHoldingRow(Base):
    __tablename__ = "credit_holdings"
    __table_args__ = (CheckConstraint("balance >= 0", name="balance_non_negative"),)

    holder: Mapped[str] = mapped_column(String(128), primary_key=True)
    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), primary_key=True
    )
    vintage_year: Mapped[int] = mapped_column(Integer, primary_key=True)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class RetirementRow(Base):
    __tablename__ = "retirements"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="retirement_quantity_positive"),
        CheckConstraint(
            "beneficiary IS NULL OR beneficiary <> account",
            name="retirement_beneficiary_not_self",
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    account: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False
    )
    vintage_year: Mapped[int] = mapped_column(Integer, nullable=False)
    batch_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    quantity: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    beneficiary: Mapped[str | None] = mapped_column(String(128), nullable=True)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    certificate_url: Mapped[str | None] = mapped_column(Text, nullable=True)


class IdSequenceRow(Base):
    __tablename__ = "id_sequences"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    next_value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
