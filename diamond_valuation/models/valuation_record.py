#diamond_valuation/models/valuation_record.py
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, Boolean, ForeignKey, UniqueConstraint, Index, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from diamond_valuation.db.base import Base, utcnow
from diamond_valuation.models.enums import RecordStatus


# Filled by the appraiser; hidden from readers until an appraiser is assigned.
DIAMOND_ATTRIBUTES = (
    "shape_and_cut",
    "carat_weight",
    "clarity",
    "cut_grade",
    "measurements",
    "polish",
    "symmetry",
    "fluorescence",
    "estimated_value",
    "valuation_method",
    "certificate_number",
)


class ValuationRecord(Base):
    """
    One customer's diamond valuation request.

    Lifecycle:
      - created from a receipt as in-progress
      - appraiser fills diamond attributes
      - consultant seals (optional) and verifies => completed, validated_at stamped once
      - never hard-deleted
    """
    __tablename__ = "valuation_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    record_number: Mapped[str] = mapped_column(String(32), nullable=False)

    # parties
    customer_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(256), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)

    consultant_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    appraiser_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    receipt_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("receipts.id"), nullable=False)
    service_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=False)

    # appointment
    appointment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    appointment_time: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    # diamond attributes
    shape_and_cut: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    carat_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 3), nullable=True)
    clarity: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    cut_grade: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    measurements: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    polish: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    symmetry: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    fluorescence: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    estimated_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(16, 2), nullable=True)
    valuation_method: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    certificate_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # status
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=RecordStatus.in_progress.value)
    commitment_requested: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    validated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("record_number", name="uq_valuation_record_number"),
        UniqueConstraint("sequence", name="uq_valuation_record_sequence"),
        Index("ix_valuation_records_status", "status"),
        Index("ix_valuation_records_customer", "customer_id"),
        Index("ix_valuation_records_receipt", "receipt_id"),
    )
