from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import String, DateTime, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from diamond_valuation.db.base import Base, utcnow


class AuditLogRecord(Base):
    """
    Audit trail of valuation record mutations.
    - Append-only (never UPDATE)
    - Stores request-id, actor, record, action, payload hash, and payload summary.
    """
    __tablename__ = "audit_log_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Correlation
    request_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    route: Mapped[str] = mapped_column(String(256), nullable=False)
    method: Mapped[str] = mapped_column(String(16), nullable=False)

    # Actor
    actor_user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    actor_role: Mapped[str] = mapped_column(String(32), nullable=False)

    # Subject
    record_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)

    # What happened
    action: Mapped[str] = mapped_column(String(64), nullable=False)  # e.g., RECORD_COMPLETED
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="ok")

    payload_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    payload_summary_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    ref_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    __table_args__ = (
        Index("ix_audit_record", "record_id"),
        Index("ix_audit_action", "action"),
        Index("ix_audit_created", "created_at"),
    )
