#diamond_valuation/services/record_store.py
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from diamond_valuation.core.config import get_settings
from diamond_valuation.models.valuation_record import ValuationRecord


class ValuationRecordStore:
    """Persistence for valuation records. No workflow rules live here."""

    def _fetch(self, db: Session, q, limit: Optional[int]) -> List[ValuationRecord]:
        # unbounded unless the caller pages explicitly
        q = q.order_by(ValuationRecord.sequence)
        if limit is not None:
            q = q.limit(limit)
        return list(db.execute(q).scalars().all())

    def get(self, db: Session, record_id: uuid.UUID) -> Optional[ValuationRecord]:
        return db.execute(
            select(ValuationRecord).where(ValuationRecord.id == record_id)
        ).scalar_one_or_none()

    def list(
        self,
        db: Session,
        *,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ValuationRecord]:
        q = select(ValuationRecord)
        if status is not None:
            q = q.where(ValuationRecord.status == status)
        return self._fetch(db, q, limit)

    def list_for_customer(
        self,
        db: Session,
        *,
        customer_id: uuid.UUID,
        limit: Optional[int] = None,
    ) -> List[ValuationRecord]:
        q = select(ValuationRecord).where(ValuationRecord.customer_id == customer_id)
        return self._fetch(db, q, limit)

    def next_sequence(self, db: Session) -> int:
        mx = db.execute(select(func.max(ValuationRecord.sequence))).scalar_one_or_none()
        return int(mx or 0) + 1

    def format_record_number(self, sequence: int) -> str:
        return f"{get_settings().record_number_prefix}-{sequence:06d}"

    def add(self, db: Session, record: ValuationRecord) -> ValuationRecord:
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    def save(self, db: Session, record: ValuationRecord) -> ValuationRecord:
        db.commit()
        db.refresh(record)
        return record
