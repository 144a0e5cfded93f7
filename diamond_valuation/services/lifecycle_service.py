# diamond_valuation/services/lifecycle_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from diamond_valuation.db.base import utcnow
from diamond_valuation.models.enums import RecordStatus, UserRole
from diamond_valuation.models.valuation_record import DIAMOND_ATTRIBUTES, ValuationRecord
from diamond_valuation.policies.rbac import (
    Principal,
    require_action,
    ACTION_CREATE_RECORD,
    ACTION_EDIT_INTAKE,
    ACTION_ASSIGN_APPRAISER,
    ACTION_FILL_ATTRIBUTES,
    ACTION_SEAL_RECORD,
    ACTION_COMPLETE_RECORD,
    ACTION_REQUEST_COMMITMENT,
)
from diamond_valuation.policies.records_policy import can_fill_attributes, can_request_commitment
from diamond_valuation.services.directory_service import DirectoryService
from diamond_valuation.services.record_store import ValuationRecordStore

logger = logging.getLogger(__name__)

INTAKE_FIELDS = (
    "customer_name",
    "phone_number",
    "email",
    "appointment_date",
    "appointment_time",
)

# NOT NULL columns among the intake fields
REQUIRED_INTAKE_FIELDS = ("customer_name",)

UPDATABLE_FIELDS = frozenset(INTAKE_FIELDS + DIAMOND_ATTRIBUTES + ("appraiser_id", "status"))


class TransitionError(ValueError):
    """The record's current state does not allow the requested change."""


def parse_status(raw: str) -> RecordStatus:
    """
    Accept flexible status spellings ("in-progress", "in_progress", "In Progress")
    and return the canonical RecordStatus. Raises ValueError on unknown values.
    """
    if not raw:
        raise ValueError("Missing status value.")
    norm = raw.strip().lower().replace("_", "-").replace(" ", "-")
    try:
        return RecordStatus(norm)
    except ValueError:
        raise ValueError(f"Invalid status value: {raw}.")


class ValuationLifecycleService:
    """
    Guarded mutations over valuation records.

    Rules:
    - records are created from an existing receipt as in-progress
    - diamond attributes need an assigned appraiser; only that appraiser (or a manager) fills them
    - an assigned appraiser is never cleared
    - sealing needs an in-progress record with every diamond attribute filled
    - completion is a single edge (any non-completed -> completed), validated_at stamped once
    - completed records are read-only
    - commitment_requested only moves false -> true, through request_commitment alone
    """

    def __init__(
        self,
        store: Optional[ValuationRecordStore] = None,
        directory: Optional[DirectoryService] = None,
    ):
        self.store = store or ValuationRecordStore()
        self.directory = directory or DirectoryService()

    # ─────────────────────────────────────────────
    # READS
    # ─────────────────────────────────────────────

    def get(self, db: Session, record_id: uuid.UUID) -> ValuationRecord:
        record = self.store.get(db, record_id)
        if not record:
            raise LookupError("Valuation record not found.")
        return record

    def list_by_status(
        self, db: Session, *, status: Optional[str] = None, limit: Optional[int] = None
    ) -> List[ValuationRecord]:
        canonical = parse_status(status).value if status is not None else None
        return self.store.list(db, status=canonical, limit=limit)

    def list_in_progress(self, db: Session, *, limit: Optional[int] = None) -> List[ValuationRecord]:
        return self.store.list(db, status=RecordStatus.in_progress.value, limit=limit)

    def list_completed(self, db: Session, *, limit: Optional[int] = None) -> List[ValuationRecord]:
        return self.store.list(db, status=RecordStatus.completed.value, limit=limit)

    def list_for_user(self, db: Session, *, user_id: uuid.UUID, limit: Optional[int] = None) -> List[ValuationRecord]:
        return self.store.list_for_customer(db, customer_id=user_id, limit=limit)

    # ─────────────────────────────────────────────
    # CREATE
    # ─────────────────────────────────────────────

    def _require_appraiser(self, db: Session, appraiser_id: uuid.UUID) -> None:
        user = self.directory.get_user(db, appraiser_id)
        if not user or user.role != UserRole.APPRAISER.value:
            raise ValueError("appraiserId must reference an appraiser.")

    def create_from_receipt(
        self,
        db: Session,
        *,
        receipt_id: uuid.UUID,
        actor: Principal,
        appraiser_id: Optional[uuid.UUID] = None,
    ) -> ValuationRecord:
        require_action(actor, ACTION_CREATE_RECORD)
        receipt = self.directory.require_receipt(db, receipt_id)

        if appraiser_id is not None:
            self._require_appraiser(db, appraiser_id)

        sequence = self.store.next_sequence(db)
        now = utcnow()
        record = ValuationRecord(
            sequence=sequence,
            record_number=self.store.format_record_number(sequence),
            customer_id=receipt.customer_id,
            customer_name=receipt.customer_name,
            phone_number=receipt.phone_number,
            email=receipt.email,
            consultant_id=receipt.consultant_id,
            appraiser_id=appraiser_id,
            receipt_id=receipt.id,
            service_id=receipt.service_id,
            appointment_date=receipt.appointment_date,
            appointment_time=receipt.appointment_time,
            status=RecordStatus.in_progress.value,
            commitment_requested=False,
            created_at=now,
            updated_at=now,
            validated_at=None,
        )
        record = self.store.add(db, record)
        logger.info(
            "valuation record created",
            extra={"record_id": str(record.id), "record_number": record.record_number, "receipt_id": str(receipt_id)},
        )
        return record

    # ─────────────────────────────────────────────
    # UPDATE (fields, appraiser assignment, sealing)
    # ─────────────────────────────────────────────

    def update(
        self,
        db: Session,
        *,
        record_id: uuid.UUID,
        changes: Dict[str, Any],
        actor: Principal,
    ) -> ValuationRecord:
        """
        Partial update. `changes` holds only the fields the caller sent (model column names).
        Every rule is checked before the record is touched.
        """
        record = self.get(db, record_id)

        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(unknown)}.")

        if record.status == RecordStatus.completed.value:
            raise TransitionError("Record is completed and read-only.")

        intake = {k: v for k, v in changes.items() if k in INTAKE_FIELDS}
        attributes = {k: v for k, v in changes.items() if k in DIAMOND_ATTRIBUTES}

        if intake:
            require_action(actor, ACTION_EDIT_INTAKE)
            blank = [name for name in REQUIRED_INTAKE_FIELDS if name in intake and intake[name] is None]
            if blank:
                raise ValueError(f"Fields cannot be null: {', '.join(blank)}.")

        appraiser_id = record.appraiser_id
        if "appraiser_id" in changes:
            require_action(actor, ACTION_ASSIGN_APPRAISER)
            if changes["appraiser_id"] is None:
                if record.appraiser_id is not None:
                    raise TransitionError("Assigned appraiser cannot be cleared.")
            else:
                self._require_appraiser(db, changes["appraiser_id"])
                appraiser_id = changes["appraiser_id"]

        if attributes:
            require_action(actor, ACTION_FILL_ATTRIBUTES)
            if appraiser_id is None:
                raise TransitionError("Diamond attributes require an assigned appraiser.")
            if not can_fill_attributes(actor, appraiser_id):
                raise PermissionError("Only the assigned appraiser may fill diamond attributes.")

        status = RecordStatus(record.status)
        if changes.get("status") is not None:
            merged = {name: getattr(record, name) for name in DIAMOND_ATTRIBUTES}
            merged.update(attributes)
            status = self._next_status(status, parse_status(changes["status"]), actor, appraiser_id, merged)

        if not (intake or attributes or "appraiser_id" in changes or changes.get("status") is not None):
            raise ValueError("No updatable fields supplied.")

        for name, value in {**intake, **attributes}.items():
            setattr(record, name, value)
        record.appraiser_id = appraiser_id
        record.status = status.value
        record.updated_at = utcnow()

        record = self.store.save(db, record)
        logger.info(
            "valuation record updated",
            extra={"record_id": str(record.id), "fields": sorted(changes.keys()), "status": record.status},
        )
        return record

    def _next_status(
        self,
        current: RecordStatus,
        target: RecordStatus,
        actor: Principal,
        appraiser_id: Optional[uuid.UUID],
        attributes: Dict[str, Any],
    ) -> RecordStatus:
        if target == current:
            return current
        if target == RecordStatus.completed:
            raise TransitionError("Use the complete operation to mark a record completed.")
        if target == RecordStatus.in_progress:
            raise TransitionError(f"Cannot move a {current.value} record back to in-progress.")

        # target == sealed
        require_action(actor, ACTION_SEAL_RECORD)
        if current != RecordStatus.in_progress:
            raise TransitionError(f"Only in-progress records can be sealed (record is {current.value}).")
        if appraiser_id is None:
            raise TransitionError("Cannot seal a record without an assigned appraiser.")
        missing = [name for name in DIAMOND_ATTRIBUTES if attributes.get(name) in (None, "")]
        if missing:
            raise TransitionError(f"Cannot seal: diamond attributes not filled: {', '.join(missing)}.")
        return RecordStatus.sealed

    # ─────────────────────────────────────────────
    # COMPLETE
    # ─────────────────────────────────────────────

    def complete(self, db: Session, *, record_id: uuid.UUID, actor: Principal) -> ValuationRecord:
        require_action(actor, ACTION_COMPLETE_RECORD)
        record = self.get(db, record_id)

        if record.status == RecordStatus.completed.value:
            raise TransitionError("Record is already completed.")

        record.status = RecordStatus.completed.value
        record.validated_at = utcnow()
        record = self.store.save(db, record)
        logger.info(
            "valuation record completed",
            extra={"record_id": str(record.id), "record_number": record.record_number},
        )
        return record

    # ─────────────────────────────────────────────
    # COMMITMENT
    # ─────────────────────────────────────────────

    def request_commitment(self, db: Session, *, record_id: uuid.UUID, actor: Principal) -> ValuationRecord:
        require_action(actor, ACTION_REQUEST_COMMITMENT)
        record = self.get(db, record_id)
        if not can_request_commitment(actor, record):
            raise PermissionError("Only the record's customer may request a commitment.")

        if record.commitment_requested:
            return record

        record.commitment_requested = True
        record = self.store.save(db, record)
        logger.info("commitment requested", extra={"record_id": str(record.id)})
        return record
