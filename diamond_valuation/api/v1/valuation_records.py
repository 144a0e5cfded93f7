#diamond_valuation/api/v1/valuation_records.py
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from diamond_valuation.db.session import get_db
from diamond_valuation.core.auth_deps import get_current_principal
from diamond_valuation.models.enums import RecordStatus
from diamond_valuation.policies.rbac import Principal, require_action, ACTION_LIST_RECORDS
from diamond_valuation.policies.records_policy import can_read_record, can_read_user_records, is_staff

from diamond_valuation.schemas.valuation_records import (
    AuditEventResponse,
    TrackedValuationRecordResponse,
    ValuationRecordCreateRequest,
    ValuationRecordDetailResponse,
    ValuationRecordResponse,
    ValuationRecordUpdateRequest,
)
from diamond_valuation.services.aggregation_service import RecordAggregationService, RelatedLookupError
from diamond_valuation.services.audit_service import AuditAction, audit_event, list_record_events
from diamond_valuation.services.lifecycle_service import TransitionError, ValuationLifecycleService
from diamond_valuation.services.record_payloads import record_payload

router = APIRouter()


def _parse_uuid(raw: str, name: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except Exception:
        raise HTTPException(status_code=400, detail=f"{name} must be UUID.")


def _raise_http(e: Exception):
    if isinstance(e, PermissionError):
        raise HTTPException(status_code=403, detail=str(e))
    if isinstance(e, RelatedLookupError):
        raise HTTPException(status_code=502, detail="Failed to fetch valuation record data.")
    if isinstance(e, LookupError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, TransitionError):
        raise HTTPException(status_code=409, detail=str(e))
    if isinstance(e, ValueError):
        raise HTTPException(status_code=400, detail=str(e))
    raise e


def _load_readable(db: Session, record_id: uuid.UUID, principal: Principal):
    try:
        record = ValuationLifecycleService().get(db, record_id)
    except LookupError as e:
        _raise_http(e)
    if not can_read_record(principal, record):
        raise HTTPException(status_code=403, detail="Not permitted to read this valuation record.")
    return record


# ─────────────────────────────────────────────
# COLLECTIONS
# ─────────────────────────────────────────────

@router.get("/valuation-records", response_model=List[ValuationRecordResponse])
async def list_records(
    status: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=2000),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        require_action(principal, ACTION_LIST_RECORDS)
        rows = ValuationLifecycleService().list_by_status(db, status=status, limit=limit)
    except (PermissionError, ValueError) as e:
        _raise_http(e)
    return [record_payload(r) for r in rows]


@router.get("/valuation-records-in-progress", response_model=List[ValuationRecordResponse])
async def list_records_in_progress(
    limit: Optional[int] = Query(default=None, ge=1, le=2000),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        require_action(principal, ACTION_LIST_RECORDS)
    except PermissionError as e:
        _raise_http(e)
    return [record_payload(r) for r in ValuationLifecycleService().list_in_progress(db, limit=limit)]


@router.get("/valuation-records-completed", response_model=List[ValuationRecordResponse])
async def list_records_completed(
    limit: Optional[int] = Query(default=None, ge=1, le=2000),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        require_action(principal, ACTION_LIST_RECORDS)
    except PermissionError as e:
        _raise_http(e)
    return [record_payload(r) for r in ValuationLifecycleService().list_completed(db, limit=limit)]


@router.get("/valuation-records/user/{userId}", response_model=List[TrackedValuationRecordResponse])
async def list_records_for_user(
    userId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    uid = _parse_uuid(userId, "userId")
    if not can_read_user_records(principal, str(uid)):
        raise HTTPException(status_code=403, detail="Not permitted to list this user's records.")

    rows = ValuationLifecycleService().list_for_user(db, user_id=uid)
    try:
        return RecordAggregationService().with_service_names(db, rows)
    except RelatedLookupError as e:
        _raise_http(e)


# ─────────────────────────────────────────────
# CREATE
# ─────────────────────────────────────────────

@router.post("/valuation-records/{receiptId}", response_model=ValuationRecordResponse, status_code=201)
async def create_record(
    request: Request,
    receiptId: str,
    body: Optional[ValuationRecordCreateRequest] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rid = _parse_uuid(receiptId, "receiptId")
    appraiser_id = None
    if body is not None and body.appraiserId:
        appraiser_id = _parse_uuid(body.appraiserId, "appraiserId")

    try:
        record = ValuationLifecycleService().create_from_receipt(
            db, receipt_id=rid, actor=principal, appraiser_id=appraiser_id
        )
    except (PermissionError, LookupError, ValueError) as e:
        _raise_http(e)

    audit_event(
        db,
        request=request,
        actor=principal,
        record_id=record.id,
        action=AuditAction.RECORD_CREATED,
        payload_summary={
            "recordNumber": record.record_number,
            "receiptId": str(rid),
            "status": record.status,
        },
        ref_id=str(rid),
    )
    return record_payload(record)


# ─────────────────────────────────────────────
# SINGLE RECORD
# ─────────────────────────────────────────────

@router.get("/valuation-records/{recordId}", response_model=ValuationRecordResponse)
async def get_record(
    recordId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    record = _load_readable(db, _parse_uuid(recordId, "recordId"), principal)
    return record_payload(record)


@router.get("/valuation-records/{recordId}/detail", response_model=ValuationRecordDetailResponse)
async def get_record_detail(
    recordId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    record = _load_readable(db, _parse_uuid(recordId, "recordId"), principal)
    try:
        return RecordAggregationService().compose(db, record)
    except RelatedLookupError as e:
        _raise_http(e)


@router.put("/valuation-records/{recordId}", response_model=ValuationRecordResponse)
async def update_record(
    request: Request,
    recordId: str,
    body: ValuationRecordUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    record_id = _parse_uuid(recordId, "recordId")
    changes = body.to_changes()
    if changes.get("appraiser_id") is not None:
        changes["appraiser_id"] = _parse_uuid(changes["appraiser_id"], "appraiserId")

    svc = ValuationLifecycleService()
    try:
        before = svc.get(db, record_id).status
        record = svc.update(db, record_id=record_id, changes=changes, actor=principal)
    except (PermissionError, LookupError, ValueError) as e:
        db.rollback()
        _raise_http(e)

    sealed = before != record.status and record.status == RecordStatus.sealed.value
    audit_event(
        db,
        request=request,
        actor=principal,
        record_id=record.id,
        action=AuditAction.RECORD_SEALED if sealed else AuditAction.RECORD_UPDATED,
        payload_summary={
            "fields": sorted(body.model_dump(exclude_unset=True).keys()),
            "status": record.status,
        },
    )
    return record_payload(record)


@router.put("/valuation-records/{recordId}/complete", response_model=ValuationRecordResponse)
async def complete_record(
    request: Request,
    recordId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    record_id = _parse_uuid(recordId, "recordId")
    try:
        record = ValuationLifecycleService().complete(db, record_id=record_id, actor=principal)
    except (PermissionError, LookupError, ValueError) as e:
        _raise_http(e)

    audit_event(
        db,
        request=request,
        actor=principal,
        record_id=record.id,
        action=AuditAction.RECORD_COMPLETED,
        payload_summary={
            "recordNumber": record.record_number,
            "status": record.status,
            "validatedAt": record.validated_at.isoformat(),
        },
    )
    return record_payload(record)


@router.post("/valuation-records/{recordId}/commitment-request", response_model=ValuationRecordResponse)
async def request_commitment(
    request: Request,
    recordId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    record_id = _parse_uuid(recordId, "recordId")
    svc = ValuationLifecycleService()
    try:
        already = svc.get(db, record_id).commitment_requested
        record = svc.request_commitment(db, record_id=record_id, actor=principal)
    except (PermissionError, LookupError) as e:
        _raise_http(e)

    if not already:
        audit_event(
            db,
            request=request,
            actor=principal,
            record_id=record.id,
            action=AuditAction.COMMITMENT_REQUESTED,
            payload_summary={"recordNumber": record.record_number},
        )
    return record_payload(record)


@router.get("/valuation-records/{recordId}/audit", response_model=List[AuditEventResponse])
async def get_record_audit(
    recordId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if not is_staff(principal):
        raise HTTPException(status_code=403, detail="Audit trail is visible to staff only.")
    record = _load_readable(db, _parse_uuid(recordId, "recordId"), principal)
    return [
        {
            "id": str(ev.id),
            "createdAtIso": ev.created_at.isoformat(),
            "requestId": ev.request_id,
            "action": ev.action,
            "actorUserId": ev.actor_user_id,
            "actorRole": ev.actor_role,
            "payloadHash": ev.payload_hash,
            "payloadSummary": ev.payload_summary_json or {},
        }
        for ev in list_record_events(db, record_id=record.id)
    ]
