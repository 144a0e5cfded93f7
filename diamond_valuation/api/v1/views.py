#diamond_valuation/api/v1/views.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from diamond_valuation.db.session import get_db
from diamond_valuation.core.auth_deps import get_current_principal, get_optional_principal
from diamond_valuation.policies.rbac import Principal
from diamond_valuation.policies.records_policy import is_staff
from diamond_valuation.schemas.views import RecordDetailView, RecordTrackingView
from diamond_valuation.services.audit_service import AuditAction, audit_event
from diamond_valuation.services.record_views_service import RecordViewsService

router = APIRouter(prefix="/views")


def _record_uuid(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except Exception:
        raise HTTPException(status_code=400, detail="recordId must be UUID.")


@router.get("/consultant/records/{recordId}", response_model=RecordDetailView)
async def consultant_record_detail(
    recordId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if not is_staff(principal):
        raise HTTPException(status_code=403, detail="Record detail view is for staff only.")
    return RecordViewsService().consultant_detail(db, record_id=_record_uuid(recordId))


@router.post("/consultant/records/{recordId}/verify", response_model=RecordDetailView)
async def consultant_verify_record(
    request: Request,
    recordId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if not is_staff(principal):
        raise HTTPException(status_code=403, detail="Record detail view is for staff only.")
    record_id = _record_uuid(recordId)

    view = RecordViewsService().verify(db, record_id=record_id, actor=principal)

    if view["notification"] and view["notification"]["level"] == "success":
        audit_event(
            db,
            request=request,
            actor=principal,
            record_id=record_id,
            action=AuditAction.RECORD_COMPLETED,
            payload_summary={"status": "completed", "via": "detail_view"},
        )
    return view


@router.get("/customer/record-tracking", response_model=RecordTrackingView)
async def customer_record_tracking(
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_optional_principal),
):
    return RecordViewsService().customer_tracking(db, principal=principal)
