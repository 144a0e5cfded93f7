#diamond_valuation/api/v1/directory.py
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from diamond_valuation.db.session import get_db
from diamond_valuation.core.auth_deps import get_current_principal
from diamond_valuation.policies.rbac import Principal
from diamond_valuation.schemas.directory import ReceiptResponse, ServiceResponse, UserResponse
from diamond_valuation.services.directory_service import DirectoryService

router = APIRouter()


def _iso(dt):
    return dt.isoformat() if dt else None


def _uuid_or_400(raw: str, name: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except Exception:
        raise HTTPException(status_code=400, detail=f"{name} must be UUID.")


@router.get("/services/{serviceId}", response_model=ServiceResponse)
async def get_service(
    serviceId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        svc = DirectoryService().require_service(db, _uuid_or_400(serviceId, "serviceId"))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "id": str(svc.id),
        "name": svc.name,
        "description": svc.description,
        "price": str(svc.price) if svc.price is not None else None,
    }


@router.get("/users/{userId}", response_model=UserResponse)
async def get_user(
    userId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        user = DirectoryService().require_user(db, _uuid_or_400(userId, "userId"))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "phoneNumber": user.phone_number,
        "role": user.role,
    }


@router.get("/receipts/{receiptId}", response_model=ReceiptResponse)
async def get_receipt(
    receiptId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        receipt = DirectoryService().require_receipt(db, _uuid_or_400(receiptId, "receiptId"))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "id": str(receipt.id),
        "receiptNumber": receipt.receipt_number,
        "customerId": str(receipt.customer_id),
        "customerName": receipt.customer_name,
        "consultantId": str(receipt.consultant_id),
        "serviceId": str(receipt.service_id),
        "appointmentDate": _iso(receipt.appointment_date),
        "appointmentTime": receipt.appointment_time,
        "issueDate": _iso(receipt.issue_date),
    }
