#diamond_valuation/services/record_payloads.py
from __future__ import annotations

from typing import Any, Dict, Optional

from diamond_valuation.models.valuation_record import DIAMOND_ATTRIBUTES, ValuationRecord

# column name -> API field name
ATTRIBUTE_FIELDS = {
    "shape_and_cut": "shapeAndCut",
    "carat_weight": "caratWeight",
    "clarity": "clarity",
    "cut_grade": "cutGrade",
    "measurements": "measurements",
    "polish": "polish",
    "symmetry": "symmetry",
    "fluorescence": "fluorescence",
    "estimated_value": "estimatedValue",
    "valuation_method": "valuationMethod",
    "certificate_number": "certificateNumber",
}


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None


def _str_or_none(v) -> Optional[str]:
    return str(v) if v is not None else None


def record_payload(record: ValuationRecord) -> Dict[str, Any]:
    """
    API shape of a record. Diamond attributes stay null until an appraiser is assigned.
    """
    attrs_visible = record.appraiser_id is not None
    payload: Dict[str, Any] = {
        "id": str(record.id),
        "recordNumber": record.record_number,
        "customerId": str(record.customer_id),
        "customerName": record.customer_name,
        "phoneNumber": record.phone_number,
        "email": record.email,
        "consultantId": str(record.consultant_id),
        "appraiserId": _str_or_none(record.appraiser_id),
        "receiptId": str(record.receipt_id),
        "serviceId": str(record.service_id),
        "appointmentDate": _iso(record.appointment_date),
        "appointmentTime": record.appointment_time,
        "status": record.status,
        "commitmentRequested": bool(record.commitment_requested),
        "createdAt": _iso(record.created_at),
        "updatedAt": _iso(record.updated_at),
        "validatedAt": _iso(record.validated_at),
    }
    for column in DIAMOND_ATTRIBUTES:
        value = getattr(record, column) if attrs_visible else None
        # decimals go out as strings to keep precision
        payload[ATTRIBUTE_FIELDS[column]] = _str_or_none(value) if column in ("carat_weight", "estimated_value") else value
    return payload
