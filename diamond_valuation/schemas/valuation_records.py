from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

CaratWeight = Annotated[Decimal, Field(gt=0, max_digits=8, decimal_places=3)]
MoneyValue = Annotated[Decimal, Field(ge=0, max_digits=16, decimal_places=2)]

# API field name -> model column
UPDATE_FIELD_COLUMNS: Dict[str, str] = {
    "customerName": "customer_name",
    "phoneNumber": "phone_number",
    "email": "email",
    "appointmentDate": "appointment_date",
    "appointmentTime": "appointment_time",
    "appraiserId": "appraiser_id",
    "shapeAndCut": "shape_and_cut",
    "caratWeight": "carat_weight",
    "clarity": "clarity",
    "cutGrade": "cut_grade",
    "measurements": "measurements",
    "polish": "polish",
    "symmetry": "symmetry",
    "fluorescence": "fluorescence",
    "estimatedValue": "estimated_value",
    "valuationMethod": "valuation_method",
    "certificateNumber": "certificate_number",
    "status": "status",
}


class ValuationRecordCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    appraiserId: Optional[str] = Field(default=None, description="Optional appraiser assigned at intake")


class ValuationRecordUpdateRequest(BaseModel):
    """
    Partial update. Only the fields present in the body are applied.
    Status may only move to "sealed" here; completion and commitment requests have their own routes.
    """
    model_config = ConfigDict(extra="forbid")

    # intake (consultant)
    customerName: Optional[str] = Field(default=None, min_length=1, max_length=256)
    phoneNumber: Optional[str] = Field(default=None, max_length=32)
    email: Optional[str] = Field(default=None, max_length=256)
    appointmentDate: Optional[date] = None
    appointmentTime: Optional[str] = Field(default=None, max_length=32)
    appraiserId: Optional[str] = None

    # diamond attributes (appraiser)
    shapeAndCut: Optional[str] = Field(default=None, max_length=64)
    caratWeight: Optional[CaratWeight] = None
    clarity: Optional[str] = Field(default=None, max_length=32)
    cutGrade: Optional[str] = Field(default=None, max_length=32)
    measurements: Optional[str] = Field(default=None, max_length=128)
    polish: Optional[str] = Field(default=None, max_length=32)
    symmetry: Optional[str] = Field(default=None, max_length=32)
    fluorescence: Optional[str] = Field(default=None, max_length=32)
    estimatedValue: Optional[MoneyValue] = None
    valuationMethod: Optional[str] = Field(default=None, max_length=64)
    certificateNumber: Optional[str] = Field(default=None, max_length=64)

    status: Optional[str] = None

    def to_changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent, keyed by model column."""
        sent = self.model_dump(exclude_unset=True)
        return {UPDATE_FIELD_COLUMNS[k]: v for k, v in sent.items()}


class ValuationRecordResponse(BaseModel):
    id: str
    recordNumber: str
    customerId: str
    customerName: str
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    consultantId: str
    appraiserId: Optional[str] = None
    receiptId: str
    serviceId: str
    appointmentDate: Optional[str] = None
    appointmentTime: Optional[str] = None

    shapeAndCut: Optional[str] = None
    caratWeight: Optional[str] = None
    clarity: Optional[str] = None
    cutGrade: Optional[str] = None
    measurements: Optional[str] = None
    polish: Optional[str] = None
    symmetry: Optional[str] = None
    fluorescence: Optional[str] = None
    estimatedValue: Optional[str] = None
    valuationMethod: Optional[str] = None
    certificateNumber: Optional[str] = None

    status: str
    commitmentRequested: bool
    createdAt: str
    updatedAt: str
    validatedAt: Optional[str] = None


class ValuationRecordDetailResponse(ValuationRecordResponse):
    serviceName: str
    consultantName: str
    appraiserName: Optional[str] = None
    receiptIssuedAt: Optional[str] = None


class TrackedValuationRecordResponse(ValuationRecordResponse):
    serviceName: str


class AuditEventResponse(BaseModel):
    id: str
    createdAtIso: str
    requestId: str
    action: str
    actorUserId: str
    actorRole: str
    payloadHash: str
    payloadSummary: Dict[str, Any] = Field(default_factory=dict)
