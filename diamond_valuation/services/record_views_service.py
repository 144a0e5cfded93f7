# diamond_valuation/services/record_views_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from diamond_valuation.policies.rbac import Principal
from diamond_valuation.services.aggregation_service import RecordAggregationService, RelatedLookupError
from diamond_valuation.services.lifecycle_service import ValuationLifecycleService

logger = logging.getLogger(__name__)

NOT_ASSIGNED = "Not assigned yet"
NOT_FILLED = "Not filled yet"

# (label, payload key)
CUSTOMER_DETAIL_FIELDS = (
    ("Phone Number", "phoneNumber"),
    ("Email", "email"),
    ("Appointment Date", "appointmentDate"),
    ("Appointment Time", "appointmentTime"),
    ("Service Name", "serviceName"),
    ("Consultant", "consultantName"),
)

DIAMOND_DETAIL_FIELDS = (
    ("Shape and Cut", "shapeAndCut"),
    ("Carat Weight", "caratWeight"),
    ("Clarity", "clarity"),
    ("Cut Grade", "cutGrade"),
    ("Measurements", "measurements"),
    ("Polish", "polish"),
    ("Symmetry", "symmetry"),
    ("Fluorescence", "fluorescence"),
    ("Estimated Value", "estimatedValue"),
    ("Valuation Method", "valuationMethod"),
    ("Certificate Number", "certificateNumber"),
)

TRACKING_COLUMNS = [
    "Record Number",
    "Customer Name",
    "Status",
    "Appointment Date",
    "Appointment Time",
    "Service Name",
    "Actions",
]


def _notification(level: str, message: str) -> Dict[str, str]:
    return {"level": level, "message": message}


def _text(value: Any, placeholder: str = "") -> str:
    if value is None or value == "":
        return placeholder
    return str(value)


class RecordViewsService:
    """
    JSON view models for the consultant detail page and the customer tracking page.

    Views never raise for missing data: they end in their own empty / not-found
    states and describe user-facing notifications instead.
    """

    def __init__(
        self,
        lifecycle: Optional[ValuationLifecycleService] = None,
        aggregation: Optional[RecordAggregationService] = None,
    ):
        self.lifecycle = lifecycle or ValuationLifecycleService()
        self.aggregation = aggregation or RecordAggregationService()

    # ─────────────────────────────────────────────
    # CONSULTANT DETAIL
    # ─────────────────────────────────────────────

    def _not_found(self, notification: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return {
            "state": "not_found",
            "message": "No record found",
            "notification": notification,
            "record": None,
            "actions": [],
        }

    def _timeline(self, detail: Dict[str, Any]) -> List[Dict[str, str]]:
        entries = []
        if detail.get("receiptIssuedAt"):
            entries.append({"at": detail["receiptIssuedAt"], "label": "Create Receipt"})
        entries.append({"at": detail["createdAt"], "label": "Hand over to Appraiser"})
        entries.append({"at": detail["updatedAt"], "label": "Appraiser done valuating"})
        if detail.get("validatedAt"):
            entries.append({"at": detail["validatedAt"], "label": "Completed"})
        return entries

    def _detail_view(self, detail: Dict[str, Any], notification: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        record_id = detail["id"]
        diamond = [{"label": "Appraiser", "value": _text(detail.get("appraiserName"), NOT_ASSIGNED)}]
        diamond += [{"label": label, "value": _text(detail.get(key), NOT_FILLED)} for label, key in DIAMOND_DETAIL_FIELDS]

        return {
            "state": "ready",
            "message": None,
            "notification": notification,
            "record": {
                "id": record_id,
                "status": detail["status"],
                "header": {
                    "recordNumber": detail["recordNumber"],
                    "customerName": detail["customerName"],
                },
                "customerDetails": [
                    {"label": label, "value": _text(detail.get(key))} for label, key in CUSTOMER_DETAIL_FIELDS
                ],
                "diamondDetails": diamond,
                "statusTimeline": self._timeline(detail),
            },
            "actions": [
                {
                    "name": "seal",
                    "label": "Seal",
                    "method": "GET",
                    "href": f"/consultant/record-sealing/{record_id}",
                    "disabled": False,
                },
                {
                    "name": "verify",
                    "label": "Verify",
                    "method": "PUT",
                    "href": f"/valuation-records/{record_id}/complete",
                    "disabled": detail["status"] == "completed",
                },
            ],
        }

    def consultant_detail(
        self, db: Session, *, record_id: uuid.UUID, notification: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        failed = _notification("error", "Failed to fetch valuation record data")
        try:
            record = self.lifecycle.get(db, record_id)
        except LookupError:
            return self._not_found(notification)
        except SQLAlchemyError:
            logger.exception("valuation record read failed", extra={"record_id": str(record_id)})
            return self._not_found(failed)

        try:
            detail = self.aggregation.compose(db, record)
        except (RelatedLookupError, SQLAlchemyError):
            return self._not_found(failed)
        return self._detail_view(detail, notification)

    def verify(self, db: Session, *, record_id: uuid.UUID, actor: Principal) -> Dict[str, Any]:
        """The Verify button: complete the record, then re-render the detail view."""
        try:
            self.lifecycle.complete(db, record_id=record_id, actor=actor)
        except (LookupError, ValueError, PermissionError, SQLAlchemyError) as e:
            db.rollback()
            logger.warning("record verify failed", extra={"record_id": str(record_id), "reason": str(e)})
            return self.consultant_detail(
                db, record_id=record_id, notification=_notification("error", "Failed to update record status")
            )
        return self.consultant_detail(
            db, record_id=record_id, notification=_notification("success", "Record status updated to Completed")
        )

    # ─────────────────────────────────────────────
    # CUSTOMER TRACKING
    # ─────────────────────────────────────────────

    def _tracking_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        requested = bool(row["commitmentRequested"])
        return {
            "recordId": row["id"],
            "recordNumber": row["recordNumber"],
            "customerName": row["customerName"],
            "status": row["status"],
            "appointmentDate": row["appointmentDate"],
            "appointmentTime": row["appointmentTime"],
            "serviceName": row["serviceName"],
            "action": {
                "name": "request_commit",
                "label": "Requested" if requested else "Request Commit",
                "method": "GET",
                "href": f"/request-commit/{row['id']}",
                "disabled": requested,
            },
        }

    def customer_tracking(self, db: Session, *, principal: Optional[Principal]) -> Dict[str, Any]:
        view: Dict[str, Any] = {
            "state": "ready",
            "title": "Record Tracking",
            "notification": None,
            "alert": None,
            "redirectTo": None,
            "columns": TRACKING_COLUMNS,
            "rows": [],
        }
        if principal is None:
            view["state"] = "error"
            view["notification"] = _notification("error", "User not logged in")
            return view

        rows: List[Dict[str, Any]] = []
        try:
            records = self.lifecycle.list_for_user(db, user_id=uuid.UUID(principal.user_id))
            rows = self.aggregation.with_service_names(db, records)
        except (LookupError, ValueError, SQLAlchemyError) as e:
            logger.warning("record tracking read failed", extra={"user_id": principal.user_id, "reason": str(e)})
            view["notification"] = _notification("error", "Failed to fetch records")

        if not rows:
            view["state"] = "empty"
            view["alert"] = "No records found!!"
            view["redirectTo"] = "/home"
            return view

        view["rows"] = [self._tracking_row(r) for r in rows]
        return view
