#diamond_valuation/services/aggregation_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from diamond_valuation.models.valuation_record import ValuationRecord
from diamond_valuation.services.directory_service import DirectoryService
from diamond_valuation.services.record_payloads import record_payload

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RelatedLookupError(LookupError):
    """A collaborator (service / user / receipt) needed for a composed read could not be resolved."""


class RecordAggregationService:
    """
    Composes a valuation record with display data from related entities.

    Each related entity is looked up independently; any failure fails the whole
    composed read. There is no partial-result mode.
    """

    def __init__(self, directory: Optional[DirectoryService] = None):
        self.directory = directory or DirectoryService()

    def _resolve(self, what: str, ref: uuid.UUID, fetch: Callable[[], Optional[T]]) -> T:
        try:
            row = fetch()
        except SQLAlchemyError as e:
            raise RelatedLookupError(f"{what} {ref} lookup failed.") from e
        if row is None:
            raise RelatedLookupError(f"{what} {ref} not found.")
        return row

    def compose(self, db: Session, record: ValuationRecord) -> Dict[str, Any]:
        try:
            service = self._resolve("Service", record.service_id, lambda: self.directory.get_service(db, record.service_id))
            consultant = self._resolve("Consultant", record.consultant_id, lambda: self.directory.get_user(db, record.consultant_id))
            appraiser_name = None
            if record.appraiser_id is not None:
                appraiser = self._resolve("Appraiser", record.appraiser_id, lambda: self.directory.get_user(db, record.appraiser_id))
                appraiser_name = appraiser.name
            receipt = self._resolve("Receipt", record.receipt_id, lambda: self.directory.get_receipt(db, record.receipt_id))
        except RelatedLookupError as e:
            logger.warning("composed record read failed", extra={"record_id": str(record.id), "reason": str(e)})
            raise

        return {
            **record_payload(record),
            "serviceName": service.name,
            "consultantName": consultant.name,
            "appraiserName": appraiser_name,
            "receiptIssuedAt": receipt.issue_date.isoformat() if receipt.issue_date else None,
        }

    def with_service_names(self, db: Session, records: List[ValuationRecord]) -> List[Dict[str, Any]]:
        """Tracking rows: each record plus its service name. Fails on the first unresolved service."""
        out: List[Dict[str, Any]] = []
        for record in records:
            service = self._resolve("Service", record.service_id, lambda: self.directory.get_service(db, record.service_id))
            out.append({**record_payload(record), "serviceName": service.name})
        return out
