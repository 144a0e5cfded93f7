#diamond_valuation/services/directory_service.py
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from diamond_valuation.models.receipt import Receipt
from diamond_valuation.models.service_offering import ServiceOffering
from diamond_valuation.models.user import User


class DirectoryService:
    """
    Read-only lookups of the collaborators a valuation record references:
    service offerings, users (customers / consultants / appraisers) and receipts.
    """

    def get_service(self, db: Session, service_id: uuid.UUID) -> Optional[ServiceOffering]:
        return db.execute(select(ServiceOffering).where(ServiceOffering.id == service_id)).scalar_one_or_none()

    def get_user(self, db: Session, user_id: uuid.UUID) -> Optional[User]:
        return db.execute(select(User).where(User.id == user_id)).scalar_one_or_none()

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.execute(select(User).where(User.username == username)).scalar_one_or_none()

    def get_receipt(self, db: Session, receipt_id: uuid.UUID) -> Optional[Receipt]:
        return db.execute(select(Receipt).where(Receipt.id == receipt_id)).scalar_one_or_none()

    # strict variants raise LookupError

    def require_service(self, db: Session, service_id: uuid.UUID) -> ServiceOffering:
        svc = self.get_service(db, service_id)
        if not svc:
            raise LookupError(f"Service {service_id} not found.")
        return svc

    def require_user(self, db: Session, user_id: uuid.UUID) -> User:
        user = self.get_user(db, user_id)
        if not user:
            raise LookupError(f"User {user_id} not found.")
        return user

    def require_receipt(self, db: Session, receipt_id: uuid.UUID) -> Receipt:
        receipt = self.get_receipt(db, receipt_id)
        if not receipt:
            raise LookupError(f"Receipt {receipt_id} not found.")
        return receipt
