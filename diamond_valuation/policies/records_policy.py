#diamond_valuation/policies/records_policy.py
from __future__ import annotations

import uuid
from typing import Optional

from diamond_valuation.models.enums import STAFF_ROLES, UserRole
from diamond_valuation.models.valuation_record import ValuationRecord
from diamond_valuation.policies.rbac import Principal


def is_staff(principal: Principal) -> bool:
    return principal.role in STAFF_ROLES


def can_read_record(principal: Principal, record: ValuationRecord) -> bool:
    if is_staff(principal):
        return True
    return principal.role == UserRole.CUSTOMER and str(record.customer_id) == principal.user_id


def can_read_user_records(principal: Principal, user_id: str) -> bool:
    # customers see their own tracking list only
    if is_staff(principal):
        return True
    return principal.user_id == user_id


def can_fill_attributes(principal: Principal, appraiser_id: Optional[uuid.UUID]) -> bool:
    # appraiser_id is the effective assignment, which may arrive in the same update
    if principal.role == UserRole.MANAGER:
        return True
    if principal.role != UserRole.APPRAISER:
        return False
    return appraiser_id is not None and str(appraiser_id) == principal.user_id


def can_request_commitment(principal: Principal, record: ValuationRecord) -> bool:
    return principal.role == UserRole.CUSTOMER and str(record.customer_id) == principal.user_id
