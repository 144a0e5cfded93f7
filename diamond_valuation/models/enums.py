#diamond_valuation/models/enums.py
from __future__ import annotations
from enum import Enum


class UserRole(str, Enum):
    CUSTOMER = "CUSTOMER"
    CONSULTANT = "CONSULTANT"
    APPRAISER = "APPRAISER"
    MANAGER = "MANAGER"


class RecordStatus(str, Enum):
    # lifecycle: in-progress -> (sealed) -> completed
    in_progress = "in-progress"
    sealed = "sealed"
    completed = "completed"


STAFF_ROLES = frozenset({UserRole.CONSULTANT, UserRole.APPRAISER, UserRole.MANAGER})
