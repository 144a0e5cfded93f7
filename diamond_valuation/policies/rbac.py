#diamond_valuation/policies/rbac.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Set

from diamond_valuation.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: UserRole
    display_name: str


# --- Core action constants ---
ACTION_CREATE_RECORD = "CREATE_RECORD"
ACTION_LIST_RECORDS = "LIST_RECORDS"
ACTION_EDIT_INTAKE = "EDIT_INTAKE"
ACTION_ASSIGN_APPRAISER = "ASSIGN_APPRAISER"
ACTION_FILL_ATTRIBUTES = "FILL_ATTRIBUTES"
ACTION_SEAL_RECORD = "SEAL_RECORD"
ACTION_COMPLETE_RECORD = "COMPLETE_RECORD"
ACTION_REQUEST_COMMITMENT = "REQUEST_COMMITMENT"


def allowed_actions(role: UserRole) -> Set[str]:
    """
    Pure RBAC: which actions a role may attempt.
    Ownership (customer owns record, appraiser assigned to record) is checked separately.
    """

    if role == UserRole.CUSTOMER:
        return {ACTION_REQUEST_COMMITMENT}

    if role == UserRole.CONSULTANT:
        return {
            ACTION_CREATE_RECORD,
            ACTION_LIST_RECORDS,
            ACTION_EDIT_INTAKE,
            ACTION_ASSIGN_APPRAISER,
            ACTION_SEAL_RECORD,
            ACTION_COMPLETE_RECORD,
        }

    if role == UserRole.APPRAISER:
        return {ACTION_LIST_RECORDS, ACTION_FILL_ATTRIBUTES}

    if role == UserRole.MANAGER:
        return {
            ACTION_CREATE_RECORD,
            ACTION_LIST_RECORDS,
            ACTION_EDIT_INTAKE,
            ACTION_ASSIGN_APPRAISER,
            ACTION_FILL_ATTRIBUTES,
            ACTION_SEAL_RECORD,
            ACTION_COMPLETE_RECORD,
        }

    return set()


def require_action(principal: Principal, action: str) -> None:
    if action not in allowed_actions(principal.role):
        raise PermissionError(
            f"Role {principal.role.value} not permitted for action {action}."
        )
