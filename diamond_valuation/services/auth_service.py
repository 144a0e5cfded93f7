# diamond_valuation/services/auth_service.py
from typing import Optional

from sqlalchemy.orm import Session

from diamond_valuation.core.security import verify_password
from diamond_valuation.models.enums import UserRole
from diamond_valuation.policies.rbac import Principal
from diamond_valuation.services.directory_service import DirectoryService


def authenticate(db: Session, username: str, password: str) -> Optional[Principal]:
    user = DirectoryService().get_user_by_username(db, username)

    if not user or not user.is_active:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return Principal(
        user_id=str(user.id),
        role=UserRole(user.role),
        display_name=user.name,
    )
