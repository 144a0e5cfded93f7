from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session
from starlette.requests import Request

from diamond_valuation.core.hashing import canonical_dumps, sha256_hex
from diamond_valuation.models.audit_log import AuditLogRecord
from diamond_valuation.policies.rbac import Principal


class AuditAction:
    RECORD_CREATED = "RECORD_CREATED"
    RECORD_UPDATED = "RECORD_UPDATED"
    RECORD_SEALED = "RECORD_SEALED"
    RECORD_COMPLETED = "RECORD_COMPLETED"
    COMMITMENT_REQUESTED = "COMMITMENT_REQUESTED"


def _payload_hash(payload: Dict[str, Any]) -> str:
    return sha256_hex(canonical_dumps(payload))


def audit_event(
    db: Session,
    *,
    request: Request,
    actor: Principal,
    record_id: uuid.UUID,
    action: str,
    payload_summary: Dict[str, Any],
    status: str = "ok",
    ref_id: Optional[str] = None,
) -> AuditLogRecord:
    """
    Append-only audit record insert.

    payload_summary holds field names and status values, not customer contact data.
    """
    rid = getattr(request.state, "request_id", None) or "missing"

    row = AuditLogRecord(
        request_id=rid,
        route=str(request.url.path),
        method=request.method,
        actor_user_id=actor.user_id,
        actor_role=actor.role.value,
        record_id=record_id,
        action=action,
        status=status,
        payload_hash=_payload_hash(payload_summary),
        payload_summary_json=payload_summary,
        ref_id=ref_id,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_record_events(db: Session, *, record_id: uuid.UUID, limit: Optional[int] = None) -> List[AuditLogRecord]:
    q = select(AuditLogRecord).where(AuditLogRecord.record_id == record_id).order_by(AuditLogRecord.created_at)
    if limit is not None:
        q = q.limit(limit)
    return list(db.execute(q).scalars().all())
