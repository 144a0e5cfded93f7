import uuid
from decimal import Decimal

import pytest

from diamond_valuation.models.enums import RecordStatus
from diamond_valuation.services.lifecycle_service import (
    TransitionError,
    ValuationLifecycleService,
    parse_status,
)
from diamond_valuation.tests.helpers import FULL_ATTRIBUTES, principal_of


def create_record(db, people, **kw):
    return ValuationLifecycleService().create_from_receipt(
        db, receipt_id=people.receipt.id, actor=principal_of(people.consultant), **kw
    )


def test_create_copies_receipt_fields(db, people):
    r = create_record(db, people)

    assert r.status == RecordStatus.in_progress.value
    assert r.validated_at is None
    assert r.commitment_requested is False
    assert r.customer_id == people.customer.id
    assert r.customer_name == "Linh Tran"
    assert r.phone_number == "0911222333"
    assert r.consultant_id == people.consultant.id
    assert r.service_id == people.service.id
    assert r.appointment_time == "09:00-10:00"
    assert r.appraiser_id is None


def test_record_numbers_follow_sequence(db, people):
    r1 = create_record(db, people)
    r2 = create_record(db, people)

    assert r1.record_number == "VR-000001"
    assert r2.record_number == "VR-000002"


def test_create_requires_existing_receipt(db, people):
    with pytest.raises(LookupError):
        ValuationLifecycleService().create_from_receipt(
            db, receipt_id=uuid.uuid4(), actor=principal_of(people.consultant)
        )


def test_create_rejects_non_appraiser_assignment(db, people):
    with pytest.raises(ValueError) as exc:
        create_record(db, people, appraiser_id=people.consultant.id)
    assert not isinstance(exc.value, TransitionError)


def test_customer_cannot_create(db, people):
    with pytest.raises(PermissionError):
        ValuationLifecycleService().create_from_receipt(
            db, receipt_id=people.receipt.id, actor=principal_of(people.customer)
        )


def test_attributes_need_assigned_appraiser(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    with pytest.raises(TransitionError):
        svc.update(db, record_id=r.id, changes={"clarity": "VS1"}, actor=principal_of(people.manager))

    db.refresh(r)
    assert r.clarity is None


def test_assigned_appraiser_fills_attributes(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people, appraiser_id=people.appraiser.id)
    before = r.updated_at

    r = svc.update(db, record_id=r.id, changes=dict(FULL_ATTRIBUTES), actor=principal_of(people.appraiser))

    assert r.clarity == "VS1"
    assert Decimal(r.carat_weight) == Decimal("1.01")
    assert all(getattr(r, name) is not None for name in FULL_ATTRIBUTES)
    assert r.updated_at >= before
    assert r.status == RecordStatus.in_progress.value


def test_other_appraiser_cannot_fill(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people, appraiser_id=people.appraiser.id)

    with pytest.raises(PermissionError):
        svc.update(db, record_id=r.id, changes={"clarity": "VS1"}, actor=principal_of(people.other_appraiser))


def test_appraiser_cannot_reassign(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people, appraiser_id=people.appraiser.id)

    with pytest.raises(PermissionError):
        svc.update(
            db, record_id=r.id, changes={"appraiser_id": people.other_appraiser.id}, actor=principal_of(people.appraiser)
        )


def test_manager_assigns_and_fills_in_one_update(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    r = svc.update(
        db,
        record_id=r.id,
        changes={"appraiser_id": people.appraiser.id, "polish": "Excellent"},
        actor=principal_of(people.manager),
    )
    assert r.appraiser_id == people.appraiser.id
    assert r.polish == "Excellent"


def test_assigned_appraiser_cannot_be_cleared(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people, appraiser_id=people.appraiser.id)

    with pytest.raises(TransitionError):
        svc.update(db, record_id=r.id, changes={"appraiser_id": None}, actor=principal_of(people.consultant))


def test_empty_update_rejected(db, people):
    r = create_record(db, people)
    with pytest.raises(ValueError):
        ValuationLifecycleService().update(db, record_id=r.id, changes={}, actor=principal_of(people.consultant))


def test_seal_requires_complete_attributes(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people, appraiser_id=people.appraiser.id)
    svc.update(db, record_id=r.id, changes={"clarity": "VS1"}, actor=principal_of(people.appraiser))

    with pytest.raises(TransitionError) as exc:
        svc.update(db, record_id=r.id, changes={"status": "sealed"}, actor=principal_of(people.consultant))
    assert "shape_and_cut" in str(exc.value)

    svc.update(db, record_id=r.id, changes=dict(FULL_ATTRIBUTES), actor=principal_of(people.appraiser))
    r = svc.update(db, record_id=r.id, changes={"status": "sealed"}, actor=principal_of(people.consultant))
    assert r.status == RecordStatus.sealed.value

    # sealed -> completed is the normal path
    r = svc.complete(db, record_id=r.id, actor=principal_of(people.consultant))
    assert r.status == RecordStatus.completed.value


def test_status_cannot_be_completed_through_update(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    with pytest.raises(TransitionError):
        svc.update(db, record_id=r.id, changes={"status": "completed"}, actor=principal_of(people.consultant))


def test_complete_stamps_validated_at_once(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    r = svc.complete(db, record_id=r.id, actor=principal_of(people.consultant))
    assert r.status == RecordStatus.completed.value
    assert r.validated_at is not None
    first = r.validated_at

    with pytest.raises(TransitionError):
        svc.complete(db, record_id=r.id, actor=principal_of(people.consultant))

    db.refresh(r)
    assert r.validated_at == first


def test_complete_missing_record(db, people):
    with pytest.raises(LookupError):
        ValuationLifecycleService().complete(db, record_id=uuid.uuid4(), actor=principal_of(people.consultant))


def test_appraiser_cannot_complete(db, people):
    r = create_record(db, people, appraiser_id=people.appraiser.id)
    with pytest.raises(PermissionError):
        ValuationLifecycleService().complete(db, record_id=r.id, actor=principal_of(people.appraiser))


def test_completed_record_is_read_only(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)
    svc.complete(db, record_id=r.id, actor=principal_of(people.consultant))

    with pytest.raises(TransitionError):
        svc.update(db, record_id=r.id, changes={"appointment_time": "14:00-15:00"}, actor=principal_of(people.consultant))


def test_commitment_request_is_monotonic(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    r = svc.request_commitment(db, record_id=r.id, actor=principal_of(people.customer))
    assert r.commitment_requested is True

    # idempotent
    r = svc.request_commitment(db, record_id=r.id, actor=principal_of(people.customer))
    assert r.commitment_requested is True

    # only request_commitment moves the flag
    with pytest.raises(ValueError):
        svc.update(db, record_id=r.id, changes={"commitment_requested": False}, actor=principal_of(people.consultant))

    db.refresh(r)
    assert r.commitment_requested is True


def test_commitment_request_on_completed_record(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)
    svc.complete(db, record_id=r.id, actor=principal_of(people.consultant))

    r = svc.request_commitment(db, record_id=r.id, actor=principal_of(people.customer))
    assert r.commitment_requested is True
    assert r.status == RecordStatus.completed.value


def test_customer_name_cannot_be_nulled(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    with pytest.raises(ValueError) as exc:
        svc.update(db, record_id=r.id, changes={"customer_name": None}, actor=principal_of(people.consultant))
    assert not isinstance(exc.value, TransitionError)

    db.refresh(r)
    assert r.customer_name == "Linh Tran"

    # nullable contact fields can still be cleared
    r = svc.update(db, record_id=r.id, changes={"email": None}, actor=principal_of(people.consultant))
    assert r.email is None


def test_commitment_only_by_owning_customer(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    with pytest.raises(PermissionError):
        svc.request_commitment(db, record_id=r.id, actor=principal_of(people.other_customer))
    with pytest.raises(PermissionError):
        svc.request_commitment(db, record_id=r.id, actor=principal_of(people.consultant))


def test_list_by_status_returns_exact_matches(db, people):
    svc = ValuationLifecycleService()
    r1 = create_record(db, people)
    r2 = create_record(db, people)
    r3 = create_record(db, people)
    svc.complete(db, record_id=r2.id, actor=principal_of(people.consultant))

    in_progress = svc.list_by_status(db, status="in-progress")
    completed = svc.list_by_status(db, status="completed")

    assert [r.id for r in in_progress] == [r1.id, r3.id]
    assert [r.id for r in completed] == [r2.id]
    assert svc.list_by_status(db, status="sealed") == []
    assert len(svc.list_by_status(db)) == 3
    assert [r.id for r in svc.list_in_progress(db)] == [r1.id, r3.id]
    assert [r.id for r in svc.list_completed(db)] == [r2.id]


def test_list_for_user(db, people):
    svc = ValuationLifecycleService()
    r = create_record(db, people)

    assert [x.id for x in svc.list_for_user(db, user_id=people.customer.id)] == [r.id]
    assert svc.list_for_user(db, user_id=people.other_customer.id) == []


@pytest.mark.parametrize("raw", ["in-progress", "in_progress", "In Progress", " IN-PROGRESS "])
def test_parse_status_accepts_spellings(raw):
    assert parse_status(raw) == RecordStatus.in_progress


def test_parse_status_rejects_unknown():
    with pytest.raises(ValueError):
        parse_status("archived")


def test_lists_are_not_truncated(db, people):
    svc = ValuationLifecycleService()
    for _ in range(205):
        create_record(db, people)

    assert len(svc.list_by_status(db, status="in-progress")) == 205
    assert len(svc.list_in_progress(db)) == 205
    assert len(svc.list_for_user(db, user_id=people.customer.id)) == 205
    assert len(svc.list_by_status(db, limit=10)) == 10
