import uuid

from diamond_valuation.services.lifecycle_service import ValuationLifecycleService
from diamond_valuation.services.record_views_service import (
    NOT_ASSIGNED,
    NOT_FILLED,
    TRACKING_COLUMNS,
    RecordViewsService,
)
from diamond_valuation.tests.helpers import principal_of


def make_record(db, people):
    return ValuationLifecycleService().create_from_receipt(
        db, receipt_id=people.receipt.id, actor=principal_of(people.consultant)
    )


def _field(fields, label):
    return next(f["value"] for f in fields if f["label"] == label)


def test_detail_not_found(db, people):
    view = RecordViewsService().consultant_detail(db, record_id=uuid.uuid4())

    assert view["state"] == "not_found"
    assert view["message"] == "No record found"
    assert view["record"] is None
    assert view["notification"] is None


def test_detail_placeholders_before_appraisal(db, people):
    r = make_record(db, people)

    view = RecordViewsService().consultant_detail(db, record_id=r.id)

    assert view["state"] == "ready"
    record = view["record"]
    assert record["header"] == {"recordNumber": "VR-000001", "customerName": "Linh Tran"}
    assert record["diamondDetails"][0] == {"label": "Appraiser", "value": NOT_ASSIGNED}
    assert {f["value"] for f in record["diamondDetails"][1:]} == {NOT_FILLED}
    assert _field(record["customerDetails"], "Service Name") == "Standard Valuation"
    assert _field(record["customerDetails"], "Consultant") == "Minh Nguyen"
    assert _field(record["customerDetails"], "Appointment Date") == "2026-10-20"


def test_detail_timeline_and_actions(db, people):
    r = make_record(db, people)

    view = RecordViewsService().consultant_detail(db, record_id=r.id)

    labels = [e["label"] for e in view["record"]["statusTimeline"]]
    assert labels == ["Create Receipt", "Hand over to Appraiser", "Appraiser done valuating"]

    actions = {a["name"]: a for a in view["actions"]}
    assert actions["seal"]["href"] == f"/consultant/record-sealing/{r.id}"
    assert actions["verify"]["method"] == "PUT"
    assert actions["verify"]["disabled"] is False


def test_detail_lookup_failure(db, people):
    r = make_record(db, people)
    db.delete(people.service)
    db.commit()

    view = RecordViewsService().consultant_detail(db, record_id=r.id)

    assert view["state"] == "not_found"
    assert view["notification"] == {"level": "error", "message": "Failed to fetch valuation record data"}


def test_verify_success_then_failure(db, people):
    views = RecordViewsService()
    r = make_record(db, people)

    view = views.verify(db, record_id=r.id, actor=principal_of(people.consultant))

    assert view["notification"] == {"level": "success", "message": "Record status updated to Completed"}
    assert view["record"]["status"] == "completed"
    assert view["record"]["statusTimeline"][-1]["label"] == "Completed"
    assert {a["name"]: a for a in view["actions"]}["verify"]["disabled"] is True

    again = views.verify(db, record_id=r.id, actor=principal_of(people.consultant))
    assert again["notification"] == {"level": "error", "message": "Failed to update record status"}
    assert again["state"] == "ready"


def test_verify_missing_record(db, people):
    view = RecordViewsService().verify(db, record_id=uuid.uuid4(), actor=principal_of(people.consultant))

    assert view["state"] == "not_found"
    assert view["notification"]["level"] == "error"


def test_tracking_requires_caller(db, people):
    view = RecordViewsService().customer_tracking(db, principal=None)

    assert view["state"] == "error"
    assert view["notification"] == {"level": "error", "message": "User not logged in"}


def test_tracking_empty(db, people):
    view = RecordViewsService().customer_tracking(db, principal=principal_of(people.other_customer))

    assert view["state"] == "empty"
    assert view["alert"] == "No records found!!"
    assert view["redirectTo"] == "/home"
    assert view["rows"] == []


def test_tracking_rows(db, people):
    lifecycle = ValuationLifecycleService()
    r1 = make_record(db, people)
    r2 = make_record(db, people)
    lifecycle.request_commitment(db, record_id=r2.id, actor=principal_of(people.customer))

    view = RecordViewsService().customer_tracking(db, principal=principal_of(people.customer))

    assert view["state"] == "ready"
    assert view["columns"] == TRACKING_COLUMNS
    first, second = view["rows"]
    assert first["recordId"] == str(r1.id)
    assert first["serviceName"] == "Standard Valuation"
    assert first["action"]["label"] == "Request Commit"
    assert first["action"]["href"] == f"/request-commit/{r1.id}"
    assert first["action"]["disabled"] is False
    assert second["action"]["label"] == "Requested"
    assert second["action"]["disabled"] is True


def test_tracking_lookup_failure(db, people):
    make_record(db, people)
    db.delete(people.service)
    db.commit()

    view = RecordViewsService().customer_tracking(db, principal=principal_of(people.customer))

    assert view["notification"] == {"level": "error", "message": "Failed to fetch records"}
    assert view["rows"] == []


def test_tracking_shows_every_record(db, people):
    for _ in range(205):
        make_record(db, people)

    view = RecordViewsService().customer_tracking(db, principal=principal_of(people.customer))

    assert len(view["rows"]) == 205
    assert view["rows"][-1]["recordNumber"] == "VR-000205"
