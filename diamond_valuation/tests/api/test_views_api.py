from diamond_valuation.tests.helpers import API, auth_headers


def create(client, people):
    r = client.post(f"{API}/valuation-records/{people.receipt.id}", headers=auth_headers(people.consultant), json={})
    assert r.status_code == 201, r.text
    return r.json()


def test_tracking_without_token(client, people):
    r = client.get(f"{API}/views/customer/record-tracking")

    assert r.status_code == 200
    view = r.json()
    assert view["state"] == "error"
    assert view["notification"] == {"level": "error", "message": "User not logged in"}


def test_tracking_with_bad_token(client, people):
    r = client.get(f"{API}/views/customer/record-tracking", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401


def test_tracking_empty_state(client, people):
    r = client.get(f"{API}/views/customer/record-tracking", headers=auth_headers(people.customer))

    view = r.json()
    assert view["state"] == "empty"
    assert view["alert"] == "No records found!!"
    assert view["redirectTo"] == "/home"


def test_tracking_rows_and_requested_state(client, people):
    rec = create(client, people)
    h = auth_headers(people.customer)

    view = client.get(f"{API}/views/customer/record-tracking", headers=h).json()
    assert view["state"] == "ready"
    assert view["title"] == "Record Tracking"
    (row,) = view["rows"]
    assert row["recordNumber"] == rec["recordNumber"]
    assert row["serviceName"] == "Standard Valuation"
    assert row["action"]["label"] == "Request Commit"

    client.post(f"{API}/valuation-records/{rec['id']}/commitment-request", headers=h)

    (row,) = client.get(f"{API}/views/customer/record-tracking", headers=h).json()["rows"]
    assert row["action"]["label"] == "Requested"
    assert row["action"]["disabled"] is True


def test_consultant_detail_not_found(client, people):
    r = client.get(
        f"{API}/views/consultant/records/00000000-0000-0000-0000-000000000000",
        headers=auth_headers(people.consultant),
    )
    assert r.status_code == 200
    assert r.json()["state"] == "not_found"
    assert r.json()["message"] == "No record found"


def test_consultant_detail_staff_only(client, people):
    rec = create(client, people)
    r = client.get(f"{API}/views/consultant/records/{rec['id']}", headers=auth_headers(people.customer))
    assert r.status_code == 403


def test_consultant_detail_ready(client, people):
    rec = create(client, people)

    view = client.get(f"{API}/views/consultant/records/{rec['id']}", headers=auth_headers(people.consultant)).json()

    assert view["state"] == "ready"
    assert view["record"]["header"]["recordNumber"] == "VR-000001"
    assert view["record"]["diamondDetails"][0] == {"label": "Appraiser", "value": "Not assigned yet"}
    assert view["record"]["diamondDetails"][1]["value"] == "Not filled yet"
    assert [a["name"] for a in view["actions"]] == ["seal", "verify"]


def test_verify_from_detail_view(client, people):
    rec = create(client, people)
    h = auth_headers(people.consultant)
    url = f"{API}/views/consultant/records/{rec['id']}/verify"

    view = client.post(url, headers=h).json()
    assert view["notification"] == {"level": "success", "message": "Record status updated to Completed"}
    assert view["record"]["status"] == "completed"

    view = client.post(url, headers=h).json()
    assert view["notification"] == {"level": "error", "message": "Failed to update record status"}

    events = client.get(f"{API}/valuation-records/{rec['id']}/audit", headers=h).json()
    assert [e["action"] for e in events] == ["RECORD_CREATED", "RECORD_COMPLETED"]
