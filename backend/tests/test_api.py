"""HTTP flow: publish service and vacancies, query, book, see ticket."""

from datetime import date, timedelta

from conftest import CONSULTING_SHEET, next_weekday

GRID_9_TO_18 = ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
                "12:00", "12:30", "13:00", "13:30", "14:00"]


def _publish(client):
    resp = client.post("/businesses/", json={"name": "Alariva Consulting", "timeslot_step": 30})
    assert resp.status_code == 201
    business_id = resp.json()["id"]

    resp = client.post(
        f"/businesses/{business_id}/services",
        json={"name": "OnSite 4hs Support", "duration_min": 240},
    )
    assert resp.status_code == 201
    service = resp.json()
    assert service["slug"] == "onsite-4hs-support"

    resp = client.put(f"/vacancies/{business_id}", json={"vacancies": CONSULTING_SHEET})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Availability registered successfully"

    return business_id, service["id"]


def test_consulting_scenario(client):
    business_id, service_id = _publish(client)
    tuesday = next_weekday(1).isoformat()

    resp = client.get(f"/vacancies/{business_id}/{service_id}/{tuesday}")
    assert resp.status_code == 200
    assert resp.json() == {"times": GRID_9_TO_18}

    resp = client.post("/booking", json={
        "businessId": business_id,
        "serviceId": service_id,
        "time": "11:30",
        "date": tuesday,
        "comments": "test comments",
    })
    assert resp.status_code == 201
    ticket = resp.json()
    assert ticket["confirmation"] == "Please arrive at 11:30 am"
    assert ticket["serviceName"] == "OnSite 4hs Support"
    assert ticket["time"] == "11:30"

    resp = client.get(f"/booking/{business_id}/{ticket['code']}")
    assert resp.status_code == 200
    assert resp.json()["code"] == ticket["code"]
    assert resp.json()["confirmation"] == "Please arrive at 11:30 am"

    resp = client.get(f"/vacancies/{business_id}/{service_id}/{tuesday}")
    assert resp.json() == {"times": []}


def test_booking_taken_time_is_409(client):
    business_id, service_id = _publish(client)
    tuesday = next_weekday(1).isoformat()
    body = {"businessId": business_id, "serviceId": service_id, "time": "09:00", "date": tuesday}

    assert client.post("/booking", json=body).status_code == 201
    resp = client.post("/booking", json=body)
    assert resp.status_code == 409


def test_no_rule_for_weekday_returns_empty(client):
    business_id, service_id = _publish(client)
    monday = next_weekday(0).isoformat()

    resp = client.get(f"/vacancies/{business_id}/{service_id}/{monday}")
    assert resp.status_code == 200
    assert resp.json() == {"times": []}


def test_unknown_business_or_service_is_404(client):
    business_id, service_id = _publish(client)
    tuesday = next_weekday(1).isoformat()

    assert client.get(f"/vacancies/9999/{service_id}/{tuesday}").status_code == 404
    assert client.get(f"/vacancies/{business_id}/9999/{tuesday}").status_code == 404


def test_past_and_far_dates_are_404(client):
    business_id, service_id = _publish(client)
    past = (date.today() - timedelta(days=1)).isoformat()
    far = (date.today() + timedelta(days=3650)).isoformat()

    assert client.get(f"/vacancies/{business_id}/{service_id}/{past}").status_code == 404
    assert client.get(f"/vacancies/{business_id}/{service_id}/{far}").status_code == 404


def test_bad_sheet_is_rejected_with_line(client):
    business_id, service_id = _publish(client)

    resp = client.put(f"/vacancies/{business_id}", json={"vacancies": "x:1\n mon, funday\n  9-18\n"})
    assert resp.status_code == 422
    assert resp.json()["line"] == 2
    assert resp.json()["text"] == " mon, funday"

    resp = client.get(f"/vacancies/{business_id}")
    assert resp.json()["version"] == 1
    assert resp.json()["raw_text"] == CONSULTING_SHEET


def test_sheet_read_back_in_canonical_form(client):
    business_id, _ = _publish(client)
    client.put(f"/vacancies/{business_id}", json={"vacancies": "Onsite-4hs-Support:1\n\tSat,TUE\n\t\t9-18\n"})

    resp = client.get(f"/vacancies/{business_id}")
    assert resp.status_code == 200
    assert resp.json()["version"] == 2
    assert resp.json()["canonical"] == "onsite-4hs-support:1\n tue, sat\n  9-18\n"


def test_preferences_reject_non_positive_step(client):
    business_id, _ = _publish(client)

    resp = client.patch(f"/businesses/{business_id}/preferences", json={"timeslot_step": 0})
    assert resp.status_code == 422

    resp = client.patch(f"/businesses/{business_id}/preferences", json={"timeslot_step": 60, "time_format": "H:i"})
    assert resp.status_code == 200
    assert resp.json()["timeslot_step"] == 60


def test_step_preference_changes_grid(client):
    business_id, service_id = _publish(client)
    tuesday = next_weekday(1).isoformat()
    client.patch(f"/businesses/{business_id}/preferences", json={"timeslot_step": 60, "time_format": "H:i"})

    resp = client.get(f"/vacancies/{business_id}/{service_id}/{tuesday}")
    assert resp.json() == {"times": ["09:00", "10:00", "11:00", "12:00", "13:00", "14:00"]}

    resp = client.post("/booking", json={
        "businessId": business_id, "serviceId": service_id, "time": "14:00", "date": tuesday,
    })
    assert resp.json()["confirmation"] == "Please arrive at 14:00"


def test_service_duration_must_be_positive(client):
    business_id, _ = _publish(client)
    resp = client.post(f"/businesses/{business_id}/services", json={"name": "Nothing", "duration_min": 0})
    assert resp.status_code == 422


def test_invalid_time_format_is_422(client):
    business_id, service_id = _publish(client)
    resp = client.post("/booking", json={
        "businessId": business_id, "serviceId": service_id, "time": "9am",
        "date": next_weekday(1).isoformat(),
    })
    assert resp.status_code == 422


def test_service_with_taken_key_is_409(client):
    business_id, _ = _publish(client)
    url = f"/businesses/{business_id}/services"

    assert client.post(url, json={"name": "Call", "duration_min": 60}).status_code == 201
    assert client.post(url, json={"name": "Call", "duration_min": 60}).status_code == 409

    resp = client.post(url, json={"name": "Call!", "duration_min": 30})
    assert resp.status_code == 409
    assert "call" in resp.json()["detail"]

    other = client.post("/businesses/", json={"name": "Other"}).json()["id"]
    assert client.post(f"/businesses/{other}/services", json={"name": "Call", "duration_min": 60}).status_code == 201


def test_booking_cannot_be_changed_or_deleted(client):
    business_id, service_id = _publish(client)
    resp = client.post("/booking", json={
        "businessId": business_id, "serviceId": service_id, "time": "09:00",
        "date": next_weekday(1).isoformat(),
    })
    url = f"/booking/{business_id}/{resp.json()['code']}"

    assert client.patch(url, json={"time": "10:00"}).status_code == 405
    assert client.delete(url).status_code == 405
    assert client.get(url).status_code == 200
