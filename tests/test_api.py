from datetime import date

API = "/api/v1"


def as_user(user):
    return {"X-User-Id": str(user.id)}


def test_unknown_caller_is_rejected(client):
    response = client.get(f"{API}/users/me", headers={"X-User-Id": "999"})
    assert response.status_code == 401


def test_inactive_caller_is_forbidden(client, make_user):
    inactive = make_user(is_active=False)

    response = client.get(f"{API}/users/me", headers=as_user(inactive))
    assert response.status_code == 403


def test_worker_records_attendance_and_salary_follows(client, worker):
    response = client.post(
        f"{API}/attendance/",
        json={"date": "2024-03-04", "check_in": "2024-03-04T08:00:00", "check_out": "2024-03-04T17:00:00"},
        headers=as_user(worker),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == worker.id
    assert body["hours_worked"] == 9
    assert body["overtime"] == 1

    salaries = client.get(f"{API}/salary/", headers=as_user(worker)).json()
    assert salaries["total"] == 1
    salary = salaries["salaries"][0]
    assert (salary["month"], salary["year"]) == ("March", 2024)
    assert salary["present_days"] == 1
    assert salary["earned_amount"] == 50

    receipts = client.get(f"{API}/receipts/", headers=as_user(worker)).json()
    assert [receipt["receipt_type"] for receipt in receipts] == ["daily_earning"]


def test_duplicate_attendance_returns_400(client, worker):
    payload = {"date": "2024-03-04"}
    assert client.post(f"{API}/attendance/", json=payload, headers=as_user(worker)).status_code == 201

    response = client.post(f"{API}/attendance/", json=payload, headers=as_user(worker))
    assert response.status_code == 400
    assert "already recorded" in response.json()["detail"]


def test_worker_cannot_record_for_someone_else(client, worker, make_user):
    other = make_user()

    response = client.post(
        f"{API}/attendance/",
        json={"date": "2024-03-04", "user_id": other.id},
        headers=as_user(worker),
    )

    assert response.status_code == 201
    assert response.json()["user_id"] == worker.id


def test_admin_records_for_a_worker(client, admin, worker):
    response = client.post(
        f"{API}/attendance/",
        json={"date": "2024-03-04", "user_id": worker.id, "status": "absent"},
        headers=as_user(admin),
    )

    assert response.status_code == 201
    assert response.json()["user_id"] == worker.id
    assert response.json()["status"] == "absent"


def test_admin_recording_for_unknown_user_is_404(client, admin):
    response = client.post(
        f"{API}/attendance/", json={"date": "2024-03-04", "user_id": 4040}, headers=as_user(admin)
    )
    assert response.status_code == 404


def test_check_in_and_check_out(client, worker):
    response = client.post(
        f"{API}/attendance/check-in", json={"timestamp": "2024-03-04T08:00:00"}, headers=as_user(worker)
    )
    assert response.status_code == 201

    response = client.post(
        f"{API}/attendance/check-out", json={"timestamp": "2024-03-04T18:00:00"}, headers=as_user(worker)
    )
    assert response.status_code == 200
    assert response.json()["hours_worked"] == 10
    assert response.json()["overtime"] == 2

    response = client.post(
        f"{API}/attendance/check-out", json={"timestamp": "2024-03-04T19:00:00"}, headers=as_user(worker)
    )
    assert response.status_code == 400


def test_check_out_with_utc_offset(client, worker):
    client.post(
        f"{API}/attendance/check-in", json={"timestamp": "2024-03-04T09:00:00+01:00"}, headers=as_user(worker)
    )

    response = client.post(
        f"{API}/attendance/check-out", json={"timestamp": "2024-03-04T17:00:00+01:00"}, headers=as_user(worker)
    )

    assert response.status_code == 200
    assert response.json()["hours_worked"] == 8


def test_worker_cannot_read_other_records(client, worker, make_user, add_records):
    other = make_user()
    record, = add_records(other, [date(2024, 3, 4)])

    response = client.get(f"{API}/attendance/{record.id}", headers=as_user(worker))
    assert response.status_code == 403


def test_delete_requires_admin_and_recomputes(client, admin, worker):
    created = client.post(f"{API}/attendance/", json={"date": "2024-03-04"}, headers=as_user(worker)).json()

    assert client.delete(f"{API}/attendance/{created['id']}", headers=as_user(worker)).status_code == 403

    response = client.delete(f"{API}/attendance/{created['id']}", headers=as_user(admin))
    assert response.status_code == 200

    salary = client.get(f"{API}/salary/", params={"user_id": worker.id}, headers=as_user(admin)).json()["salaries"][0]
    assert salary["present_days"] == 0
    assert salary["total_amount"] == 0


def test_mark_absent_sweep(client, admin, worker, make_user):
    other = make_user()
    client.post(f"{API}/attendance/", json={"date": "2024-03-04"}, headers=as_user(worker))

    response = client.post(f"{API}/attendance/mark-absent", params={"date": "2024-03-04"}, headers=as_user(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2024-03-04"
    assert body["marked_absent"] == 1
    assert body["records"][0]["user_id"] == other.id
    assert body["records"][0]["auto_marked"] is True


def test_mark_absent_requires_admin(client, worker):
    response = client.post(f"{API}/attendance/mark-absent", headers=as_user(worker))
    assert response.status_code == 403


def test_monthly_report_validates_period(client, worker, add_records):
    add_records(worker, [date(2024, 3, 4), date(2024, 3, 5)])

    report = client.get(f"{API}/attendance/monthly-report/{worker.id}/March/2024", headers=as_user(worker))
    assert report.status_code == 200
    assert report.json()["present_days"] == 2
    assert report.json()["earned_amount"] == 100

    assert client.get(
        f"{API}/attendance/monthly-report/{worker.id}/march/2024", headers=as_user(worker)
    ).status_code == 400
    assert client.get(
        f"{API}/attendance/monthly-report/{worker.id}/March/1999", headers=as_user(worker)
    ).status_code == 400


def test_checkout_and_payment(client, admin, worker, add_records):
    add_records(worker, [date(2024, 3, 4), date(2024, 3, 5)])
    add_records(worker, [date(2024, 3, 6)], status="absent")

    response = client.post(f"{API}/salary/checkout/{worker.id}/March/2024", headers=as_user(worker))
    assert response.status_code == 200
    body = response.json()
    assert body["salary"]["total_amount"] == 100
    assert body["salary"]["deductions"] == 50
    assert body["receipt"]["receipt_type"] == "salary"
    assert body["receipt"]["amount"] == 100

    salary_id = body["salary"]["id"]
    assert client.put(f"{API}/salary/{salary_id}/pay", headers=as_user(worker)).status_code == 403

    paid = client.put(f"{API}/salary/{salary_id}/pay", headers=as_user(admin))
    assert paid.status_code == 200
    assert paid.json()["is_paid"] is True
    assert client.put(f"{API}/salary/99999/pay", headers=as_user(admin)).status_code == 404


def test_checkout_unknown_user_is_404(client, admin):
    response = client.post(f"{API}/salary/checkout/4040/March/2024", headers=as_user(admin))
    assert response.status_code == 404


def test_adjust_salary_adds_bonuses(client, admin, worker, add_records):
    add_records(worker, [date(2024, 3, 4)])
    salary_id = client.post(
        f"{API}/salary/checkout/{worker.id}/March/2024", headers=as_user(admin)
    ).json()["salary"]["id"]

    response = client.put(f"{API}/salary/{salary_id}", json={"bonuses": 20, "notes": "holiday"}, headers=as_user(admin))

    assert response.status_code == 200
    assert response.json()["bonuses"] == 20
    assert response.json()["total_amount"] == 70
    assert client.put(
        f"{API}/salary/{salary_id}", json={"bonuses": -5}, headers=as_user(admin)
    ).status_code == 422


def test_generate_monthly(client, admin, worker):
    response = client.post(f"{API}/salary/generate-monthly/March/2024", headers=as_user(admin))
    assert response.status_code == 200
    assert response.json()["created"] == 1

    again = client.post(f"{API}/salary/generate-monthly/March/2024", headers=as_user(admin))
    assert again.json()["created"] == 0


def test_user_management(client, admin):
    response = client.post(
        f"{API}/users/",
        json={"name": "Hassan", "id_card_number": "BK1234", "day_rate": 120},
        headers=as_user(admin),
    )
    assert response.status_code == 201
    user_id = response.json()["id"]
    assert response.json()["role"] == "worker"

    duplicate = client.post(
        f"{API}/users/", json={"name": "Other", "id_card_number": "BK1234"}, headers=as_user(admin)
    )
    assert duplicate.status_code == 400

    updated = client.put(f"{API}/users/{user_id}", json={"day_rate": 150}, headers=as_user(admin))
    assert updated.json()["day_rate"] == 150

    deactivated = client.delete(f"{API}/users/{user_id}", headers=as_user(admin))
    assert deactivated.json()["is_active"] is False


def test_records_in_date_range(client, worker, add_records):
    add_records(worker, [date(2024, 3, 8), date(2024, 3, 4), date(2024, 3, 5)])
    add_records(worker, [date(2024, 3, 11)], status="absent")

    response = client.get(
        f"{API}/attendance/user/{worker.id}",
        params={"start_date": "2024-03-05", "end_date": "2024-03-11"},
        headers=as_user(worker),
    )

    assert response.status_code == 200
    assert [record["date"] for record in response.json()] == ["2024-03-05", "2024-03-08", "2024-03-11"]


def test_date_range_rejects_bad_input(client, worker, make_user):
    url = f"{API}/attendance/user/{worker.id}"

    malformed = client.get(url, params={"start_date": "05/03/2024", "end_date": "2024-03-11"}, headers=as_user(worker))
    assert malformed.status_code == 400
    assert "YYYY-MM-DD" in malformed.json()["detail"]

    reversed_range = client.get(url, params={"start_date": "2024-03-11", "end_date": "2024-03-05"}, headers=as_user(worker))
    assert reversed_range.status_code == 400

    other = make_user()
    forbidden = client.get(url, params={"start_date": "2024-03-01", "end_date": "2024-03-31"}, headers=as_user(other))
    assert forbidden.status_code == 403


def test_admin_records_a_payment_receipt(client, admin, worker):
    response = client.post(
        f"{API}/receipts/",
        json={"user_id": worker.id, "amount": 200, "description": "Advance on March", "date": "2024-03-15"},
        headers=as_user(admin),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["receipt_type"] == "payment"
    assert body["amount"] == 200
    assert body["day_rate"] == 0
    assert body["date"] == "2024-03-15"

    receipts = client.get(f"{API}/receipts/", params={"receipt_type": "payment"}, headers=as_user(worker)).json()
    assert [receipt["id"] for receipt in receipts] == [body["id"]]


def test_payment_receipt_rules(client, admin, worker):
    payload = {"user_id": worker.id, "amount": 10, "description": "Transport"}

    assert client.post(f"{API}/receipts/", json=payload, headers=as_user(worker)).status_code == 403
    assert client.post(
        f"{API}/receipts/", json={**payload, "user_id": 4040}, headers=as_user(admin)
    ).status_code == 404
    assert client.post(
        f"{API}/receipts/", json={**payload, "amount": -10}, headers=as_user(admin)
    ).status_code == 422
    assert client.post(
        f"{API}/receipts/", json={**payload, "description": "   "}, headers=as_user(admin)
    ).status_code == 400


def test_get_receipt_is_limited_to_owner_and_admin(client, admin, worker, make_user):
    client.post(f"{API}/attendance/", json={"date": "2024-03-04"}, headers=as_user(worker))
    receipt_id = client.get(f"{API}/receipts/", headers=as_user(worker)).json()[0]["id"]

    own = client.get(f"{API}/receipts/{receipt_id}", headers=as_user(worker))
    assert own.status_code == 200
    assert own.json()["receipt_type"] == "daily_earning"

    assert client.get(f"{API}/receipts/{receipt_id}", headers=as_user(admin)).status_code == 200
    assert client.get(f"{API}/receipts/{receipt_id}", headers=as_user(make_user())).status_code == 403
    assert client.get(f"{API}/receipts/99999", headers=as_user(admin)).status_code == 404


def test_admin_creates_salary_record(client, admin, worker, add_records):
    add_records(worker, [date(2024, 3, 4), date(2024, 3, 5)])
    add_records(worker, [date(2024, 3, 6)], status="absent")
    payload = {"user_id": worker.id, "month": "March", "year": 2024, "bonuses": 30, "notes": "team bonus"}

    response = client.post(f"{API}/salary/", json=payload, headers=as_user(admin))

    assert response.status_code == 201
    body = response.json()
    assert body["present_days"] == 2
    assert body["absent_days"] == 1
    assert body["earned_amount"] == 100
    assert body["bonuses"] == 30
    assert body["total_amount"] == 130
    assert body["notes"] == "team bonus"
    assert body["is_paid"] is False

    duplicate = client.post(f"{API}/salary/", json=payload, headers=as_user(admin))
    assert duplicate.status_code == 400
    assert "already exists" in duplicate.json()["detail"]


def test_create_salary_rejections(client, admin, worker):
    payload = {"user_id": worker.id, "month": "March", "year": 2024}

    assert client.post(f"{API}/salary/", json=payload, headers=as_user(worker)).status_code == 403
    assert client.post(
        f"{API}/salary/", json={**payload, "user_id": 4040}, headers=as_user(admin)
    ).status_code == 404
    assert client.post(
        f"{API}/salary/", json={**payload, "month": "Marsh"}, headers=as_user(admin)
    ).status_code == 400


def test_dashboard_stats(client, admin, worker, make_user, add_records):
    make_user(is_active=False)
    add_records(worker, [date(2024, 3, 4), date(2024, 3, 5)])
    add_records(worker, [date(2024, 3, 6)], status="absent")
    add_records(worker, [date(2024, 2, 28)])
    client.post(f"{API}/salary/checkout/{worker.id}/March/2024", headers=as_user(admin))

    response = client.get(f"{API}/dashboard/stats", params={"as_of": "2024-03-20"}, headers=as_user(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["total_workers"] == 1
    assert body["monthly_attendance"] == 2
    assert body["pending_salaries"] == 1
    assert len(body["recent_activity"]) == 4

    assert client.get(f"{API}/dashboard/stats", headers=as_user(worker)).status_code == 403


def test_user_dashboard_stats(client, admin, worker, make_user):
    for day in ("2024-03-04", "2024-04-01"):
        client.post(
            f"{API}/attendance/",
            json={"date": day, "check_in": f"{day}T08:00:00", "check_out": f"{day}T17:00:00"},
            headers=as_user(worker),
        )

    url = f"{API}/dashboard/user-stats/{worker.id}"
    response = client.get(url, params={"as_of": "2024-03-20"}, headers=as_user(worker))

    assert response.status_code == 200
    assert response.json() == {
        "user_id": worker.id,
        "monthly_attendance": 1,
        "total_hours": 9,
        "total_overtime": 1,
        "pending_salary": 100,
    }

    march = client.get(f"{API}/salary/", params={"month": "March"}, headers=as_user(worker)).json()["salaries"][0]
    client.put(f"{API}/salary/{march['id']}/pay", headers=as_user(admin))
    assert client.get(url, params={"as_of": "2024-03-20"}, headers=as_user(admin)).json()["pending_salary"] == 50

    assert client.get(url, headers=as_user(make_user())).status_code == 403
