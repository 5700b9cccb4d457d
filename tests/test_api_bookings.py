from datetime import timedelta

import pytest

from tests.factories import auth_headers, make_booking

BOOKINGS = "/api/v1/bookings"


def payload(hall, day, start="10:00", end="11:00", **extra) -> dict:
    body = {
        "hall_id": str(hall.id),
        "date": day.isoformat(),
        "start_time": start,
        "end_time": end,
        "purpose": "Research group meeting",
        "event_type": "meeting",
    }
    body.update(extra)
    return body


async def create(client, user, hall, day, start="10:00", end="11:00", **extra):
    return await client.post(
        f"{BOOKINGS}/", json=payload(hall, day, start, end, **extra), headers=auth_headers(user)
    )


async def test_create_booking(client, hall, faculty, future_day):
    response = await create(client, faculty, hall, future_day, "9:00", "10:30", expected_attendees=40)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["start_time"] == "09:00"
    assert body["duration"] == 90
    assert body["hall"]["hall_number"] == hall.hall_number
    assert body["booked_by"]["email"] == faculty.email
    assert body["approved_by"] is None


async def test_create_requires_authentication(client, hall, future_day):
    response = await client.post(f"{BOOKINGS}/", json=payload(hall, future_day))

    assert response.status_code == 401
    assert response.json()["code"] == "unauthenticated"


@pytest.mark.parametrize(
    "start, end",
    [("11:00", "10:00"), ("10:00", "10:00"), ("25:00", "26:00"), ("10", "11")],
)
async def test_create_rejects_bad_times(client, hall, faculty, future_day, start, end):
    response = await create(client, faculty, hall, future_day, start, end)

    assert response.status_code == 422
    assert response.json()["code"] == "validation_failed"


async def test_create_rejects_short_purpose(client, hall, faculty, future_day):
    response = await create(client, faculty, hall, future_day, purpose="  hi  ")
    assert response.status_code == 422


async def test_create_in_the_past(client, hall, faculty, future_day):
    response = await create(client, faculty, hall, future_day - timedelta(days=30))

    assert response.status_code == 422
    assert "past" in response.json()["detail"]


async def test_capacity_exceeded(client, hall, faculty, future_day):
    response = await create(client, faculty, hall, future_day, expected_attendees=101)

    assert response.status_code == 422
    assert response.json()["code"] == "capacity_exceeded"


async def test_overlap_with_approved_is_a_conflict(client, db, hall, faculty, other_faculty, future_day):
    await make_booking(db, hall, other_faculty, future_day, "10:00", "12:00", status="approved")

    response = await create(client, faculty, hall, future_day, "11:00", "13:00")

    assert response.status_code == 409
    assert response.json()["code"] == "conflict"


async def test_approval_race(client, hall, faculty, other_faculty, admin, future_day):
    first = (await create(client, faculty, hall, future_day, "10:00", "11:00")).json()
    second = (await create(client, other_faculty, hall, future_day, "10:30", "11:30")).json()

    approved = await client.put(f"{BOOKINGS}/{first['id']}/approve", headers=auth_headers(admin))
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["approved_by"]["id"] == str(admin.id)

    refused = await client.put(f"{BOOKINGS}/{second['id']}/approve", headers=auth_headers(admin))
    assert refused.status_code == 409
    assert refused.json()["code"] == "conflict"


async def test_faculty_cannot_approve(client, db, hall, faculty, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")

    response = await client.put(f"{BOOKINGS}/{booking.id}/approve", headers=auth_headers(faculty))

    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


async def test_reject_flow(client, db, hall, faculty, admin, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")
    url = f"{BOOKINGS}/{booking.id}/reject"

    missing = await client.put(url, json={}, headers=auth_headers(admin))
    assert missing.status_code == 422
    assert missing.json()["code"] == "validation_failed"

    rejected = await client.put(
        url, json={"rejection_reason": "Hall reserved for exams"}, headers=auth_headers(admin)
    )
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["rejection_reason"] == "Hall reserved for exams"

    again = await client.put(url, json={"rejection_reason": "Still no"}, headers=auth_headers(admin))
    assert again.status_code == 400
    assert again.json()["code"] == "invalid_transition"


async def test_owner_cancels_then_cannot_cancel_again(client, db, hall, faculty, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00", status="approved")
    url = f"{BOOKINGS}/{booking.id}/cancel"

    cancelled = await client.put(url, headers=auth_headers(faculty))
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = await client.put(url, headers=auth_headers(faculty))
    assert again.status_code == 400


async def test_stranger_cannot_cancel(client, db, hall, faculty, other_faculty, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")

    response = await client.put(f"{BOOKINGS}/{booking.id}/cancel", headers=auth_headers(other_faculty))
    assert response.status_code == 403


async def test_update_own_pending_booking(client, db, hall, faculty, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")

    response = await client.put(
        f"{BOOKINGS}/{booking.id}",
        json={"start_time": "15:00", "end_time": "16:00", "notes": "Moved to afternoon"},
        headers=auth_headers(faculty),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["start_time"] == "15:00"
    assert body["status"] == "pending"
    assert body["notes"] == "Moved to afternoon"


async def test_update_approved_needs_admin(client, db, hall, faculty, admin, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00", status="approved")
    url = f"{BOOKINGS}/{booking.id}"

    refused = await client.put(url, json={"notes": "x"}, headers=auth_headers(faculty))
    assert refused.status_code == 403

    allowed = await client.put(url, json={"start_time": "10:30"}, headers=auth_headers(admin))
    assert allowed.status_code == 200
    assert allowed.json()["status"] == "pending"


async def test_list_is_scoped_to_caller(client, db, hall, faculty, other_faculty, admin, future_day):
    await make_booking(db, hall, faculty, future_day, "10:00", "11:00")
    await make_booking(db, hall, other_faculty, future_day, "12:00", "13:00", status="approved")

    mine = await client.get(f"{BOOKINGS}/", headers=auth_headers(faculty))
    assert mine.status_code == 200
    assert mine.json()["total"] == 1

    everything = await client.get(f"{BOOKINGS}/", headers=auth_headers(admin))
    assert everything.json()["total"] == 2

    approved = await client.get(
        f"{BOOKINGS}/", params={"status": "approved"}, headers=auth_headers(admin)
    )
    assert [b["status"] for b in approved.json()["bookings"]] == ["approved"]


async def test_list_rejects_unknown_status(client, faculty):
    response = await client.get(f"{BOOKINGS}/", params={"status": "done"}, headers=auth_headers(faculty))
    assert response.status_code == 422


async def test_get_booking_visibility(client, db, hall, faculty, other_faculty, admin, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")
    url = f"{BOOKINGS}/{booking.id}"

    assert (await client.get(url, headers=auth_headers(faculty))).status_code == 200
    assert (await client.get(url, headers=auth_headers(admin))).status_code == 200
    assert (await client.get(url, headers=auth_headers(other_faculty))).status_code == 403


async def test_missing_booking(client, admin):
    response = await client.get(f"{BOOKINGS}/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


async def test_delete_is_admin_only(client, db, hall, faculty, admin, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")
    url = f"{BOOKINGS}/{booking.id}"

    assert (await client.delete(url, headers=auth_headers(faculty))).status_code == 403
    assert (await client.delete(url, headers=auth_headers(admin))).status_code == 204
    assert (await client.get(url, headers=auth_headers(admin))).status_code == 404


async def test_availability_is_public(client, db, hall, faculty, future_day):
    await make_booking(db, hall, faculty, future_day, "14:00", "15:00", status="approved")
    await make_booking(db, hall, faculty, future_day, "09:00", "10:00")
    await make_booking(db, hall, faculty, future_day, "11:00", "12:00", status="rejected")

    response = await client.get(f"{BOOKINGS}/availability/{hall.id}/{future_day.isoformat()}")

    assert response.status_code == 200
    body = response.json()
    assert body["hall"]["id"] == str(hall.id)
    assert [(s["start_time"], s["status"]) for s in body["bookings"]] == [
        ("09:00", "pending"),
        ("14:00", "approved"),
    ]
    assert body["bookings"][0]["booked_by"] == faculty.name


async def test_availability_unknown_hall(client, faculty, future_day):
    response = await client.get(f"{BOOKINGS}/availability/{faculty.id}/{future_day.isoformat()}")
    assert response.status_code == 404


async def test_slot_check(client, db, hall, faculty, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")
    body = {
        "hall_id": str(hall.id),
        "date": future_day.isoformat(),
        "start_time": "10:30",
        "end_time": "11:30",
    }

    busy = await client.post(f"{BOOKINGS}/check", json=body)
    assert busy.status_code == 200
    assert busy.json()["conflict"] is True

    body["exclude_booking_id"] = str(booking.id)
    own = await client.post(f"{BOOKINGS}/check", json=body)
    assert own.json()["conflict"] is False

    adjacent = await client.post(
        f"{BOOKINGS}/check", json={**body, "start_time": "11:00", "end_time": "12:00"}
    )
    assert adjacent.json()["conflict"] is False
