import uuid

from tests.factories import auth_headers, make_booking, make_hall

HALLS = "/api/v1/halls"

NEW_HALL = {
    "name": "Seminar Room 2",
    "hall_number": "B-204",
    "building": "Humanities",
    "floor": 2,
    "capacity": 40,
    "type": "seminar",
    "facilities": ["whiteboard", " projector ", ""],
}


async def test_admin_creates_hall(client, admin):
    response = await client.post(f"{HALLS}/", json=NEW_HALL, headers=auth_headers(admin))

    assert response.status_code == 201
    body = response.json()
    assert body["facilities"] == ["whiteboard", "projector"]
    assert body["is_available"] is True
    assert body["location"] == "Humanities, Floor 2, Hall B-204"


async def test_faculty_cannot_create_hall(client, faculty):
    response = await client.post(f"{HALLS}/", json=NEW_HALL, headers=auth_headers(faculty))

    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


async def test_duplicate_hall_number(client, hall, admin):
    response = await client.post(
        f"{HALLS}/", json={**NEW_HALL, "hall_number": hall.hall_number}, headers=auth_headers(admin)
    )
    assert response.status_code == 422


async def test_capacity_bounds(client, admin):
    for capacity in (0, 1001):
        response = await client.post(
            f"{HALLS}/", json={**NEW_HALL, "capacity": capacity}, headers=auth_headers(admin)
        )
        assert response.status_code == 422


async def test_list_and_filter_halls(client, db, hall):
    await make_hall(db, name="Chem Lab", hall_number="L-12", type="lab", capacity=25, is_available=False)

    everything = await client.get(f"{HALLS}/")
    assert everything.status_code == 200
    assert len(everything.json()) == 2

    labs = await client.get(f"{HALLS}/", params={"type": "lab"})
    assert [h["name"] for h in labs.json()] == ["Chem Lab"]

    big = await client.get(f"{HALLS}/", params={"min_capacity": 50})
    assert [h["id"] for h in big.json()] == [str(hall.id)]

    open_halls = await client.get(f"{HALLS}/", params={"is_available": "true"})
    assert [h["id"] for h in open_halls.json()] == [str(hall.id)]


async def test_get_hall(client, hall):
    response = await client.get(f"{HALLS}/{hall.id}")

    assert response.status_code == 200
    assert response.json()["capacity"] == hall.capacity


async def test_missing_hall(client, admin):
    missing = f"{HALLS}/{uuid.uuid4()}"

    response = await client.get(missing)
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"

    update = await client.put(missing, json={"capacity": 10}, headers=auth_headers(admin))
    assert update.status_code == 404


async def test_update_hall(client, hall, admin):
    response = await client.put(
        f"{HALLS}/{hall.id}",
        json={"capacity": 120, "is_available": False},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["capacity"] == 120
    assert body["is_available"] is False
    assert body["name"] == hall.name


async def test_unavailable_hall_refuses_bookings(client, hall, admin, faculty, future_day):
    await client.put(f"{HALLS}/{hall.id}", json={"is_available": False}, headers=auth_headers(admin))

    response = await client.post(
        "/api/v1/bookings/",
        json={
            "hall_id": str(hall.id),
            "date": future_day.isoformat(),
            "start_time": "10:00",
            "end_time": "11:00",
            "purpose": "Thesis defence rehearsal",
        },
        headers=auth_headers(faculty),
    )
    assert response.status_code == 422
    assert response.json()["code"] == "hall_not_available"


async def test_delete_refused_while_bookings_are_upcoming(client, db, hall, admin, faculty, future_day):
    booking = await make_booking(db, hall, faculty, future_day, "10:00", "11:00")

    refused = await client.delete(f"{HALLS}/{hall.id}", headers=auth_headers(admin))
    assert refused.status_code == 409
    assert refused.json()["code"] == "hall_in_use"

    await client.put(f"/api/v1/bookings/{booking.id}/cancel", headers=auth_headers(faculty))

    deleted = await client.delete(f"{HALLS}/{hall.id}", headers=auth_headers(admin))
    assert deleted.status_code == 204
    assert (await client.get(f"{HALLS}/{hall.id}")).status_code == 404


async def test_faculty_cannot_delete_hall(client, hall, faculty):
    response = await client.delete(f"{HALLS}/{hall.id}", headers=auth_headers(faculty))
    assert response.status_code == 403
