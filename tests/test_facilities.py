from datetime import datetime, timedelta, timezone

from app.models import Booking


def test_create_and_get_facility(client):
    r = client.post("/facilityDetail", json={"name": "Board Room", "level": "3", "description": "12 seats", "status": "open"})
    assert r.status_code == 201
    data = r.json()
    assert data["id"] == 1
    assert data["transaction_dt"] is not None

    r2 = client.get(f"/facilityDetail/{data['id']}")
    assert r2.status_code == 200
    assert r2.json()["name"] == "Board Room"


def test_duplicate_name_conflicts(client, make_facility):
    make_facility(name="Board Room")
    r = client.post("/facilityDetail", json={"name": "Board Room"})
    assert r.status_code == 409


def test_missing_facility(client):
    assert client.get("/facilityDetail/7").status_code == 404
    assert client.put("/facilityDetail/7", json={"name": "x"}).status_code == 404
    assert client.delete("/facilityDetail/7").status_code == 404


def test_update_refreshes_transaction_time(client, make_facility):
    f = make_facility(name="Huddle", status="open")
    facility_id = f.id
    before = f.transaction_dt

    r = client.put(f"/facilityDetail/{facility_id}", json={"name": "Huddle", "status": "closed"})
    assert r.status_code == 200
    assert r.json()["status"] == "closed"
    updated = datetime.fromisoformat(r.json()["transaction_dt"].replace("Z", "+00:00"))
    assert updated >= before.replace(tzinfo=timezone.utc)


def test_status_filter_and_count(client, make_facility):
    make_facility(status="open")
    make_facility(status="open")
    make_facility(status="closed")

    assert client.get("/facilityDetailsCount").json() == 3
    assert client.get("/facilityDetailsCount", params={"status": "open"}).json() == 2
    closed = client.get("/facilityDetails", params={"status": "closed"}).json()
    assert [f["status"] for f in closed] == ["closed"]


def test_delete_facility_cascades_to_its_bookings(client, make_facility, make_booking, test_db_session):
    room = make_facility()
    other = make_facility()
    room_id, other_id = room.id, other.id
    start = datetime(2030, 1, 7, 10, tzinfo=timezone.utc)
    make_booking(facility_id=room_id, start=start)
    make_booking(facility_id=room_id, start=start + timedelta(hours=3))
    make_booking(facility_id=other_id, start=start)

    r = client.delete(f"/facilityDetail/{room_id}")
    assert r.status_code == 200
    assert r.json() == {"result": "success"}

    assert client.get(f"/facilityDetail/{room_id}").status_code == 404
    remaining = test_db_session.query(Booking).all()
    assert [b.facility_id for b in remaining] == [other_id]
