import asyncio
from datetime import date, timedelta
from urllib.parse import parse_qs, urlsplit

import pytest


pytestmark = pytest.mark.asyncio


def booking(check_in: str, nights: int = 1, room: str = "Deluxe King", guest: str = "Ann") -> dict:
    return {"guest": guest, "room": room, "nights": str(nights), "checkIn": check_in}


async def test_booking_redirects_to_overview(client, state, login, future_day):
    await login(client)

    response = await client.post("/reserve", data=booking(future_day(), nights=3))

    assert response.status_code == 302
    assert response.headers["location"] == "/overview"
    [record] = state.store.all()
    assert record.id == 1
    assert record.booked_by == "admin"
    assert record.nights == 3
    assert record.check_in.isoformat() == future_day()


async def test_adjacent_stays_are_accepted_and_overlaps_conflict(client, login, future_day):
    await login(client)

    first = await client.post("/reserve", data=booking(future_day(0), nights=2))
    overlapping = await client.post("/reserve", data=booking(future_day(1), nights=1))
    adjacent = await client.post("/reserve", data=booking(future_day(2), nights=1))

    assert first.status_code == 302
    assert overlapping.status_code == 409
    assert adjacent.status_code == 302


async def test_same_dates_in_another_room_are_fine(client, login, future_day):
    await login(client)

    await client.post("/reserve", data=booking(future_day(), room="Deluxe King"))
    response = await client.post("/reserve", data=booking(future_day(), room="Garden Twin"))

    assert response.status_code == 302


@pytest.mark.parametrize("missing", ["guest", "room", "nights", "checkIn"])
async def test_missing_fields_are_rejected(client, login, future_day, missing):
    await login(client)
    data = booking(future_day())
    del data[missing]

    response = await client.post("/reserve", data=data)

    assert response.status_code == 400
    assert missing in response.json()["detail"]


@pytest.mark.parametrize(
    "check_in",
    ["2030-2-03", "03/10/2030", "2030-03-10T00:00", "tomorrow", "2030-03-10\n", "\uff12\uff10\uff13\uff10-03-10"],
)
async def test_malformed_dates_are_rejected(client, login, check_in):
    await login(client)

    response = await client.post("/reserve", data=booking(check_in))

    assert response.status_code == 400
    assert "YYYY-MM-DD" in response.json()["detail"]


@pytest.mark.parametrize("check_in", ["2026-02-30", "2030-02-30", "2031-04-31", "2030-13-01"])
async def test_impossible_calendar_dates_are_rejected(client, login, check_in):
    await login(client)

    response = await client.post("/reserve", data=booking(check_in))

    assert response.status_code == 400
    assert "not a valid calendar date" in response.json()["detail"]


async def test_past_check_in_is_rejected(client, login):
    await login(client)
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    response = await client.post("/reserve", data=booking(yesterday))

    assert response.status_code == 400
    assert "past" in response.json()["detail"]


async def test_today_is_accepted(client, login):
    await login(client)

    response = await client.post("/reserve", data=booking(date.today().isoformat()))

    assert response.status_code == 302


@pytest.mark.parametrize("nights", ["0", "-1", "15", "two"])
async def test_invalid_nights_are_rejected(client, login, future_day, nights):
    await login(client)
    data = booking(future_day())
    data["nights"] = nights

    response = await client.post("/reserve", data=data)

    assert response.status_code == 400
    assert "nights" in response.json()["detail"]


async def test_unauthenticated_booking_redirects_and_stores_nothing(client, state, future_day):
    response = await client.post("/reserve", data=booking(future_day()))

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert len(state.store) == 0


async def test_concurrent_overlapping_requests_have_one_winner(client, state, login, future_day):
    await login(client)

    responses = await asyncio.gather(
        client.post("/reserve", data=booking(future_day(), nights=2, guest="Ann")),
        client.post("/reserve", data=booking(future_day(1), nights=2, guest="Bob")),
    )

    assert sorted(r.status_code for r in responses) == [302, 409]
    assert len(state.store) == 1


async def test_overview_lists_only_own_bookings(client, other_client, login, future_day):
    await login(client)
    await login(other_client, "user7", "Password7")

    await client.post("/reserve", data=booking(future_day(0), guest="Admin Guest"))
    await other_client.post("/reserve", data=booking(future_day(5), guest="Seven Guest"))

    admin_view = await client.get("/overview")
    user_view = await other_client.get("/overview")

    assert "Admin Guest" in admin_view.text
    assert "Seven Guest" not in admin_view.text
    assert "Seven Guest" in user_view.text
    assert "Admin Guest" not in user_view.text


async def test_guest_names_are_escaped(client, login, future_day):
    await login(client)

    await client.post("/reserve", data=booking(future_day(), guest="<b>Ann</b>"))
    overview = await client.get("/overview")

    assert "&lt;b&gt;Ann&lt;/b&gt;" in overview.text
    assert "<b>Ann</b>" not in overview.text


async def test_token_mode_booking_reads_token_from_form(client, state, login, future_day):
    await client.post("/config", data={"authMode": "token"})
    location = (await login(client)).headers["location"]
    token = parse_qs(urlsplit(location).query)["token"][0]

    form = await client.get("/reserve", params={"token": token, "room": "garden-twin"})
    assert form.status_code == 200
    assert f'name="token" value="{token}"' in form.text

    data = booking(future_day(), room="Garden Twin")
    data["token"] = token
    response = await client.post("/reserve", data=data)

    assert response.status_code == 302
    assert response.headers["location"] == f"/overview?token={token}"
    [record] = state.store.all()
    assert record.booked_by == "admin"
    assert record.room_name == "Garden Twin"


async def test_token_mode_booking_accepts_multipart_form(client, state, login, future_day):
    await client.post("/config", data={"authMode": "token"})
    location = (await login(client)).headers["location"]
    token = parse_qs(urlsplit(location).query)["token"][0]

    data = booking(future_day(), room="Deluxe King")
    data["token"] = token
    response = await client.post("/reserve", data=data, files={"attachment": ("note.txt", b"")})

    assert response.request.headers["content-type"].startswith("multipart/form-data")
    assert response.status_code == 302
    assert response.headers["location"] == f"/overview?token={token}"
    [record] = state.store.all()
    assert record.booked_by == "admin"
