from aurora.app import views
from aurora.app.services.identity import AuthMode, ResolvedIdentity


ROOM = {
    "room_id": "sea&view",
    "room_name": "Sea View",
    "description": "Balcony over the bay.",
    "media": {"photos": ["sea view #1.jpg", "bath?.png"]},
}


def test_rooms_list_encodes_links_and_shows_first_photo():
    page = views.rooms_page([ROOM], ResolvedIdentity(username="admin"))

    assert 'href="/rooms/sea%26view"' in page
    assert 'src="/images/sea%20view%20%231.jpg"' in page
    assert "bath%3F.png" not in page


def test_rooms_list_placeholder_without_photos():
    page = views.rooms_page([{"room_id": "plain", "room_name": "Plain"}], ResolvedIdentity(username="admin"))
    assert "No Image Available" in page


def test_room_detail_encodes_photos_and_booking_link():
    identity = ResolvedIdentity(username="admin", mode=AuthMode.TOKEN, token="abc")

    page = views.room_detail_page(ROOM, identity)

    assert 'src="/images/bath%3F.png"' in page
    assert 'href="/reserve?room=sea%26view&amp;token=abc"' in page
