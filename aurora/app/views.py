from html import escape
from urllib.parse import quote, urlencode

from aurora.app.routers.schemas import Reservation, SimulationConfig
from aurora.app.services.identity import AuthMode, ResolvedIdentity


def layout(title: str, body: str, user: str | None = None) -> str:
    badge = f'<span class="user-display">{escape(user)}</span>' if user else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>{escape(title)} - Hotel Aurora</title>
</head>
<body>
  <header><h1>Hotel Aurora</h1>{badge}</header>
  <main>
{body}
  </main>
</body>
</html>
"""


def login_page() -> str:
    return layout("Login", """
    <form action="/login" method="POST">
      <label>Username <input name="username" required /></label>
      <label>Password <input type="password" name="password" required /></label>
      <button type="submit">Login</button>
    </form>""")


def login_failed_page() -> str:
    return layout("Login Failed", """
    <article><h3>Login Failed</h3><p>Invalid credentials.</p><a href="/">Try Again</a></article>""")


def menu_page(identity: ResolvedIdentity) -> str:
    links = "".join(
        f'<li><a href="{escape(identity.link(path))}">{label}</a></li>'
        for path, label in (
            ("/rooms", "View Rooms"),
            ("/reserve", "Make a Reservation"),
            ("/overview", "View Booked Rooms"),
            ("/logout", "Logout"),
        )
    )
    return layout("Main Menu", f"<h2>Main Menu</h2><ul>{links}</ul>", identity.username)


def _photos(room: dict) -> list[str]:
    return [str(photo) for photo in (room.get("media") or {}).get("photos") or []]


def _image_tag(photo: str, alt: str, css_class: str) -> str:
    return f'<img src="/images/{escape(quote(photo, safe=""))}" alt="{escape(alt)}" class="{css_class}" />'


def rooms_page(rooms: list[dict], identity: ResolvedIdentity) -> str:
    cards = []
    for room in rooms:
        name = str(room.get("room_name", ""))
        photos = _photos(room)
        thumbnail = _image_tag(photos[0], name, "list-thumbnail") if photos else '<div class="img-placeholder">No Image Available</div>'
        details = identity.link(f"/rooms/{quote(str(room.get('room_id')), safe='')}")
        cards.append(
            f"<article><strong>{escape(name)}</strong>{thumbnail}"
            f'<p>{escape(str(room.get("description", "")))}</p>'
            f'<a href="{escape(details)}">View Details</a></article>'
        )
    return layout("Our Rooms", f"<h2>Our Accommodations</h2>{''.join(cards) or '<p>No rooms available.</p>'}", identity.username)


def room_detail_page(room: dict, identity: ResolvedIdentity) -> str:
    name = str(room.get("room_name", ""))
    images = "".join(_image_tag(photo, name, "full-width-image") for photo in _photos(room))
    book = identity.link(f"/reserve?{urlencode({'room': str(room.get('room_id'))})}")
    return layout(name or "Room", f"""
    <h2>{escape(name)}</h2>
    {images}
    <p>{escape(str(room.get("description", "")))}</p>
    <a href="{escape(book)}">Book This Room</a>""", identity.username)


def reserve_page(rooms: list[dict], selected_room_id: str, identity: ResolvedIdentity, max_nights: int) -> str:
    options = "".join(
        '<option value="{name}"{sel}>{name}</option>'.format(
            name=escape(str(room.get("room_name", ""))),
            sel=" selected" if str(room.get("room_id")) == selected_room_id else "",
        )
        for room in rooms
    )
    token_field = (
        f'<input type="hidden" name="token" value="{escape(identity.token)}" />'
        if identity.mode is AuthMode.TOKEN and identity.token
        else ""
    )
    return layout("Make Reservation", f"""
    <form action="/reserve" method="POST">
      {token_field}
      <label>Guest name <input name="guest" value="{escape(identity.username or '')}" required /></label>
      <label>Room type <select name="room">{options}</select></label>
      <label>Check-in <input type="date" name="checkIn" required /></label>
      <label>Nights <input type="number" name="nights" value="1" min="1" max="{max_nights}" /></label>
      <button type="submit">Confirm Booking</button>
    </form>""", identity.username)


def overview_page(reservations: list[Reservation], identity: ResolvedIdentity) -> str:
    # Guest and room names were escaped when stored.
    rows = "".join(
        f"<tr><td>#{r.id}</td><td>{r.guest_name}</td><td>{r.room_name}</td>"
        f"<td>{r.check_in.isoformat()}</td><td>{r.nights}</td>"
        f"<td>{r.created_at.strftime('%H:%M:%S')}</td></tr>"
        for r in reversed(reservations)
    ) or '<tr><td colspan="6">No reservations found.</td></tr>'
    return layout("Overview", f"""
    <h3>Current Bookings <span class="badge">{len(reservations)}</span></h3>
    <table>
      <thead><tr><th>ID</th><th>Guest</th><th>Room</th><th>Check-in</th><th>Nights</th><th>Time</th></tr></thead>
      <tbody>{rows}</tbody>
    </table>
    <a href="{escape(identity.link('/reserve'))}">+ New</a>""", identity.username)


def config_page(config: SimulationConfig) -> str:
    delays = "".join(
        f'<label>{category.title()} <input type="number" name="delay_{category}" value="{value}" /></label>'
        for category, value in config.delays.model_dump().items()
    )
    modes = "".join(
        f'<option value="{mode.value}"{" selected" if mode is config.auth_mode else ""}>{mode.value}</option>'
        for mode in AuthMode
    )
    return layout("Workshop Config", f"""
    <form action="/config" method="POST">
      <fieldset><legend>Latency (ms)</legend>{delays}</fieldset>
      <fieldset><legend>Chaos</legend>
        <label>Error Rate (%) <input type="number" name="errorRate" value="{config.error_rate:g}" /></label>
      </fieldset>
      <fieldset><legend>Authentication</legend><select name="authMode">{modes}</select></fieldset>
      <button type="submit">Update</button>
    </form>""")
