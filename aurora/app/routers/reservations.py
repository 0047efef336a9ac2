import re
from datetime import date

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse

from aurora.app import views
from aurora.app.core.state import AppState, get_state, require_identity
from aurora.app.services.faults import apply_latency
from aurora.app.services.identity import ResolvedIdentity
from aurora.app.services.reservations import ReservationConflict


router = APIRouter()

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_check_in(raw: str) -> date:
    """Strict YYYY-MM-DD that must name a real calendar day (no 2026-02-30)."""
    if not _ISO_DATE.fullmatch(raw):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="checkIn must use the YYYY-MM-DD format")
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=f"checkIn {raw} is not a valid calendar date") from exc


def parse_nights(raw: str, max_nights: int) -> int:
    try:
        nights = int(raw)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="nights must be a whole number") from exc
    if not 1 <= nights <= max_nights:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=f"nights must be between 1 and {max_nights}")
    return nights


@router.get("/reserve", response_class=HTMLResponse)
async def reservation_form(
    room: str = "",
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(require_identity),
) -> HTMLResponse:
    await apply_latency(state.config, "reserve")
    return HTMLResponse(views.reserve_page(state.catalog, room, identity, state.settings.MAX_NIGHTS))


@router.post("/reserve")
async def create_reservation(
    guest: str | None = Form(None),
    room: str | None = Form(None),
    nights: str | None = Form(None),
    check_in: str | None = Form(None, alias="checkIn"),
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(require_identity),
) -> RedirectResponse:
    await apply_latency(state.config, "reserve")

    missing = [name for name, value in (("guest", guest), ("room", room), ("nights", nights), ("checkIn", check_in)) if not value]
    if missing:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=f"Missing data: {', '.join(missing)}")
    stay_nights = parse_nights(nights, state.settings.MAX_NIGHTS)

    arrival = parse_check_in(check_in)
    if arrival < date.today():
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="checkIn cannot be in the past")

    try:
        state.store.book(
            guest_name=guest,
            room_name=room,
            check_in=arrival,
            nights=stay_nights,
            booked_by=identity.username,
        )
    except ReservationConflict as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return RedirectResponse(identity.link("/overview"), status_code=status.HTTP_302_FOUND)


@router.get("/overview", response_class=HTMLResponse)
async def overview(
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(require_identity),
) -> HTMLResponse:
    await apply_latency(state.config, "overview")
    return HTMLResponse(views.overview_page(state.store.by_user(identity.username), identity))
