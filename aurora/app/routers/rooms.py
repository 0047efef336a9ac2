from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse, HTMLResponse

from aurora.app import views
from aurora.app.core.state import AppState, get_state, require_identity
from aurora.app.services.catalog import find_room, resolve_image
from aurora.app.services.faults import apply_latency
from aurora.app.services.identity import ResolvedIdentity


router = APIRouter()


@router.get("/rooms", response_class=HTMLResponse)
async def list_rooms(
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(require_identity),
) -> HTMLResponse:
    await apply_latency(state.config, "rooms")
    return HTMLResponse(views.rooms_page(state.catalog, identity))


@router.get("/rooms/{room_id}", response_class=HTMLResponse)
async def room_detail(
    room_id: str,
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(require_identity),
) -> HTMLResponse:
    room = find_room(state.catalog, room_id)
    if room is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Unknown room {room_id!r}")
    await apply_latency(state.config, "rooms")
    return HTMLResponse(views.room_detail_page(room, identity))


@router.get("/images/{filename}")
async def room_image(filename: str, state: AppState = Depends(get_state)) -> FileResponse:
    path = resolve_image(state.settings.IMAGES_DIR, filename)
    if path is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Image not found")
    return FileResponse(path)
