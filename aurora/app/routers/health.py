from fastapi import APIRouter, Depends

from aurora.app.core.state import AppState, get_state


router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, bool]:
    """Basic liveness probe."""
    return {"ok": True}


@router.get("/readiness")
async def readiness(state: AppState = Depends(get_state)) -> dict[str, int | bool]:
    """Report in-memory state sizes."""
    return {"ready": True, "rooms": len(state.catalog), "reservations": len(state.store)}
