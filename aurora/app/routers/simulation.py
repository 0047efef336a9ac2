import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from aurora.app import views
from aurora.app.core.state import AppState, get_state
from aurora.app.services.faults import config_from_form

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/config", response_class=HTMLResponse)
async def read_config(state: AppState = Depends(get_state)) -> HTMLResponse:
    return HTMLResponse(views.config_page(state.config))


@router.post("/config")
async def update_config(request: Request, state: AppState = Depends(get_state)) -> RedirectResponse:
    form = await request.form()
    config = config_from_form({key: str(value) for key, value in form.items()}, state.config)
    mode_changed = state.update_config(config)
    log.info(
        "Simulation config updated: delays=%s error_rate=%s auth_mode=%s",
        config.delays.model_dump(),
        config.error_rate,
        config.auth_mode.value,
    )

    response = RedirectResponse("/config", status_code=status.HTTP_302_FOUND)
    if mode_changed:
        # Everyone has to log in again under the new mode.
        response.delete_cookie(state.settings.SESSION_COOKIE_NAME)
    return response
