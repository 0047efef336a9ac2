from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse

from aurora.app import views
from aurora.app.core.state import AppState, get_identity, get_state, require_identity
from aurora.app.services.auth import check_credentials
from aurora.app.services.faults import apply_latency
from aurora.app.services.identity import AuthMode, ResolvedIdentity


router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(get_identity),
):
    await apply_latency(state.config, "login")
    if identity.authenticated:
        return RedirectResponse(identity.link("/menu"), status_code=status.HTTP_302_FOUND)
    return HTMLResponse(views.login_page())


@router.post("/login", response_class=HTMLResponse)
async def login(
    username: str | None = Form(None),
    password: str | None = Form(None),
    state: AppState = Depends(get_state),
):
    await apply_latency(state.config, "login")
    if not check_credentials(username, password):
        # Failed logins are a normal page, not an error status.
        return HTMLResponse(views.login_failed_page())

    identity = state.identity.login(username)
    response = RedirectResponse(identity.link("/menu"), status_code=status.HTTP_302_FOUND)
    if identity.mode is AuthMode.COOKIE:
        response.set_cookie(state.settings.SESSION_COOKIE_NAME, username, httponly=True)
    return response


@router.get("/logout")
async def logout(
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(get_identity),
) -> RedirectResponse:
    if identity.authenticated:
        state.identity.logout(identity)
    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(state.settings.SESSION_COOKIE_NAME)
    return response


@router.get("/menu", response_class=HTMLResponse)
async def menu(
    state: AppState = Depends(get_state),
    identity: ResolvedIdentity = Depends(require_identity),
) -> HTMLResponse:
    await apply_latency(state.config, "menu")
    return HTMLResponse(views.menu_page(identity))
