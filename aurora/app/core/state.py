import random

from fastapi import Request

from aurora.app.core.config import Settings
from aurora.app.routers.schemas import SimulationConfig
from aurora.app.services.catalog import load_catalog
from aurora.app.services.identity import AuthMode, IdentityResolver, ResolvedIdentity
from aurora.app.services.reservations import ReservationStore


class AppState:
    """Process-wide mutable state shared by the pipeline and every route."""

    def __init__(
        self,
        settings: Settings,
        *,
        rng: random.Random | None = None,
        catalog: list[dict] | None = None,
    ) -> None:
        self.settings = settings
        self.config = SimulationConfig(
            error_rate=min(100.0, max(0.0, settings.ERROR_RATE)),
            auth_mode=AuthMode(settings.AUTH_MODE),
        )
        self.store = ReservationStore(capacity=settings.RESERVATION_CAPACITY)
        self.identity = IdentityResolver(self.config.auth_mode)
        self.rng = rng or random.Random()
        self.catalog = load_catalog(settings.ROOMS_FILE) if catalog is None else catalog

    def update_config(self, config: SimulationConfig) -> bool:
        """Swap in a new config; returns True when the auth mode changed."""
        changed = self.identity.switch_mode(config.auth_mode)
        self.config = config
        return changed


class LoginRequired(Exception):
    """Raised by protected routes when the caller has no resolved identity."""


def get_state(request: Request) -> AppState:
    return request.app.state.aurora


def get_identity(request: Request) -> ResolvedIdentity:
    identity = getattr(request.state, "identity", None)
    if identity is None:
        return ResolvedIdentity(mode=get_state(request).identity.mode)
    return identity


def require_identity(request: Request) -> ResolvedIdentity:
    identity = get_identity(request)
    if not identity.authenticated:
        raise LoginRequired()
    return identity
