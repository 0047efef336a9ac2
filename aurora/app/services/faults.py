import asyncio
import math
import random
from collections.abc import Mapping
from typing import Literal

from aurora.app.routers.schemas import Delays, SimulationConfig
from aurora.app.services.identity import AuthMode

Category = Literal["login", "menu", "reserve", "overview", "rooms"]

CHAOS_EXEMPT_PREFIX = "/config"


async def apply_latency(config: SimulationConfig, category: Category) -> None:
    """Suspend the current request for the configured delay of its category."""
    delay_ms = getattr(config.delays, category)
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)


def chaos_triggered(config: SimulationConfig, path: str, rng: random.Random) -> bool:
    if path.startswith(CHAOS_EXEMPT_PREFIX):
        return False
    if config.error_rate <= 0:
        return False
    return rng.random() * 100 < config.error_rate


def _number(raw: str | None) -> float:
    try:
        value = float(raw) if raw not in (None, "") else 0.0
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def config_from_form(form: Mapping[str, str], current: SimulationConfig) -> SimulationConfig:
    """Build a new config from the /config form; garbage reads as 0."""
    delays = Delays(
        **{
            category: max(0, int(_number(form.get(f"delay_{category}"))))
            for category in Delays.model_fields
        }
    )
    error_rate = min(100.0, max(0.0, _number(form.get("errorRate"))))
    mode = form.get("authMode") or current.auth_mode.value
    try:
        auth_mode = AuthMode(mode)
    except ValueError:
        auth_mode = current.auth_mode
    return SimulationConfig(delays=delays, error_rate=error_rate, auth_mode=auth_mode)
