from datetime import date, datetime

from pydantic import BaseModel, Field

from aurora.app.services.identity import AuthMode


class ReservationIn(BaseModel):
    guest_name: str = Field(min_length=1)
    room_name: str = Field(min_length=1)
    # Calendar date only; checked against today by the route
    check_in: date
    nights: int = Field(ge=1)
    booked_by: str


class Reservation(ReservationIn):
    id: int
    created_at: datetime


class Delays(BaseModel):
    # Milliseconds per route category
    login: int = Field(default=0, ge=0)
    menu: int = Field(default=0, ge=0)
    reserve: int = Field(default=0, ge=0)
    overview: int = Field(default=0, ge=0)
    rooms: int = Field(default=0, ge=0)


class SimulationConfig(BaseModel):
    delays: Delays = Field(default_factory=Delays)
    error_rate: float = Field(default=0.0, ge=0, le=100)
    auth_mode: AuthMode = AuthMode.COOKIE
