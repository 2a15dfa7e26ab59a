from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlmodel import Column, Field, SQLModel


class RegistrationStatus(str, Enum):
    registered = "Registered"
    waitlisted = "Waitlisted"
    paid = "Paid"
    confirmed = "Confirmed"


class TournamentTeam(SQLModel, table=True):
    """A team's registration for one tournament.

    At most one row per (tournament_id, team_id); enforced by the registration
    route rather than a constraint so that team merges can move rows freely.
    """

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    age_division_playing: Optional[str] = None
    team_location: Optional[str] = None
    roster_url: Optional[str] = None
    registration_status: RegistrationStatus = Field(
        default=RegistrationStatus.registered, sa_column=Column(String)
    )
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
