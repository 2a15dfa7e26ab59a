from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class CoachTravel(SQLModel, table=True):
    """One coach's involvement in one tournament/team context.

    A coach is not an entity of its own: rows sharing the same coach_name
    string make up "the coach". tournament_id is null for team-level rows
    maintained from team management.
    """

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: Optional[int] = Field(default=None, foreign_key="tournament.id", index=True)
    team_id: Optional[int] = Field(default=None, foreign_key="team.id", index=True)
    coach_name: str = Field(index=True)
    gender: Optional[str] = None
    preferred_airport: Optional[str] = None

    flight_booked: bool = Field(default=False)
    hotel_booked: bool = Field(default=False)
    travel_complete: bool = Field(default=False)
    attendance_confirmed: bool = Field(default=False)
    flight_confirmation: Optional[str] = None
    hotel_confirmation: Optional[str] = None
    flight_cost: float = Field(default=0)
    hotel_cost: float = Field(default=0)

    rooming_notes: Optional[str] = None
    notes: Optional[str] = None
    no_roommate_needed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
