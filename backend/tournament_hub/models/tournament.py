from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlmodel import Column, Field, SQLModel


class TournamentStatus(str, Enum):
    not_started = "Not Started"
    in_progress = "In Progress"
    complete = "Complete"


class GenderFocus(str, Enum):
    boys = "Boys"
    girls = "Girls"
    mixed = "Mixed"


class ClubLocation(str, Enum):
    north = "North"
    west = "West"


class Tournament(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    league_id: Optional[int] = Field(default=None, foreign_key="league.id", index=True)
    round_name: Optional[str] = None
    age_division_focus: Optional[str] = None
    gender_focus: GenderFocus = Field(default=GenderFocus.boys, sa_column=Column(String))
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    date_tentative: bool = Field(default=False)
    status: TournamentStatus = Field(default=TournamentStatus.not_started, sa_column=Column(String))

    # Housing / Stay & Play
    housing_required: bool = Field(default=True)
    stay_play_required: bool = Field(default=False)
    housing_partner: Optional[str] = None
    housing_opens_date: Optional[datetime] = None
    housing_email_sent: bool = Field(default=False)
    housing_notes: Optional[str] = None
    contact_info: Optional[str] = None
    stay_play_requirements: Optional[str] = None

    club_location: Optional[str] = None  # North | West
    league_home_alert_complete: bool = Field(default=False)
    preferred_airport: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
