from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlmodel import Column, Field, SQLModel


class TeamOrganization(str, Enum):
    academy_boys = "Academy Boys"
    academy_girls = "Academy Girls"
    academy_girls_elite = "Academy Girls Elite"
    other = "Other"


class Team(SQLModel, table=True):
    # Global namespace: a team is not owned by any tournament
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    organization: TeamOrganization = Field(default=TeamOrganization.academy_boys, sa_column=Column(String))
    club_location: Optional[str] = None  # North | West
    home_city: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
