from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel

DEFAULT_LEAGUE_ROUNDS = ["League Qualifier", "League 1", "League 2", "League 3", "Regionals"]


class League(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # Ordered; order drives display of divisions and rounds
    age_divisions: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    contact_info: Optional[str] = None
    rounds: List[str] = Field(default_factory=lambda: list(DEFAULT_LEAGUE_ROUNDS), sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)
