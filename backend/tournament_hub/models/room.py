from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel

DEFAULT_ROOM_TYPE = "2 Beds"


class Room(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    room_number: str
    hotel: str
    room_type: str = Field(default=DEFAULT_ROOM_TYPE)
    cost_per_night: float = Field(default=0)
    nights: int = Field(default=0)
    # CoachTravel ids; a coach id belongs to at most one room per tournament.
    # Always reassign a new list, JSON columns do not track in-place mutation.
    occupants: List[int] = Field(default_factory=list, sa_column=Column(JSON))
