from datetime import date
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlmodel import Column, Field, SQLModel


class ReminderStatus(str, Enum):
    to_do = "To Do"
    in_progress = "In Progress"
    done = "Done"


class ActionReminder(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    description: str
    due_date: Optional[date] = None
    status: ReminderStatus = Field(default=ReminderStatus.to_do, sa_column=Column(String))
    notes: Optional[str] = None
