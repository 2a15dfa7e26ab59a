import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlmodel import Column, Field, SQLModel


class TransactionCategory(str, Enum):
    hotel = "Hotel"
    flight = "Flight"
    meals = "Meals"
    misc = "Misc"


class FinanceTransaction(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    team_id: Optional[int] = Field(default=None, foreign_key="team.id")
    category: TransactionCategory = Field(default=TransactionCategory.misc, sa_column=Column(String))
    description: str
    amount: float = Field(default=0)
    date: datetime.date
    notes: Optional[str] = None
