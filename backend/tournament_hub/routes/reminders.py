from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.action_reminder import ActionReminder, ReminderStatus
from tournament_hub.models.tournament import Tournament

router = APIRouter()


class ReminderCreate(BaseModel):
    description: str
    due_date: Optional[date] = None
    status: ReminderStatus = ReminderStatus.to_do
    notes: Optional[str] = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if not v or not v.strip():
            raise ValueError("description is required")
        return v.strip()


class ReminderUpdate(BaseModel):
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[ReminderStatus] = None
    notes: Optional[str] = None


class ReminderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    description: str
    due_date: Optional[date] = None
    status: str
    notes: Optional[str] = None


@router.get("/tournaments/{tournament_id}/reminders", response_model=List[ReminderResponse])
def list_reminders(tournament_id: int, session: Session = Depends(get_session)):
    """Reminders for a tournament, latest due date first (undated last)"""
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    reminders = session.exec(select(ActionReminder).where(ActionReminder.tournament_id == tournament_id)).all()
    dated = sorted((r for r in reminders if r.due_date), key=lambda r: r.due_date, reverse=True)
    return dated + [r for r in reminders if not r.due_date]


@router.post("/tournaments/{tournament_id}/reminders", response_model=ReminderResponse, status_code=201)
def create_reminder(tournament_id: int, request: ReminderCreate, session: Session = Depends(get_session)):
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    reminder = ActionReminder(tournament_id=tournament_id, **request.model_dump())
    session.add(reminder)
    session.commit()
    session.refresh(reminder)
    return reminder


@router.patch("/reminders/{reminder_id}", response_model=ReminderResponse)
def update_reminder(reminder_id: int, request: ReminderUpdate, session: Session = Depends(get_session)):
    reminder = session.get(ActionReminder, reminder_id)
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")
    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(reminder, field, value)
    session.add(reminder)
    session.commit()
    session.refresh(reminder)
    return reminder


@router.delete("/reminders/{reminder_id}", status_code=204)
def delete_reminder(reminder_id: int, session: Session = Depends(get_session)):
    reminder = session.get(ActionReminder, reminder_id)
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")
    session.delete(reminder)
    session.commit()
    return None
