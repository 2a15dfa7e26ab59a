"""
Coach Travel API Routes
A coach is every CoachTravel row sharing a coach_name; the grouped view
rolls those rows up per name.
"""
import logging
from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.team import Team
from tournament_hub.models.tournament import Tournament
from tournament_hub.services.coach_grouping import group_coaches
from tournament_hub.services.errors import NotFoundError
from tournament_hub.services.finance_sync import update_coach_travel
from tournament_hub.services.room_occupancy import set_no_roommate_needed, strip_coaches_from_rooms
from tournament_hub.utils.names import name_sort_key

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class CoachCreate(BaseModel):
    coach_name: str
    tournament_id: Optional[int] = None
    team_id: Optional[int] = None
    gender: Optional[str] = None
    preferred_airport: Optional[str] = None
    flight_booked: bool = False
    hotel_booked: bool = False
    travel_complete: bool = False
    attendance_confirmed: bool = False
    flight_confirmation: Optional[str] = None
    hotel_confirmation: Optional[str] = None
    flight_cost: float = 0
    hotel_cost: float = 0
    rooming_notes: Optional[str] = None
    notes: Optional[str] = None
    no_roommate_needed: bool = False

    @field_validator("coach_name")
    @classmethod
    def validate_coach_name(cls, v):
        if not v or not v.strip():
            raise ValueError("coach_name is required")
        return v.strip()


class CoachUpdate(BaseModel):
    """Partial update. Costs are loose: "", None or junk count as 0."""

    coach_name: Optional[str] = None
    team_id: Optional[int] = None
    gender: Optional[str] = None
    preferred_airport: Optional[str] = None
    flight_booked: Optional[bool] = None
    hotel_booked: Optional[bool] = None
    travel_complete: Optional[bool] = None
    attendance_confirmed: Optional[bool] = None
    flight_confirmation: Optional[str] = None
    hotel_confirmation: Optional[str] = None
    flight_cost: Union[float, str, None] = None
    hotel_cost: Union[float, str, None] = None
    rooming_notes: Optional[str] = None
    notes: Optional[str] = None
    no_roommate_needed: Optional[bool] = None


class CoachResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: Optional[int] = None
    team_id: Optional[int] = None
    coach_name: str
    gender: Optional[str] = None
    preferred_airport: Optional[str] = None
    flight_booked: bool
    hotel_booked: bool
    travel_complete: bool
    attendance_confirmed: bool
    flight_confirmation: Optional[str] = None
    hotel_confirmation: Optional[str] = None
    flight_cost: float
    hotel_cost: float
    rooming_notes: Optional[str] = None
    notes: Optional[str] = None
    no_roommate_needed: bool
    created_at: datetime


class NamedRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CoachGroupResponse(BaseModel):
    name: str
    teams: List[NamedRef]
    tournaments: List[NamedRef]
    records: List[CoachResponse]
    notes: str
    gender: str
    preferred_airport: str


class NoRoommateRequest(BaseModel):
    no_roommate_needed: bool = True


class DeleteCountResponse(BaseModel):
    deleted: int


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/coaches", response_model=List[CoachResponse])
def list_coaches(
    tournament_id: Optional[int] = Query(None),
    team_id: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    query = select(CoachTravel)
    if tournament_id is not None:
        query = query.where(CoachTravel.tournament_id == tournament_id)
    if team_id is not None:
        query = query.where(CoachTravel.team_id == team_id)
    coaches = session.exec(query).all()
    return sorted(coaches, key=lambda c: (name_sort_key(c.coach_name), c.id))


@router.get("/coaches/grouped", response_model=List[CoachGroupResponse])
def get_grouped_coaches(session: Session = Depends(get_session)):
    """One entry per coach name with the teams and tournaments it appears in"""
    groups = group_coaches(
        session.exec(select(CoachTravel).order_by(CoachTravel.id)).all(),
        session.exec(select(Team)).all(),
        session.exec(select(Tournament)).all(),
    )
    return [
        CoachGroupResponse(
            name=g.name,
            teams=[NamedRef.model_validate(t) for t in g.teams],
            tournaments=[NamedRef.model_validate(t) for t in g.tournaments],
            records=[CoachResponse.model_validate(r) for r in g.records],
            notes=g.notes,
            gender=g.gender,
            preferred_airport=g.preferred_airport,
        )
        for g in groups
    ]


@router.post("/coaches", response_model=CoachResponse, status_code=201)
def create_coach(coach_data: CoachCreate, session: Session = Depends(get_session)):
    if coach_data.tournament_id is not None and not session.get(Tournament, coach_data.tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    if coach_data.team_id is not None and not session.get(Team, coach_data.team_id):
        raise HTTPException(status_code=404, detail="Team not found")

    coach = CoachTravel(**coach_data.model_dump())
    session.add(coach)
    session.commit()
    session.refresh(coach)
    return coach


@router.get("/coaches/{coach_id}", response_model=CoachResponse)
def get_coach(coach_id: int, session: Session = Depends(get_session)):
    coach = session.get(CoachTravel, coach_id)
    if not coach:
        raise HTTPException(status_code=404, detail="Coach not found")
    return coach


@router.patch("/coaches/{coach_id}", response_model=CoachResponse)
def update_coach(coach_id: int, coach_data: CoachUpdate, session: Session = Depends(get_session)):
    """
    Partial update. Changing a flight/hotel cost or booked flag keeps the
    matching finance transaction in step.
    """
    changes = coach_data.model_dump(exclude_unset=True)
    if "coach_name" in changes and not (changes["coach_name"] or "").strip():
        raise HTTPException(status_code=400, detail="coach_name must not be empty")
    try:
        return update_coach_travel(session, coach_id, changes)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Coach not found")
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to update coach: {str(e)}")


@router.post("/coaches/{coach_id}/no-roommate", response_model=CoachResponse)
def mark_no_roommate(coach_id: int, request: NoRoommateRequest, session: Session = Depends(get_session)):
    try:
        return set_no_roommate_needed(session, coach_id, request.no_roommate_needed)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Coach not found")


@router.delete("/coaches/by-name/{coach_name}", response_model=DeleteCountResponse)
def delete_coach_by_name(coach_name: str, session: Session = Depends(get_session)):
    """Delete every record for this exact coach name"""
    coaches = session.exec(select(CoachTravel).where(CoachTravel.coach_name == coach_name)).all()
    if not coaches:
        raise HTTPException(status_code=404, detail="Coach not found")
    strip_coaches_from_rooms(session, {c.id for c in coaches})
    for coach in coaches:
        session.delete(coach)
    session.commit()
    logger.info(f"Deleted {len(coaches)} record(s) for coach {coach_name}")
    return DeleteCountResponse(deleted=len(coaches))


@router.delete("/coaches/{coach_id}", status_code=204)
def delete_coach(coach_id: int, session: Session = Depends(get_session)):
    coach = session.get(CoachTravel, coach_id)
    if not coach:
        raise HTTPException(status_code=404, detail="Coach not found")
    strip_coaches_from_rooms(session, {coach_id})
    session.delete(coach)
    session.commit()
    return None
