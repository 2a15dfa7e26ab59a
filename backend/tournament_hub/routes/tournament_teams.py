from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.tournament import Tournament
from tournament_hub.models.tournament_team import RegistrationStatus, TournamentTeam
from tournament_hub.services.errors import ConflictError, NotFoundError
from tournament_hub.services.registration import register_teams

router = APIRouter()


class RegistrationRequest(BaseModel):
    team_ids: List[int]
    age_division_playing: Optional[str] = None
    team_location: Optional[str] = None
    roster_url: Optional[str] = None
    registration_status: RegistrationStatus = RegistrationStatus.registered
    notes: Optional[str] = None


class RegistrationUpdate(BaseModel):
    age_division_playing: Optional[str] = None
    team_location: Optional[str] = None
    roster_url: Optional[str] = None
    registration_status: Optional[RegistrationStatus] = None
    notes: Optional[str] = None


class RegistrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    team_id: int
    age_division_playing: Optional[str] = None
    team_location: Optional[str] = None
    roster_url: Optional[str] = None
    registration_status: str
    notes: Optional[str] = None
    created_at: datetime


@router.get("/tournaments/{tournament_id}/teams", response_model=List[RegistrationResponse])
def list_registrations(tournament_id: int, session: Session = Depends(get_session)):
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    return session.exec(
        select(TournamentTeam).where(TournamentTeam.tournament_id == tournament_id).order_by(TournamentTeam.id)
    ).all()


@router.post("/tournaments/{tournament_id}/teams", response_model=List[RegistrationResponse], status_code=201)
def register_tournament_teams(
    tournament_id: int, request: RegistrationRequest, session: Session = Depends(get_session)
):
    """
    Register one or more teams. Each team's known coaches get a fresh travel
    record for this tournament.
    """
    if not request.team_ids:
        raise HTTPException(status_code=400, detail="team_ids must not be empty")
    try:
        return register_teams(
            session,
            tournament_id,
            request.team_ids,
            age_division_playing=request.age_division_playing,
            team_location=request.team_location,
            roster_url=request.roster_url,
            registration_status=request.registration_status,
            notes=request.notes,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/tournament-teams/{registration_id}", response_model=RegistrationResponse)
def update_registration(registration_id: int, request: RegistrationUpdate, session: Session = Depends(get_session)):
    registration = session.get(TournamentTeam, registration_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(registration, field, value)
    session.add(registration)
    session.commit()
    session.refresh(registration)
    return registration


@router.delete("/tournament-teams/{registration_id}", status_code=204)
def delete_registration(registration_id: int, session: Session = Depends(get_session)):
    """Remove a registration; the team's coach travel rows stay"""
    registration = session.get(TournamentTeam, registration_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    session.delete(registration)
    session.commit()
    return None
