"""
League Management API Routes
Leagues own an ordered list of age divisions and rounds; a round is created
as one tournament per age division.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.league import DEFAULT_LEAGUE_ROUNDS, League
from tournament_hub.models.tournament import Tournament
from tournament_hub.routes.tournaments import TournamentResponse
from tournament_hub.services.cascade import delete_league
from tournament_hub.services.errors import NotFoundError
from tournament_hub.services.league_rounds import DivisionDates, create_round_tournaments
from tournament_hub.services.tournament_buckets import group_league_rounds, upcoming_league_tournaments

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


def _split_divisions(v):
    """Accept "U12, U14" as well as ["U12", "U14"]."""
    if isinstance(v, str):
        return [d.strip() for d in v.split(",") if d.strip()]
    return [str(d).strip() for d in v if str(d).strip()]


class LeagueCreate(BaseModel):
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    age_divisions: List[str]
    contact_info: Optional[str] = None
    rounds: Optional[List[str]] = None

    @field_validator("age_divisions", mode="before")
    @classmethod
    def validate_age_divisions(cls, v):
        divisions = _split_divisions(v or [])
        if not divisions:
            raise ValueError("age_divisions must not be empty")
        return divisions


class LeagueUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    age_divisions: Optional[List[str]] = None
    contact_info: Optional[str] = None
    rounds: Optional[List[str]] = None

    @field_validator("age_divisions", mode="before")
    @classmethod
    def validate_age_divisions(cls, v):
        if v is None:
            return v
        divisions = _split_divisions(v)
        if not divisions:
            raise ValueError("age_divisions must not be empty")
        return divisions


class LeagueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    age_divisions: List[str]
    contact_info: Optional[str] = None
    rounds: List[str]
    created_at: datetime


class RoundGroupResponse(BaseModel):
    round_name: str
    tournaments: List[TournamentResponse]


class CreateRoundRequest(BaseModel):
    round_name: str
    dates_by_division: Dict[str, DivisionDates]
    date_tentative: bool = False


# ============================================================================
# Endpoints
# ============================================================================


def _get_league_or_404(session: Session, league_id: int) -> League:
    league = session.get(League, league_id)
    if not league:
        raise HTTPException(status_code=404, detail="League not found")
    return league


@router.get("/leagues", response_model=List[LeagueResponse])
def list_leagues(session: Session = Depends(get_session)):
    return session.exec(select(League).order_by(League.created_at.desc())).all()


@router.post("/leagues", response_model=LeagueResponse, status_code=201)
def create_league(request: LeagueCreate, session: Session = Depends(get_session)):
    data = request.model_dump()
    data["rounds"] = data.get("rounds") or list(DEFAULT_LEAGUE_ROUNDS)
    league = League(**data)
    session.add(league)
    session.commit()
    session.refresh(league)
    return league


@router.get("/leagues/{league_id}", response_model=LeagueResponse)
def get_league(league_id: int, session: Session = Depends(get_session)):
    return _get_league_or_404(session, league_id)


@router.patch("/leagues/{league_id}", response_model=LeagueResponse)
def update_league(league_id: int, request: LeagueUpdate, session: Session = Depends(get_session)):
    league = _get_league_or_404(session, league_id)
    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(league, field, value)
    session.add(league)
    session.commit()
    session.refresh(league)
    return league


@router.delete("/leagues/{league_id}", status_code=204)
def remove_league(league_id: int, session: Session = Depends(get_session)):
    try:
        delete_league(session, league_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="League not found")
    return None


@router.get("/leagues/{league_id}/rounds", response_model=List[RoundGroupResponse])
def get_league_rounds(league_id: int, session: Session = Depends(get_session)):
    """League tournaments grouped by round in league order, plus "Unassigned"."""
    league = _get_league_or_404(session, league_id)
    tournaments = session.exec(select(Tournament).where(Tournament.league_id == league_id)).all()
    return [
        RoundGroupResponse(round_name=g.round_name, tournaments=g.tournaments)
        for g in group_league_rounds(league, tournaments)
    ]


@router.post("/leagues/{league_id}/rounds", response_model=List[TournamentResponse], status_code=201)
def create_league_round(league_id: int, request: CreateRoundRequest, session: Session = Depends(get_session)):
    """Create one tournament per age division for a round"""
    league = _get_league_or_404(session, league_id)
    rounds = league.rounds or DEFAULT_LEAGUE_ROUNDS
    if request.round_name not in rounds:
        raise HTTPException(status_code=400, detail=f"Round '{request.round_name}' is not part of this league")
    if not any(d.start_date for d in request.dates_by_division.values()):
        raise HTTPException(status_code=400, detail="At least one age division needs a start_date")

    try:
        return create_round_tournaments(
            session, league_id, request.round_name, request.dates_by_division, request.date_tentative
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/leagues/{league_id}/upcoming", response_model=List[TournamentResponse])
def get_upcoming_league_tournaments(
    league_id: int,
    limit: int = Query(3, ge=1, le=50),
    today: Optional[date] = Query(None),
    session: Session = Depends(get_session),
):
    _get_league_or_404(session, league_id)
    tournaments = session.exec(select(Tournament).where(Tournament.league_id == league_id)).all()
    return upcoming_league_tournaments(tournaments, league_id, today or date.today(), limit=limit)
