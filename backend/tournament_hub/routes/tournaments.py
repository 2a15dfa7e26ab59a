from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.tournament import ClubLocation, GenderFocus, Tournament, TournamentStatus
from tournament_hub.services.cascade import bulk_delete_tournaments, delete_tournament_cascade
from tournament_hub.services.errors import NotFoundError
from tournament_hub.services.tournament_buckets import (
    SORT_OPTIONS,
    bucket_tournaments,
    filter_tournaments,
    housing_alerts,
    housing_status,
    sort_tournaments,
)

router = APIRouter()


class TournamentCreate(BaseModel):
    name: str
    league_id: Optional[int] = None
    round_name: Optional[str] = None
    age_division_focus: Optional[str] = None
    gender_focus: GenderFocus = GenderFocus.boys
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    date_tentative: bool = False
    status: TournamentStatus = TournamentStatus.not_started
    housing_required: bool = True
    stay_play_required: bool = False
    housing_partner: Optional[str] = None
    housing_opens_date: Optional[datetime] = None
    housing_email_sent: bool = False
    housing_notes: Optional[str] = None
    contact_info: Optional[str] = None
    stay_play_requirements: Optional[str] = None
    club_location: Optional[ClubLocation] = None
    league_home_alert_complete: bool = False
    preferred_airport: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        return self


class TournamentUpdate(BaseModel):
    name: Optional[str] = None
    league_id: Optional[int] = None
    round_name: Optional[str] = None
    age_division_focus: Optional[str] = None
    gender_focus: Optional[GenderFocus] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    date_tentative: Optional[bool] = None
    status: Optional[TournamentStatus] = None
    housing_required: Optional[bool] = None
    stay_play_required: Optional[bool] = None
    housing_partner: Optional[str] = None
    housing_opens_date: Optional[datetime] = None
    housing_email_sent: Optional[bool] = None
    housing_notes: Optional[str] = None
    contact_info: Optional[str] = None
    stay_play_requirements: Optional[str] = None
    club_location: Optional[ClubLocation] = None
    league_home_alert_complete: Optional[bool] = None
    preferred_airport: Optional[str] = None

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        return self


class TournamentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    league_id: Optional[int] = None
    round_name: Optional[str] = None
    age_division_focus: Optional[str] = None
    gender_focus: str
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    date_tentative: bool
    status: str
    housing_required: bool
    stay_play_required: bool
    housing_partner: Optional[str] = None
    housing_opens_date: Optional[datetime] = None
    housing_email_sent: bool
    housing_notes: Optional[str] = None
    contact_info: Optional[str] = None
    stay_play_requirements: Optional[str] = None
    club_location: Optional[str] = None
    league_home_alert_complete: bool
    preferred_airport: Optional[str] = None
    created_at: datetime


class TournamentBucketsResponse(BaseModel):
    upcoming: List[TournamentResponse]
    this_month: List[TournamentResponse]
    past: List[TournamentResponse]
    boys_by_age: Dict[str, List[TournamentResponse]]
    girls_by_age: Dict[str, List[TournamentResponse]]


class StayPlayEntry(BaseModel):
    tournament: TournamentResponse
    housing_status: Optional[str] = None
    needs_email_alert: bool


class BulkDeleteRequest(BaseModel):
    tournament_ids: List[int]


class BulkDeleteResponse(BaseModel):
    deleted: int


def _validate_sort(sort_by: str) -> str:
    if sort_by not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"sort_by must be one of {', '.join(SORT_OPTIONS)}")
    return sort_by


@router.get("/tournaments", response_model=List[TournamentResponse])
def list_tournaments(
    sort_by: str = Query("date-asc"),
    search: Optional[str] = Query(None),
    show_no_housing: bool = Query(False, description="Include tournaments that don't require housing"),
    league_id: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    """List tournaments with the housing filter, search and sort applied"""
    _validate_sort(sort_by)
    query = select(Tournament)
    if league_id is not None:
        query = query.where(Tournament.league_id == league_id)
    tournaments = session.exec(query).all()
    filtered = filter_tournaments(tournaments, show_no_housing=show_no_housing, search=search)
    return sort_tournaments(filtered, sort_by)


@router.get("/tournaments/buckets", response_model=TournamentBucketsResponse)
def get_tournament_buckets(
    sort_by: str = Query("date-asc"),
    search: Optional[str] = Query(None),
    show_no_housing: bool = Query(False),
    today: Optional[date] = Query(None, description="Override the current date (defaults to today)"),
    session: Session = Depends(get_session),
):
    """
    Upcoming / this month / past buckets plus boys and girls tournaments by age
    division. League tournaments are excluded from every bucket.
    """
    _validate_sort(sort_by)
    tournaments = session.exec(select(Tournament)).all()
    ordered = sort_tournaments(filter_tournaments(tournaments, show_no_housing, search), sort_by)
    buckets = bucket_tournaments(ordered, today or date.today())
    return TournamentBucketsResponse(
        upcoming=buckets.upcoming,
        this_month=buckets.this_month,
        past=buckets.past,
        boys_by_age=buckets.boys_by_age,
        girls_by_age=buckets.girls_by_age,
    )


@router.get("/stay-and-play", response_model=List[StayPlayEntry])
def list_stay_and_play(session: Session = Depends(get_session)):
    """Tournaments that require Stay & Play, with housing status and email alerts"""
    tournaments = session.exec(select(Tournament).where(Tournament.stay_play_required == True)).all()  # noqa: E712
    now = datetime.now()
    alert_ids = {t.id for t in housing_alerts(tournaments, now)}
    return [
        StayPlayEntry(
            tournament=TournamentResponse.model_validate(t),
            housing_status=housing_status(t, now),
            needs_email_alert=t.id in alert_ids,
        )
        for t in sort_tournaments(tournaments, "date-asc")
    ]


@router.get("/stay-and-play/alerts", response_model=List[TournamentResponse])
def list_housing_alerts(session: Session = Depends(get_session)):
    """Housing opens within the alert window and the email has not gone out"""
    tournaments = session.exec(select(Tournament).where(Tournament.stay_play_required == True)).all()  # noqa: E712
    return sort_tournaments(housing_alerts(tournaments, datetime.now()), "date-asc")


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(tournament_data: TournamentCreate, session: Session = Depends(get_session)):
    """Create a new tournament"""
    tournament = Tournament(**tournament_data.model_dump())
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
def get_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """Get a tournament by ID"""
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament


@router.put("/tournaments/{tournament_id}", response_model=TournamentResponse)
def update_tournament(tournament_id: int, tournament_data: TournamentUpdate, session: Session = Depends(get_session)):
    """Update only the fields that were sent"""
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    update_data = tournament_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(tournament, field, value)

    if tournament.start_date and tournament.end_date and tournament.end_date < tournament.start_date:
        session.rollback()
        raise HTTPException(status_code=400, detail="end_date must be >= start_date")

    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@router.post("/tournaments/{tournament_id}/housing-email-sent", response_model=TournamentResponse)
def mark_housing_email_sent(tournament_id: int, session: Session = Depends(get_session)):
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    tournament.housing_email_sent = True
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@router.delete("/tournaments/{tournament_id}", status_code=204)
def delete_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """Delete a tournament with its teams, coaches, rooms, reminders and transactions"""
    try:
        delete_tournament_cascade(session, tournament_id)
        return Response(status_code=204)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Tournament not found")
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete tournament: {str(e)}")


@router.post("/tournaments/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete(request: BulkDeleteRequest, session: Session = Depends(get_session)):
    """Cascade-delete several tournaments; returns how many were removed"""
    try:
        deleted = bulk_delete_tournaments(session, request.tournament_ids)
        return BulkDeleteResponse(deleted=deleted)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete tournaments: {str(e)}")
