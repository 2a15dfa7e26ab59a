"""
Team Management API Routes
Teams are global (not owned by a tournament). Saving a team by a name that
already exists updates that team instead of creating a duplicate.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.team import Team, TeamOrganization
from tournament_hub.models.tournament import ClubLocation
from tournament_hub.services.cascade import delete_team_cascade
from tournament_hub.services.errors import NotFoundError
from tournament_hub.services.registration import save_team
from tournament_hub.services.team_merge import merge_duplicate_teams
from tournament_hub.utils.names import name_sort_key

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class TeamCreateRequest(BaseModel):
    name: str
    organization: TeamOrganization = TeamOrganization.academy_boys
    club_location: Optional[ClubLocation] = None
    home_city: Optional[str] = None
    notes: Optional[str] = None
    coach_names: Optional[List[str]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()


class TeamUpdateRequest(BaseModel):
    name: Optional[str] = None
    organization: Optional[TeamOrganization] = None
    club_location: Optional[ClubLocation] = None
    home_city: Optional[str] = None
    notes: Optional[str] = None
    coach_names: Optional[List[str]] = None


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    organization: str
    club_location: Optional[str] = None
    home_city: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    coach_names: List[str] = []


class MergeResponse(BaseModel):
    merged_groups: int
    deleted_teams: int
    moved_coaches: int
    moved_registrations: int


def _team_response(session: Session, team: Team) -> TeamResponse:
    """Team plus its team-level coach roster (rows without a tournament)"""
    coaches = session.exec(
        select(CoachTravel).where(CoachTravel.team_id == team.id, CoachTravel.tournament_id.is_(None))
    ).all()
    response = TeamResponse.model_validate(team)
    response.coach_names = sorted({c.coach_name for c in coaches}, key=name_sort_key)
    return response


# ============================================================================
# Team CRUD Endpoints
# ============================================================================


@router.get("/teams", response_model=List[TeamResponse])
def get_teams(session: Session = Depends(get_session)):
    """All teams, alphabetical"""
    teams = sorted(session.exec(select(Team)).all(), key=lambda t: name_sort_key(t.name))
    return [_team_response(session, t) for t in teams]


@router.post("/teams", response_model=TeamResponse, status_code=201)
def create_team(team_data: TeamCreateRequest, session: Session = Depends(get_session)):
    """Create a team, or update the existing team with the same name"""
    data = team_data.model_dump(exclude={"coach_names"})
    try:
        team = save_team(session, data, coach_names=team_data.coach_names)
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to save team: {str(e)}")
    return _team_response(session, team)


@router.get("/teams/{team_id}", response_model=TeamResponse)
def get_team(team_id: int, session: Session = Depends(get_session)):
    team = session.get(Team, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return _team_response(session, team)


@router.patch("/teams/{team_id}", response_model=TeamResponse)
def update_team(team_id: int, team_data: TeamUpdateRequest, session: Session = Depends(get_session)):
    data = team_data.model_dump(exclude_unset=True, exclude={"coach_names"})
    if "name" in data:
        if not data["name"] or not data["name"].strip():
            raise HTTPException(status_code=400, detail="name must not be empty")
        data["name"] = data["name"].strip()
    try:
        team = save_team(session, data, team_id=team_id, coach_names=team_data.coach_names)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Team not found")
    return _team_response(session, team)


@router.delete("/teams/{team_id}", status_code=204)
def delete_team(team_id: int, session: Session = Depends(get_session)):
    """Delete a team with its coach rows and registrations"""
    try:
        delete_team_cascade(session, team_id)
        return Response(status_code=204)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Team not found")
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete team: {str(e)}")


@router.post("/teams/merge-duplicates", response_model=MergeResponse)
def merge_duplicates(session: Session = Depends(get_session)):
    """Collapse teams whose names match (trimmed, case-insensitive) into one"""
    try:
        result = merge_duplicate_teams(session)
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to merge teams: {str(e)}")
    return MergeResponse(
        merged_groups=result.merged_groups,
        deleted_teams=result.deleted_teams,
        moved_coaches=result.moved_coaches,
        moved_registrations=result.moved_registrations,
    )
