"""
Rooming API Routes
Room CRUD, the rooming board and occupant moves.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.room import DEFAULT_ROOM_TYPE, Room
from tournament_hub.models.tournament import Tournament
from tournament_hub.routes.coaches import CoachResponse
from tournament_hub.routes.tournaments import TournamentResponse
from tournament_hub.services.errors import NotFoundError
from tournament_hub.services.room_occupancy import (
    RoomingError,
    TournamentRooming,
    assign_coach_to_room,
    claim_occupants,
    resolve_rooming,
    room_coaches_together,
    unassign_coach,
    unassigned_travelers,
)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class RoomCreate(BaseModel):
    room_number: str
    hotel: str
    room_type: str = DEFAULT_ROOM_TYPE
    cost_per_night: float = 0
    nights: int = 0
    occupants: List[int] = []


class RoomUpdate(BaseModel):
    room_number: Optional[str] = None
    hotel: Optional[str] = None
    room_type: Optional[str] = None
    cost_per_night: Optional[float] = None
    nights: Optional[int] = None


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    room_number: str
    hotel: str
    room_type: str
    cost_per_night: float
    nights: int
    occupants: List[int]


class OccupantRequest(BaseModel):
    coach_id: int


class RoomTogetherRequest(BaseModel):
    coach_ids: List[int]
    room_number: Optional[str] = None
    hotel: Optional[str] = None


class RoomGroupResponse(BaseModel):
    room: RoomResponse
    coaches: List[CoachResponse]


class TournamentRoomingResponse(BaseModel):
    tournament: TournamentResponse
    room_groups: List[RoomGroupResponse]
    unassigned_coaches: List[CoachResponse]
    no_roommate_coaches: List[CoachResponse]
    all_complete: bool
    total_coaches: int


class RoomingBoardResponse(BaseModel):
    active: List[TournamentRoomingResponse]
    completed: List[TournamentRoomingResponse]


def _rooming_response(entry: TournamentRooming) -> TournamentRoomingResponse:
    return TournamentRoomingResponse(
        tournament=TournamentResponse.model_validate(entry.tournament),
        room_groups=[
            RoomGroupResponse(
                room=RoomResponse.model_validate(g.room),
                coaches=[CoachResponse.model_validate(c) for c in g.coaches],
            )
            for g in entry.room_groups
        ],
        unassigned_coaches=[CoachResponse.model_validate(c) for c in entry.unassigned_coaches],
        no_roommate_coaches=[CoachResponse.model_validate(c) for c in entry.no_roommate_coaches],
        all_complete=entry.all_complete,
        total_coaches=entry.total_coaches,
    )


def _get_room_or_404(session: Session, room_id: int) -> Room:
    room = session.get(Room, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


# ============================================================================
# Board
# ============================================================================


@router.get("/rooming", response_model=RoomingBoardResponse)
def get_rooming_board(tournament_id: Optional[int] = Query(None), session: Session = Depends(get_session)):
    """
    Rooming board split into active and completed tournaments.

    Without tournament_id, tournaments with no travelling coaches are omitted.
    """
    if tournament_id is not None and not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    board = resolve_rooming(
        session.exec(select(CoachTravel)).all(),
        session.exec(select(Tournament)).all(),
        session.exec(select(Room)).all(),
        tournament_id=tournament_id,
    )
    return RoomingBoardResponse(
        active=[_rooming_response(e) for e in board.active],
        completed=[_rooming_response(e) for e in board.completed],
    )


@router.get("/rooming/unassigned", response_model=List[CoachResponse])
def get_unassigned_travelers(tournament_id: Optional[int] = Query(None), session: Session = Depends(get_session)):
    """Coaches with a flight or hotel booked who still need a room"""
    query = select(CoachTravel)
    if tournament_id is not None:
        query = query.where(CoachTravel.tournament_id == tournament_id)
    return unassigned_travelers(session.exec(query).all(), session.exec(select(Room)).all())


# ============================================================================
# Room CRUD
# ============================================================================


@router.get("/tournaments/{tournament_id}/rooms", response_model=List[RoomResponse])
def list_rooms(tournament_id: int, session: Session = Depends(get_session)):
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    rooms = session.exec(select(Room).where(Room.tournament_id == tournament_id)).all()
    return sorted(rooms, key=lambda r: r.room_number or "")


@router.post("/tournaments/{tournament_id}/rooms", response_model=RoomResponse, status_code=201)
def create_room(tournament_id: int, room_data: RoomCreate, session: Session = Depends(get_session)):
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    data = room_data.model_dump()
    try:
        data["occupants"] = claim_occupants(session, tournament_id, data["occupants"])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RoomingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    room = Room(tournament_id=tournament_id, **data)
    session.add(room)
    session.commit()
    session.refresh(room)
    return room


@router.post("/tournaments/{tournament_id}/rooms/together", response_model=RoomResponse, status_code=201)
def create_room_together(tournament_id: int, request: RoomTogetherRequest, session: Session = Depends(get_session)):
    """New room holding exactly these coaches; they leave any room they were in"""
    try:
        return room_coaches_together(
            session, tournament_id, request.coach_ids, room_number=request.room_number, hotel=request.hotel
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RoomingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/rooms/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, session: Session = Depends(get_session)):
    return _get_room_or_404(session, room_id)


@router.patch("/rooms/{room_id}", response_model=RoomResponse)
def update_room(room_id: int, room_data: RoomUpdate, session: Session = Depends(get_session)):
    """Room details only; occupants change through the occupant endpoints"""
    room = _get_room_or_404(session, room_id)
    for field, value in room_data.model_dump(exclude_unset=True).items():
        setattr(room, field, value)
    session.add(room)
    session.commit()
    session.refresh(room)
    return room


@router.delete("/rooms/{room_id}", status_code=204)
def delete_room(room_id: int, session: Session = Depends(get_session)):
    room = _get_room_or_404(session, room_id)
    session.delete(room)
    session.commit()
    return None


# ============================================================================
# Occupants
# ============================================================================


@router.post("/rooms/{room_id}/occupants", response_model=RoomResponse)
def add_occupant(room_id: int, request: OccupantRequest, session: Session = Depends(get_session)):
    """Move a coach into this room (removing it from any other room)"""
    try:
        return assign_coach_to_room(session, request.coach_id, room_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RoomingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/rooms/{room_id}/occupants/{coach_id}", response_model=RoomResponse)
def remove_occupant(room_id: int, coach_id: int, session: Session = Depends(get_session)):
    try:
        return unassign_coach(session, room_id, coach_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
