"""
Rooming board and room assignment.

Board (pure):
  For each tournament, the travel-relevant coaches (flight booked, hotel
  booked, or attendance confirmed) are partitioned into
    - room_groups:          coaches listed in a room's occupants
    - unassigned_coaches:   not in any room, roommate still needed
    - no_roommate_coaches:  flagged no_roommate_needed
  and the tournament is "complete" when it has at least one relevant coach
  and all of them have travel_complete.

Assignment (session-bound):
  Room.occupants is a full-array replacement on every write. Moving a coach
  is two writes (remove from old room, add to new room) with no lock, so
  concurrent edits are last-writer-wins.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from sqlmodel import Session, select

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.room import DEFAULT_ROOM_TYPE, Room
from tournament_hub.models.tournament import Tournament
from tournament_hub.services.errors import NotFoundError
from tournament_hub.utils.names import name_sort_key

logger = logging.getLogger(__name__)

DEFAULT_HOTEL = "Tournament Hotel"


class RoomingError(Exception):
    """Raised when a room assignment request is invalid"""


# ============================================================================
# Board
# ============================================================================


@dataclass
class RoomGroup:
    room: Room
    coaches: List[CoachTravel] = field(default_factory=list)


@dataclass
class TournamentRooming:
    tournament: Tournament
    room_groups: List[RoomGroup] = field(default_factory=list)
    unassigned_coaches: List[CoachTravel] = field(default_factory=list)
    no_roommate_coaches: List[CoachTravel] = field(default_factory=list)
    all_complete: bool = False
    total_coaches: int = 0


@dataclass
class RoomingBoard:
    active: List[TournamentRooming] = field(default_factory=list)
    completed: List[TournamentRooming] = field(default_factory=list)


def is_travel_relevant(coach: CoachTravel) -> bool:
    return bool(coach.flight_booked or coach.hotel_booked or coach.attendance_confirmed)


def _coach_key(coach: CoachTravel):
    return name_sort_key(coach.coach_name)


def _start_date_key(tournament: Tournament):
    # Missing start dates sort last
    return (tournament.start_date is None, tournament.start_date or 0)


def find_room_for_coach(rooms: Iterable[Room], coach_id: int) -> Optional[Room]:
    for room in rooms:
        if coach_id in (room.occupants or []):
            return room
    return None


def build_tournament_rooming(
    tournament: Tournament, coaches: Sequence[CoachTravel], rooms: Sequence[Room]
) -> TournamentRooming:
    """Partition one tournament's relevant coaches. `coaches` must already be filtered."""
    tournament_rooms = [r for r in rooms if r.tournament_id == tournament.id]

    groups_by_room: Dict[int, RoomGroup] = {}
    unassigned: List[CoachTravel] = []
    no_roommate: List[CoachTravel] = []

    for coach in coaches:
        if coach.no_roommate_needed:
            no_roommate.append(coach)
            continue
        room = find_room_for_coach(tournament_rooms, coach.id)
        if room is None:
            unassigned.append(coach)
            continue
        if room.id not in groups_by_room:
            groups_by_room[room.id] = RoomGroup(room=room)
        groups_by_room[room.id].coaches.append(coach)

    room_groups = list(groups_by_room.values())
    for group in room_groups:
        group.coaches.sort(key=_coach_key)
    room_groups.sort(key=lambda g: g.room.room_number or "")

    unassigned.sort(key=_coach_key)
    no_roommate.sort(key=_coach_key)

    all_complete = len(coaches) > 0 and all(c.travel_complete for c in coaches)

    return TournamentRooming(
        tournament=tournament,
        room_groups=room_groups,
        unassigned_coaches=unassigned,
        no_roommate_coaches=no_roommate,
        all_complete=all_complete,
        total_coaches=sum(len(g.coaches) for g in room_groups) + len(unassigned) + len(no_roommate),
    )


def resolve_rooming(
    coaches: Sequence[CoachTravel],
    tournaments: Sequence[Tournament],
    rooms: Sequence[Room],
    tournament_id: Optional[int] = None,
) -> RoomingBoard:
    """
    Build the rooming board, tournaments ordered by start date (undated last).

    Without a tournament filter, tournaments with no relevant coaches are
    left off the board. With a filter, that tournament is always reported.
    """
    relevant = [c for c in coaches if is_travel_relevant(c)]
    selected = list(tournaments)
    if tournament_id is not None:
        selected = [t for t in selected if t.id == tournament_id]
        relevant = [c for c in relevant if c.tournament_id == tournament_id]

    coaches_by_tournament: Dict[int, List[CoachTravel]] = {}
    for coach in relevant:
        coaches_by_tournament.setdefault(coach.tournament_id, []).append(coach)

    board = RoomingBoard()
    for tournament in sorted(selected, key=_start_date_key):
        entry = build_tournament_rooming(tournament, coaches_by_tournament.get(tournament.id, []), rooms)
        if entry.total_coaches == 0 and tournament_id is None:
            continue
        if entry.all_complete:
            board.completed.append(entry)
        else:
            board.active.append(entry)
    return board


def unassigned_travelers(coaches: Sequence[CoachTravel], rooms: Sequence[Room]) -> List[CoachTravel]:
    """Coaches with a flight or hotel booked who still need a room."""
    return [
        c
        for c in coaches
        if (c.flight_booked or c.hotel_booked)
        and not c.no_roommate_needed
        and find_room_for_coach(rooms, c.id) is None
    ]


# ============================================================================
# Assignment operations
# ============================================================================


def _get_room(session: Session, room_id: int) -> Room:
    room = session.get(Room, room_id)
    if not room:
        raise NotFoundError(f"Room {room_id} not found")
    return room


def _get_coach(session: Session, coach_id: int) -> CoachTravel:
    coach = session.get(CoachTravel, coach_id)
    if not coach:
        raise NotFoundError(f"Coach travel record {coach_id} not found")
    return coach


def _save_occupants(session: Session, room: Room, occupants: List[int]) -> None:
    room.occupants = list(occupants)
    session.add(room)
    session.commit()
    session.refresh(room)


def _remove_from_rooms(session: Session, rooms: Sequence[Room], coach_ids: set) -> int:
    """Strip coach_ids from every room that lists them. Returns rooms written."""
    written = 0
    for room in rooms:
        before = list(room.occupants or [])
        after = [cid for cid in before if cid not in coach_ids]
        if len(after) != len(before):
            _save_occupants(session, room, after)
            written += 1
    return written


def strip_coaches_from_rooms(session: Session, coach_ids: Iterable[int]) -> int:
    """
    Drop coach ids from every room's occupant list ahead of deleting those
    coach rows. Changes are staged on the session; the caller commits.
    """
    doomed = set(coach_ids)
    if not doomed:
        return 0
    touched = 0
    for room in session.exec(select(Room)).all():
        occupants = [cid for cid in (room.occupants or []) if cid not in doomed]
        if len(occupants) != len(room.occupants or []):
            room.occupants = occupants
            session.add(room)
            touched += 1
    return touched


def claim_occupants(session: Session, tournament_id: int, coach_ids: Sequence[int]) -> List[int]:
    """
    Prepare the occupant list for a room being created in tournament_id.

    Each coach must exist and must not belong to another tournament; any room
    already holding one of them lets it go. Returns the ids deduplicated in
    order. Changes are staged on the session; the caller commits.
    """
    unique_ids = list(dict.fromkeys(coach_ids))
    for coach_id in unique_ids:
        coach = _get_coach(session, coach_id)
        if coach.tournament_id is not None and coach.tournament_id != tournament_id:
            raise RoomingError(
                f"Coach {coach_id} belongs to tournament {coach.tournament_id}, not {tournament_id}"
            )
    strip_coaches_from_rooms(session, unique_ids)
    return unique_ids


def assign_coach_to_room(session: Session, coach_id: int, room_id: int) -> Room:
    """
    Move a coach into a room.

    Step 1 removes the coach from any other room holding it; step 2 adds it to
    the target room (no duplicate if already there). Returns the target room.
    """
    target = _get_room(session, room_id)
    coach = _get_coach(session, coach_id)

    if coach.tournament_id is not None and coach.tournament_id != target.tournament_id:
        raise RoomingError(
            f"Coach {coach_id} belongs to tournament {coach.tournament_id}, "
            f"room {room_id} belongs to tournament {target.tournament_id}"
        )

    others = session.exec(select(Room).where(Room.id != room_id)).all()
    _remove_from_rooms(session, others, {coach_id})

    occupants = list(target.occupants or [])
    if coach_id not in occupants:
        occupants.append(coach_id)
        _save_occupants(session, target, occupants)

    logger.info(f"Assigned coach {coach_id} to room {room_id}")
    return target


def unassign_coach(session: Session, room_id: int, coach_id: int) -> Room:
    room = _get_room(session, room_id)
    occupants = [cid for cid in (room.occupants or []) if cid != coach_id]
    _save_occupants(session, room, occupants)
    return room


def _generate_room_number(existing: Iterable[str]) -> str:
    # Numbers only need to be unique within one tournament
    taken = set(existing)
    while True:
        candidate = f"Auto-Room-{random.randint(0, 9999):04d}"
        if candidate not in taken:
            return candidate


def room_coaches_together(
    session: Session,
    tournament_id: int,
    coach_ids: Sequence[int],
    room_number: Optional[str] = None,
    hotel: Optional[str] = None,
) -> Room:
    """
    Put two or more coaches into a brand new room.

    Every listed coach is first removed from whatever room currently holds it;
    the new room's occupants are exactly coach_ids (order preserved).
    """
    unique_ids = list(dict.fromkeys(coach_ids))
    if len(unique_ids) < 2:
        raise RoomingError("At least two coaches are required to room together")

    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise NotFoundError(f"Tournament {tournament_id} not found")

    for coach_id in unique_ids:
        _get_coach(session, coach_id)

    all_rooms = session.exec(select(Room)).all()
    _remove_from_rooms(session, all_rooms, set(unique_ids))

    tournament_room_numbers = [r.room_number for r in all_rooms if r.tournament_id == tournament_id]
    room = Room(
        tournament_id=tournament_id,
        room_number=room_number or _generate_room_number(tournament_room_numbers),
        hotel=hotel or tournament.housing_partner or DEFAULT_HOTEL,
        room_type=DEFAULT_ROOM_TYPE,
        cost_per_night=0,
        nights=0,
        occupants=unique_ids,
    )
    session.add(room)
    session.commit()
    session.refresh(room)

    logger.info(f"Created room {room.room_number} for coaches {unique_ids} in tournament {tournament_id}")
    return room


def set_no_roommate_needed(session: Session, coach_id: int, value: bool = True) -> CoachTravel:
    """Flag a coach as not needing a roommate. Existing room assignments are left alone."""
    coach = _get_coach(session, coach_id)
    coach.no_roommate_needed = value
    session.add(coach)
    session.commit()
    session.refresh(coach)
    return coach
