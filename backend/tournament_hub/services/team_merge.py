"""
Merge teams whose names match after trimming and lowercasing.

Keeper selection within a duplicate group:
  1. most team-level coaches (CoachTravel rows with no tournament)
  2. has notes
  3. most recently created
Losers' coach rows and registrations move to the keeper unless the keeper
already has the equivalent row, in which case the loser's row is deleted.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List

from sqlmodel import Session, select

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.team import Team
from tournament_hub.models.tournament_team import TournamentTeam
from tournament_hub.services.room_occupancy import strip_coaches_from_rooms
from tournament_hub.utils.names import normalize_name

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    merged_groups: int = 0
    deleted_teams: int = 0
    moved_coaches: int = 0
    moved_registrations: int = 0


def _keeper_sort_key(team: Team, coaches: List[CoachTravel]):
    team_level = sum(1 for c in coaches if c.team_id == team.id and c.tournament_id is None)
    # Sorted ascending, so negate "more is better" terms
    return (-team_level, 0 if team.notes else 1, -team.created_at.timestamp() if team.created_at else float("inf"))


def merge_duplicate_teams(session: Session) -> MergeResult:
    result = MergeResult()

    teams = session.exec(select(Team).order_by(Team.id)).all()
    coaches: List[CoachTravel] = list(session.exec(select(CoachTravel)).all())

    groups: Dict[str, List[Team]] = {}
    for team in teams:
        groups.setdefault(normalize_name(team.name), []).append(team)

    for key, duplicates in groups.items():
        if len(duplicates) < 2:
            continue

        duplicates.sort(key=lambda t: _keeper_sort_key(t, coaches))
        keeper = duplicates[0]
        keeper_id = keeper.id

        for loser in duplicates[1:]:
            loser_id = loser.id

            for coach in [c for c in coaches if c.team_id == loser_id]:
                already = any(
                    c.team_id == keeper_id
                    and c.tournament_id == coach.tournament_id
                    and normalize_name(c.coach_name) == normalize_name(coach.coach_name)
                    for c in coaches
                )
                if already:
                    coaches.remove(coach)
                    strip_coaches_from_rooms(session, [coach.id])
                    session.delete(coach)
                else:
                    coach.team_id = keeper_id
                    session.add(coach)
                    result.moved_coaches += 1

            registrations = session.exec(select(TournamentTeam).where(TournamentTeam.team_id == loser_id)).all()
            for tt in registrations:
                keeper_registered = session.exec(
                    select(TournamentTeam).where(
                        TournamentTeam.tournament_id == tt.tournament_id,
                        TournamentTeam.team_id == keeper_id,
                    )
                ).first()
                if keeper_registered:
                    session.delete(tt)
                else:
                    tt.team_id = keeper_id
                    session.add(tt)
                    result.moved_registrations += 1
                session.flush()

            session.delete(loser)
            session.commit()
            result.deleted_teams += 1

        result.merged_groups += 1
        logger.info(f"Merged {len(duplicates) - 1} duplicate(s) of '{key}' into team {keeper_id}")

    return result
