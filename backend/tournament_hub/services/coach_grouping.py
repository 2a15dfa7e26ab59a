"""
Coach grouping: collapse CoachTravel rows into one group per coach.

A coach is the set of CoachTravel rows sharing the exact same coach_name
string. "Jane Doe" and "jane doe " are two different coaches here; names
are not normalized.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.team import Team
from tournament_hub.models.tournament import Tournament
from tournament_hub.utils.names import name_sort_key


@dataclass
class CoachGroup:
    name: str
    teams: List[Team] = field(default_factory=list)
    tournaments: List[Tournament] = field(default_factory=list)
    records: List[CoachTravel] = field(default_factory=list)
    notes: str = ""
    gender: str = ""
    preferred_airport: str = ""


def group_coaches(
    coaches: Optional[Sequence[CoachTravel]],
    teams: Optional[Sequence[Team]],
    tournaments: Optional[Sequence[Tournament]],
) -> List[CoachGroup]:
    """
    Group CoachTravel rows by coach_name in a single pass.

    Each group collects every raw record, plus the Team and Tournament objects
    referenced by those records (deduplicated by id). notes, gender and
    preferred_airport take the first non-empty value seen and are never
    overwritten afterwards.

    Returns [] if any input is missing. Groups are ordered by name.
    """
    if coaches is None or teams is None or tournaments is None:
        return []

    teams_by_id: Dict[int, Team] = {t.id: t for t in teams}
    tournaments_by_id: Dict[int, Tournament] = {t.id: t for t in tournaments}

    groups: Dict[str, CoachGroup] = {}
    # Membership sets mirror group.teams / group.tournaments for O(1) dedup
    seen_team_ids: Dict[str, set] = {}
    seen_tournament_ids: Dict[str, set] = {}

    for coach in coaches:
        name = coach.coach_name
        group = groups.get(name)
        if group is None:
            group = CoachGroup(name=name)
            groups[name] = group
            seen_team_ids[name] = set()
            seen_tournament_ids[name] = set()

        group.records.append(coach)

        if coach.notes and not group.notes:
            group.notes = coach.notes
        if coach.gender and not group.gender:
            group.gender = coach.gender
        if coach.preferred_airport and not group.preferred_airport:
            group.preferred_airport = coach.preferred_airport

        if coach.team_id is not None:
            team = teams_by_id.get(coach.team_id)
            if team is not None and team.id not in seen_team_ids[name]:
                seen_team_ids[name].add(team.id)
                group.teams.append(team)

        if coach.tournament_id is not None:
            tournament = tournaments_by_id.get(coach.tournament_id)
            if tournament is not None and tournament.id not in seen_tournament_ids[name]:
                seen_tournament_ids[name].add(tournament.id)
                group.tournaments.append(tournament)

    return sorted(groups.values(), key=lambda g: name_sort_key(g.name))
