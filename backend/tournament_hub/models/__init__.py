from tournament_hub.models.action_reminder import ActionReminder, ReminderStatus
from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.finance_transaction import FinanceTransaction, TransactionCategory
from tournament_hub.models.league import DEFAULT_LEAGUE_ROUNDS, League
from tournament_hub.models.room import DEFAULT_ROOM_TYPE, Room
from tournament_hub.models.team import Team, TeamOrganization
from tournament_hub.models.tournament import ClubLocation, GenderFocus, Tournament, TournamentStatus
from tournament_hub.models.tournament_team import RegistrationStatus, TournamentTeam

__all__ = [
    "Tournament",
    "TournamentStatus",
    "GenderFocus",
    "ClubLocation",
    "League",
    "DEFAULT_LEAGUE_ROUNDS",
    "Team",
    "TeamOrganization",
    "TournamentTeam",
    "RegistrationStatus",
    "CoachTravel",
    "Room",
    "DEFAULT_ROOM_TYPE",
    "FinanceTransaction",
    "TransactionCategory",
    "ActionReminder",
    "ReminderStatus",
]
