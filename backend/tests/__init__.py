# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from tournament_hub.models import (  # noqa: F401
    ActionReminder,
    CoachTravel,
    FinanceTransaction,
    League,
    Room,
    Team,
    Tournament,
    TournamentTeam,
)
