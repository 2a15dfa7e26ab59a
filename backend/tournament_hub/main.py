import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tournament_hub.database import init_db
from tournament_hub.routes import (
    coaches,
    finance,
    imports,
    leagues,
    reminders,
    rooms,
    teams,
    tournament_teams,
    tournaments,
)

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

app = FastAPI(title="Tournament Hub API")

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tournaments.router, prefix="/api", tags=["tournaments"])
app.include_router(leagues.router, prefix="/api", tags=["leagues"])
app.include_router(teams.router, prefix="/api", tags=["teams"])
app.include_router(tournament_teams.router, prefix="/api", tags=["registrations"])
app.include_router(coaches.router, prefix="/api", tags=["coaches"])

# Rooming board and room occupants
app.include_router(rooms.router, prefix="/api", tags=["rooming"])

app.include_router(finance.router, prefix="/api", tags=["finance"])
app.include_router(imports.router, prefix="/api", tags=["imports"])
app.include_router(reminders.router, prefix="/api", tags=["reminders"])


@app.on_event("startup")
def on_startup():
    init_db()

    # Print all registered routes for debugging (full path stack)
    print("\n" + "=" * 80)
    print("REGISTERED ROUTES (Full Path Stack)")
    print("=" * 80)
    route_count = 0
    for r in app.routes:
        methods = getattr(r, "methods", None)
        path = getattr(r, "path", None)
        if path:
            methods_str = ", ".join(sorted(methods)) if methods else "N/A"
            print(f"{methods_str:20} {path}")
            route_count += 1
    print("=" * 80)
    print(f"Total routes: {route_count}")
    print("=" * 80 + "\n")


@app.get("/api/health")
def health_check():
    return {"app_name": "Tournament Hub API", "status": "healthy"}


@app.get("/")
def root():
    return {"message": "Tournament Hub API"}
