from fastapi.testclient import TestClient
from sqlmodel import Session

from tournament_hub.models.team import Team


def _setup(client: TestClient):
    tournament = client.post("/api/tournaments", json={"name": "Spring Classic"}).json()
    other = client.post("/api/tournaments", json={"name": "Winter Open"}).json()
    vipers = client.post("/api/teams", json={"name": "Vipers 12U", "coach_names": ["Jane Doe", "Bob Smith"]}).json()
    hawks = client.post("/api/teams", json={"name": "Hawks 14U"}).json()
    return tournament, other, vipers, hawks


def test_team_save_dedups_by_name(client: TestClient):
    first = client.post("/api/teams", json={"name": "Vipers 12U", "notes": "a"}).json()
    second = client.post("/api/teams", json={"name": " vipers 12u", "notes": "b"}).json()

    assert second["id"] == first["id"]
    assert second["notes"] == "b"
    assert len(client.get("/api/teams").json()) == 1


def test_team_roster_round_trip(client: TestClient):
    _, _, vipers, _ = _setup(client)
    assert vipers["coach_names"] == ["Bob Smith", "Jane Doe"]

    updated = client.patch(f"/api/teams/{vipers['id']}", json={"coach_names": ["Jane Doe"]}).json()
    assert updated["coach_names"] == ["Jane Doe"]


def test_register_teams_seeds_coach_travel(client: TestClient):
    tournament, other, vipers, hawks = _setup(client)
    team_level = client.get(f"/api/coaches?team_id={vipers['id']}").json()
    jane_id = next(c["id"] for c in team_level if c["coach_name"] == "Jane Doe")
    client.patch(f"/api/coaches/{jane_id}", json={"gender": "F", "preferred_airport": "MCO", "flight_cost": 120})

    response = client.post(
        f"/api/tournaments/{tournament['id']}/teams",
        json={"team_ids": [vipers["id"], hawks["id"]], "age_division_playing": "U12"},
    )
    assert response.status_code == 201, response.text
    registrations = response.json()
    assert sorted(r["team_id"] for r in registrations) == sorted([vipers["id"], hawks["id"]])
    assert all(r["registration_status"] == "Registered" for r in registrations)

    seeded = client.get(f"/api/coaches?tournament_id={tournament['id']}").json()
    assert sorted(c["coach_name"] for c in seeded) == ["Bob Smith", "Jane Doe"]
    jane = next(c for c in seeded if c["coach_name"] == "Jane Doe")
    assert jane["gender"] == "F"
    assert jane["preferred_airport"] == "MCO"
    assert jane["flight_cost"] == 0
    assert jane["flight_booked"] is False
    assert jane["team_id"] == vipers["id"]

    assert client.get(f"/api/coaches?tournament_id={other['id']}").json() == []


def test_register_twice_conflicts(client: TestClient):
    tournament, _, vipers, hawks = _setup(client)
    client.post(f"/api/tournaments/{tournament['id']}/teams", json={"team_ids": [vipers["id"]]})

    response = client.post(
        f"/api/tournaments/{tournament['id']}/teams", json={"team_ids": [hawks["id"], vipers["id"]]}
    )
    assert response.status_code == 409
    assert len(client.get(f"/api/tournaments/{tournament['id']}/teams").json()) == 1


def test_register_unknown_team(client: TestClient):
    tournament, _, _, _ = _setup(client)
    response = client.post(f"/api/tournaments/{tournament['id']}/teams", json={"team_ids": [9999]})
    assert response.status_code == 404


def test_update_and_delete_registration(client: TestClient):
    tournament, _, vipers, _ = _setup(client)
    registration = client.post(
        f"/api/tournaments/{tournament['id']}/teams", json={"team_ids": [vipers["id"]]}
    ).json()[0]

    updated = client.patch(f"/api/tournament-teams/{registration['id']}", json={"registration_status": "Paid"})
    assert updated.json()["registration_status"] == "Paid"

    assert client.delete(f"/api/tournament-teams/{registration['id']}").status_code == 204
    assert client.get(f"/api/tournaments/{tournament['id']}/teams").json() == []


def test_delete_team_cascades(client: TestClient):
    tournament, _, vipers, _ = _setup(client)
    client.post(f"/api/tournaments/{tournament['id']}/teams", json={"team_ids": [vipers["id"]]})

    assert client.delete(f"/api/teams/{vipers['id']}").status_code == 204
    assert client.get(f"/api/coaches?team_id={vipers['id']}").json() == []
    assert client.get(f"/api/tournaments/{tournament['id']}/teams").json() == []


def test_merge_duplicates_endpoint(client: TestClient, session: Session):
    session.add_all([Team(name="Vipers 12U"), Team(name="VIPERS 12U ")])
    session.commit()

    response = client.post("/api/teams/merge-duplicates")
    assert response.status_code == 200
    assert response.json()["deleted_teams"] == 1
    assert len(client.get("/api/teams").json()) == 1
