from fastapi.testclient import TestClient


def _league(client: TestClient, **overrides):
    payload = {"name": "Spring League", "age_divisions": ["U12", "U14"]}
    payload.update(overrides)
    response = client.post("/api/leagues", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_league_default_rounds(client: TestClient):
    league = _league(client)
    assert league["rounds"] == ["League Qualifier", "League 1", "League 2", "League 3", "Regionals"]
    assert league["age_divisions"] == ["U12", "U14"]


def test_age_divisions_required(client: TestClient):
    response = client.post("/api/leagues", json={"name": "Empty", "age_divisions": []})
    assert response.status_code == 422


def test_age_divisions_accept_comma_text(client: TestClient):
    league = _league(client, age_divisions="U10, U12 ,")
    assert league["age_divisions"] == ["U10", "U12"]


def test_create_round_one_tournament_per_division(client: TestClient):
    league = _league(client, age_divisions=["U12", "U14", "U16"])

    response = client.post(
        f"/api/leagues/{league['id']}/rounds",
        json={
            "round_name": "League 1",
            "dates_by_division": {
                "U12": {"start_date": "2026-04-04", "location": "Tampa"},
                "U14": {"start_date": "2026-04-11", "end_date": "2026-04-12"},
                "U16": {},
            },
            "date_tentative": True,
        },
    )
    assert response.status_code == 201, response.text
    created = response.json()

    assert [t["name"] for t in created] == ["League 1 - U12", "League 1 - U14"]
    assert created[0]["end_date"] == "2026-04-04"
    assert created[0]["location"] == "Tampa"
    assert all(t["league_id"] == league["id"] and t["date_tentative"] is True for t in created)

    rounds = client.get(f"/api/leagues/{league['id']}/rounds").json()
    assert [r["round_name"] for r in rounds] == ["League Qualifier", "League 1", "League 2", "League 3", "Regionals"]
    assert [t["name"] for t in rounds[1]["tournaments"]] == ["League 1 - U12", "League 1 - U14"]


def test_create_round_rejects_unknown_round_and_missing_dates(client: TestClient):
    league = _league(client)
    unknown = client.post(
        f"/api/leagues/{league['id']}/rounds",
        json={"round_name": "Finals", "dates_by_division": {"U12": {"start_date": "2026-04-04"}}},
    )
    assert unknown.status_code == 400

    no_dates = client.post(
        f"/api/leagues/{league['id']}/rounds",
        json={"round_name": "League 1", "dates_by_division": {"U12": {}}},
    )
    assert no_dates.status_code == 400


def test_league_tournaments_stay_out_of_buckets(client: TestClient):
    league = _league(client)
    client.post("/api/tournaments", json={"name": "League Stop", "league_id": league["id"], "start_date": "2026-03-20"})
    client.post("/api/tournaments", json={"name": "Open Cup", "start_date": "2026-03-20"})

    data = client.get("/api/tournaments/buckets?today=2026-03-10").json()
    assert [t["name"] for t in data["this_month"]] == ["Open Cup"]

    rounds = client.get(f"/api/leagues/{league['id']}/rounds").json()
    assert rounds[-1]["round_name"] == "Unassigned"
    assert [t["name"] for t in rounds[-1]["tournaments"]] == ["League Stop"]


def test_upcoming_league_tournaments(client: TestClient):
    league = _league(client)
    for name, start in (("Past", "2026-01-01"), ("Next", "2026-03-15"), ("After", "2026-04-15")):
        client.post("/api/tournaments", json={"name": name, "league_id": league["id"], "start_date": start})

    upcoming = client.get(f"/api/leagues/{league['id']}/upcoming?today=2026-03-10").json()
    assert [t["name"] for t in upcoming] == ["Next", "After"]


def test_delete_league_keeps_tournaments(client: TestClient):
    league = _league(client)
    t = client.post("/api/tournaments", json={"name": "Stop", "league_id": league["id"]}).json()

    assert client.delete(f"/api/leagues/{league['id']}").status_code == 204
    assert client.get(f"/api/leagues/{league['id']}").status_code == 404
    assert client.get(f"/api/tournaments/{t['id']}").status_code == 200
