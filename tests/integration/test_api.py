import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from kickoffhub.api.main import create_fastapi_app
from kickoffhub.bootstrap import bootstrap_application
from kickoffhub.core.container import Container
from kickoffhub.core.exceptions import UpstreamError
from kickoffhub.core.tokens import Tokens
from kickoffhub.database.schema import Country

AUTH = {"X-API-Key": "test-key"}


async def _bootstrap_app(settings, db_manager, client):
    container = Container()
    container.set(Tokens.DATABASE, db_manager)
    container.set(Tokens.API_FOOTBALL, client)
    container, manifests = await bootstrap_application(settings, container=container)
    return create_fastapi_app(settings, container, manifests, close_resources=False)


def _build_app(settings, db_manager, client):
    return asyncio.run(_bootstrap_app(settings, db_manager, client))


@pytest.fixture
def app(settings, db_manager, fake_client):
    return _build_app(settings, db_manager, fake_client)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def countries(db_manager):
    with db_manager.session_scope() as session:
        session.add_all(
            [
                Country(name="England", code="GB", flag="https://media.api-sports.io/flags/gb.svg"),
                Country(name="Germany", code="DE"),
                Country(name="Spain", code="ES"),
                Country(name="100% Land", code="XX"),
            ]
        )


# -------------------- Health / Metrics -------------------- #


@pytest.mark.asyncio
async def test_health_endpoint(settings, db_manager, fake_client):
    app = await _bootstrap_app(settings, db_manager, fake_client)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["modules"] == [
            "api_football",
            "countries",
            "league_team_season",
            "leagues",
            "player_team_league_season",
            "players",
            "seasons",
            "teams",
            "venues",
        ]


def test_health_details_reports_components(client):
    data = client.get("/health/details").json()
    components = data["components"]
    assert components["database"]["status"] == "healthy"
    assert components["redis"]["status"] == "disabled"
    assert components["import_queue"]["status"] == "degraded"


def test_metrics_endpoint(client):
    client.get("/api/v1/seasons")
    client.get("/api/v1/countries/2")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "api_requests_total" in resp.text
    assert 'endpoint="/api/v1/seasons",method="GET",status="200"' in resp.text
    assert 'endpoint="/api/v1/countries/{country_id}",method="GET",status="404"' in resp.text
    assert 'endpoint="/seasons"' not in resp.text
    assert "modules_loaded 9.0" in resp.text


def test_openapi_groups_routes_by_module(client):
    schema = client.get("/openapi.json").json()
    tags = {tag for item in schema["paths"].values() for spec in item.values() for tag in spec.get("tags", [])}
    assert {"countries", "leagues", "seasons", "teams", "league_team_season", "players", "venues"} <= tags


# -------------------- Countries -------------------- #


def test_countries_pagination(client, countries):
    resp = client.get("/api/v1/countries", params={"limit": 2})
    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert [c["name"] for c in body["data"]["data"]] == ["100% Land", "England"]
    assert body["data"]["pagination"] == {
        "total_items": 4,
        "total_pages": 2,
        "page": 1,
        "limit": 2,
        "has_next_page": True,
        "has_prev_page": False,
    }


def test_countries_validation_errors(client, countries):
    too_large = client.get("/api/v1/countries", params={"limit": 101})
    assert too_large.status_code == 400
    assert too_large.json()["code"] == "LIMIT_TOO_LARGE"

    out_of_range = client.get("/api/v1/countries", params={"page": 9})
    assert out_of_range.status_code == 400
    assert out_of_range.json()["code"] == "PAGE_OUT_OF_RANGE"

    bad_page = client.get("/api/v1/countries", params={"page": "abc"})
    assert bad_page.status_code == 400
    assert bad_page.json()["success"] is False


def test_countries_search_escapes_wildcards(client, countries):
    resp = client.get("/api/v1/countries/search", params={"name": "%"})
    assert [c["name"] for c in resp.json()["data"]["results"]] == ["100% Land"]

    resp = client.get("/api/v1/countries/search", params={"name": "AN"})
    names = [c["name"] for c in resp.json()["data"]["results"]]
    assert names == ["100% Land", "England", "Germany"]

    missing = client.get("/api/v1/countries/search")
    assert missing.status_code == 400
    assert missing.json()["error"] == "name query parameter is required"


def test_country_by_id(client, countries):
    assert client.get("/api/v1/countries/2").json()["data"]["name"] == "Germany"
    missing = client.get("/api/v1/countries/999")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Country does not exist"


# -------------------- Leagues -------------------- #


def test_league_crud_flow(client):
    payload = {"id": 39, "name": " Premier League ", "type": "League", "country_id": None}

    assert client.post("/api/v1/leagues", json=payload).status_code == 401

    created = client.post("/api/v1/leagues", json=payload, headers=AUTH)
    assert created.status_code == 201
    assert created.json()["data"]["name"] == "Premier League"

    duplicate = client.post("/api/v1/leagues", json=payload, headers=AUTH)
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "LEAGUE_CONFLICT"

    assert [lg["id"] for lg in client.get("/api/v1/leagues").json()["data"]] == [39]

    updated = client.put("/api/v1/leagues/39", json={"logo": "pl.png"}, headers=AUTH)
    assert updated.status_code == 200
    assert updated.json()["data"]["logo"] == "pl.png"
    assert updated.json()["data"]["name"] == "Premier League"

    empty = client.put("/api/v1/leagues/39", json={}, headers=AUTH)
    assert empty.json()["code"] == "LEAGUE_UPDATE_EMPTY"

    search = client.get("/api/v1/leagues/search", params={"name": "premier"}).json()["data"]
    assert search["pagination"]["total_items"] == 1

    assert client.delete("/api/v1/leagues/39", headers=AUTH).status_code == 200
    gone = client.get("/api/v1/leagues/39")
    assert gone.status_code == 404
    assert gone.json()["code"] == "LEAGUE_NOT_FOUND"


def test_league_create_requires_name(client):
    resp = client.post("/api/v1/leagues", json={"id": 61, "name": "  "}, headers=AUTH)
    assert resp.status_code == 400
    assert resp.json()["code"] == "LEAGUE_NAME_REQUIRED"


# -------------------- Seasons -------------------- #


def test_seasons_find_or_create_and_order(client):
    first = client.post("/api/v1/seasons", json={"season": 2022}, headers=AUTH)
    assert first.status_code == 201
    assert first.json()["data"] == {"season": 2022, "created": True}

    again = client.post("/api/v1/seasons", json={"season": 2022}, headers=AUTH)
    assert again.status_code == 200
    assert again.json()["data"]["created"] is False

    client.post("/api/v1/seasons", json={"season": 2024}, headers=AUTH)
    seasons = client.get("/api/v1/seasons").json()["data"]
    assert [s["season"] for s in seasons] == [2024, 2022]

    assert client.delete("/api/v1/seasons/2022", headers=AUTH).status_code == 200
    assert client.delete("/api/v1/seasons/2022", headers=AUTH).status_code == 404


def test_request_body_validation_uses_envelope(client):
    resp = client.post("/api/v1/seasons", json={"season": "not-a-year"}, headers=AUTH)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"


# -------------------- Teams -------------------- #


def test_team_import_and_lookups(client):
    assert client.post("/api/v1/teams/import", json={"league": 39, "season": 2023}).status_code == 401

    resp = client.post("/api/v1/teams/import", json={"league": 39, "season": 2023}, headers=AUTH)
    assert resp.status_code == 200
    summary = resp.json()["data"]
    assert summary["imported"] == 2
    assert summary["mappings_inserted"] == 2

    teams = client.get("/api/v1/teams").json()["data"]
    assert teams["pagination"]["total_items"] == 2

    by_league = client.get("/api/v1/teams/league/39", params={"season": 2023}).json()["data"]
    assert [t["id"] for t in by_league] == [42, 33]

    mappings = client.get("/api/v1/league-team-season", params={"league_id": 39}).json()["data"]
    assert {(m["team_id"], m["season"]) for m in mappings} == {(33, 2023), (42, 2023)}

    season_teams = client.get(
        "/api/v1/league-team-season/teams", params={"league_id": 39, "season": 2023}
    ).json()["data"]
    assert [t["name"] for t in season_teams] == ["Arsenal FC", "Manchester United"]

    search = client.get("/api/v1/teams/search", params={"name": "united"}).json()["data"]
    assert search["total"] == 1 and search["results"][0]["id"] == 33

    deleted = client.delete("/api/v1/league-team-season/39/42/2023", headers=AUTH)
    assert deleted.status_code == 200
    again = client.delete("/api/v1/league-team-season/39/42/2023", headers=AUTH)
    assert again.status_code == 404
    assert again.json()["error"] == "Record does not exist"


def test_background_import_without_queue_falls_back(client):
    resp = client.post(
        "/api/v1/teams/import", json={"league": 39, "season": 2023, "background": True}, headers=AUTH
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["queued"] is False
    assert data["imported"] == 2


def test_team_import_rejects_bad_input(client):
    resp = client.post("/api/v1/teams/import", json={"league": 0, "season": 2023}, headers=AUTH)
    assert resp.status_code == 400


def test_team_crud(client):
    created = client.post(
        "/api/v1/teams",
        json={"id": 1812, "name": "Wrexham", "country": "Wales", "is_popular": True},
        headers=AUTH,
    )
    assert created.status_code == 201
    team_id = created.json()["data"]["id"]
    assert team_id == 1812

    without_id = client.post("/api/v1/teams", json={"name": "Cardiff City"}, headers=AUTH)
    assert without_id.status_code == 400

    null_flag = client.put(f"/api/v1/teams/{team_id}", json={"is_popular": None}, headers=AUTH)
    assert null_flag.status_code == 400
    assert null_flag.json()["code"] == "INVALID_TEAM_FIELD"

    popular = client.get("/api/v1/teams/popular").json()["data"]["data"]
    assert [t["name"] for t in popular] == ["Wrexham"]

    updated = client.put(f"/api/v1/teams/{team_id}", json={"founded": 1864}, headers=AUTH)
    assert updated.json()["data"]["founded"] == 1864

    blank = client.post("/api/v1/teams", json={"id": 1813, "name": " "}, headers=AUTH)
    assert blank.json()["code"] == "INVALID_TEAM_NAME"

    assert client.delete(f"/api/v1/teams/{team_id}", headers=AUTH).status_code == 200
    missing = client.get(f"/api/v1/teams/{team_id}")
    assert missing.status_code == 404
    assert missing.json()["code"] == "TEAM_NOT_FOUND"


def test_team_statistics_proxies_upstream(settings, db_manager, make_fake_client):
    stats = {"response": {"team": {"id": 33}, "form": "WDLWW"}}
    app = _build_app(settings, db_manager, make_fake_client({"/teams/statistics": stats}))
    with TestClient(app) as c:
        resp = c.get("/api/v1/teams/33/statistics", params={"league": 39, "season": 2023})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["source"] == "API-Football"
        assert data["payload"] == stats

        missing_season = c.get("/api/v1/teams/33/statistics", params={"league": 39})
        assert missing_season.status_code == 400


def test_upstream_failure_maps_to_502(settings, db_manager, make_fake_client):
    failing = make_fake_client(
        {"/teams/statistics": UpstreamError("Could not fetch data from API-Football", details={"status": 500})}
    )
    app = _build_app(settings, db_manager, failing)
    with TestClient(app) as c:
        resp = c.get("/api/v1/teams/33/statistics", params={"league": 39, "season": 2023})
        assert resp.status_code == 502
        body = resp.json()
        assert body["code"] == "UPSTREAM_ERROR"
        assert body["details"] == {"status": 500}


# -------------------- Venues -------------------- #

OLD_TRAFFORD = {
    "id": 556,
    "name": "Old Trafford",
    "address": "Sir Matt Busby Way",
    "city": "Manchester",
    "capacity": 76212,
    "surface": "grass",
    "image": "https://media.api-sports.io/football/venues/556.png",
}


def test_venue_import_is_idempotent(settings, db_manager, make_fake_client):
    app = _build_app(settings, db_manager, make_fake_client({"/venues": {"response": [OLD_TRAFFORD]}}))
    with TestClient(app) as c:
        assert c.post("/api/v1/venues/import", json={"id": 556}).status_code == 401

        first = c.post("/api/v1/venues/import", json={"id": 556}, headers=AUTH)
        assert first.status_code == 200
        assert first.json()["data"] == {"imported": 1, "id": 556}
        c.post("/api/v1/venues/import", json={"id": 556}, headers=AUTH)

        venues = c.get("/api/v1/venues").json()["data"]
        assert [v["id"] for v in venues] == [556]
        assert venues[0]["capacity"] == 76212

        missing_id = c.post("/api/v1/venues/import", json={}, headers=AUTH)
        assert missing_id.status_code == 400
        assert missing_id.json()["error"] == "id is required"


def test_venue_crud(client):
    payload = {"id": 494, "name": " Emirates Stadium ", "city": "London", "capacity": 60260}

    created = client.post("/api/v1/venues", json=payload, headers=AUTH)
    assert created.status_code == 201
    assert created.json()["data"]["name"] == "Emirates Stadium"

    duplicate = client.post("/api/v1/venues", json=payload, headers=AUTH)
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "VENUE_CONFLICT"

    bad_capacity = client.put("/api/v1/venues/494", json={"capacity": -1}, headers=AUTH)
    assert bad_capacity.json()["code"] == "INVALID_CAPACITY"
    assert client.put("/api/v1/venues/494", json={}, headers=AUTH).json()["code"] == "VENUE_UPDATE_EMPTY"

    updated = client.put("/api/v1/venues/494", json={"surface": "grass"}, headers=AUTH)
    assert updated.json()["data"]["surface"] == "grass"
    assert updated.json()["data"]["city"] == "London"

    assert client.delete("/api/v1/venues/494", headers=AUTH).status_code == 200
    gone = client.get("/api/v1/venues/494")
    assert gone.status_code == 404
    assert gone.json()["code"] == "VENUE_NOT_FOUND"


# -------------------- Players -------------------- #

SQUAD = {
    "paging": {"current": 1, "total": 2},
    "response": [
        {
            "player": {
                "id": 882,
                "name": "David de Gea",
                "firstname": "David",
                "lastname": "de Gea Quintana",
                "age": 32,
                "birth": {"date": "1990-11-07", "place": "Madrid", "country": "Spain"},
                "nationality": "Spain",
                "height": "192 cm",
                "weight": "82 kg",
                "photo": "https://media.api-sports.io/football/players/882.png",
            },
            "statistics": [{"games": {"number": 1, "position": "Goalkeeper"}}],
        },
        {"player": {"id": 909, "name": "M. Rashford", "nationality": "England", "age": 25}},
        {"player": {"id": 909, "name": "Marcus Rashford", "nationality": "England", "age": 25}},
        {"player": {"id": None, "name": "Ghost"}},
    ],
}


def test_player_import_and_squad_lookup(settings, db_manager, make_fake_client, countries):
    app = _build_app(settings, db_manager, make_fake_client({"/players": SQUAD}))
    with TestClient(app) as c:
        resp = c.post(
            "/api/v1/players/import", json={"league": 39, "team": 33, "season": 2023}, headers=AUTH
        )
        assert resp.status_code == 200
        summary = resp.json()["data"]
        assert summary["imported"] == 2
        assert summary["mappings_inserted"] == 2
        assert summary["total_pages"] == 2
        assert summary["team"] == 33

        squad = c.get(
            "/api/v1/player-team-league-season/players",
            params={"league_id": 39, "team_id": 33, "season": 2023},
        ).json()["data"]
        assert squad["total"] == 2
        assert [m["player"]["name"] for m in squad["players"]] == ["David de Gea", "Marcus Rashford"]

        keeper = c.get("/api/v1/players/882").json()["data"]
        assert keeper["position"] == "Goalkeeper"
        assert keeper["number"] == 1
        assert keeper["birth_date"] == "1990-11-07"
        assert keeper["country"]["code"] == "ES"

        english = c.get("/api/v1/players", params={"nationality": "england"}).json()["data"]
        assert [p["id"] for p in english["data"]] == [909]
        assert c.get("/api/v1/players/count").json()["data"] == {"total": 2}
        assert c.get("/api/v1/players/search", params={"name": "GEA"}).json()["data"]["total"] == 1

        stats = c.get("/api/v1/players/882/statistics", params={"season": 2023}).json()["data"]
        assert stats["id"] == 882 and stats["season"] == 2023
        assert stats["payload"] == SQUAD

        missing_team = c.post(
            "/api/v1/players/import", json={"league": 39, "season": 2023}, headers=AUTH
        )
        assert missing_team.status_code == 400


def test_player_crud(client):
    created = client.post(
        "/api/v1/players", json={"id": 1100, "name": "Harry Wilson", "age": 26, "nationality": "Wales"}, headers=AUTH
    )
    assert created.status_code == 201
    assert created.json()["data"]["is_popular"] is False

    assert client.post("/api/v1/players", json={"name": "No Id"}, headers=AUTH).status_code == 400
    duplicate = client.post("/api/v1/players", json={"id": 1100, "name": "Harry Wilson"}, headers=AUTH)
    assert duplicate.json()["code"] == "PLAYER_CONFLICT"

    popular = client.put("/api/v1/players/1100", json={"is_popular": True}, headers=AUTH)
    assert popular.json()["data"]["is_popular"] is True
    assert [p["id"] for p in client.get("/api/v1/players/popular").json()["data"]["data"]] == [1100]

    assert client.put("/api/v1/players/1100", json={"age": 0}, headers=AUTH).status_code == 400
    null_flag = client.put("/api/v1/players/1100", json={"is_popular": None}, headers=AUTH)
    assert null_flag.json()["code"] == "INVALID_PLAYER_FIELD"

    assert client.get("/api/v1/players/1100").json()["data"]["country"] is None

    assert client.delete("/api/v1/players/1100", headers=AUTH).status_code == 200
    gone = client.get("/api/v1/players/1100")
    assert gone.status_code == 404
    assert gone.json()["code"] == "PLAYER_NOT_FOUND"


def test_player_mapping_crud(client):
    client.post("/api/v1/players", json={"id": 1200, "name": "Kieffer Moore"}, headers=AUTH)
    key = {"player_id": 1200, "league_id": 39, "team_id": 35, "season": 2023}

    created = client.post("/api/v1/player-team-league-season", json=key, headers=AUTH)
    assert created.status_code == 201

    unknown = client.post(
        "/api/v1/player-team-league-season", json={**key, "player_id": 9999}, headers=AUTH
    )
    assert unknown.status_code == 409
    assert unknown.json()["code"] == "PLAYER_NOT_STORED"

    incomplete = client.post(
        "/api/v1/player-team-league-season", json={"player_id": 1200, "league_id": 39}, headers=AUTH
    )
    assert incomplete.status_code == 400

    moved = client.put("/api/v1/player-team-league-season/1200/39/35/2023", json={"season": 2024}, headers=AUTH)
    assert moved.status_code == 200
    assert moved.json()["data"]["season"] == 2024
    stale = client.put("/api/v1/player-team-league-season/1200/39/35/2023", json={"season": 2025}, headers=AUTH)
    assert stale.status_code == 404

    squad = client.get(
        "/api/v1/player-team-league-season/players",
        params={"league_id": 39, "team_id": 35, "season": 2024},
    ).json()["data"]
    assert squad["total"] == 1

    assert client.delete("/api/v1/player-team-league-season/1200/39/35/2024", headers=AUTH).status_code == 200
    assert client.delete("/api/v1/player-team-league-season/1200/39/35/2024", headers=AUTH).status_code == 404
