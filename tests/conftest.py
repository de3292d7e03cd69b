"""Global pytest fixtures for the KickOffHub test suite.

Centralizes:
 - Settings pointing at an in-memory SQLite database (no Redis, no .env)
 - A ready DatabaseManager with all tables created
 - A fake API-Football client returning canned payloads
"""

import pytest

from kickoffhub.core.config import Settings
from kickoffhub.core.container import Container
from kickoffhub.database.manager import DatabaseManager
from kickoffhub.modules.teams.repository import TeamRepository
from kickoffhub.modules.teams.service import TeamsService

API_KEY = "test-key"


class FakeApiFootballClient:
    """Stands in for ApiFootballClient; ``responses`` maps path -> payload or exception."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    async def get(self, path, params=None, **kwargs):
        self.calls.append((path, dict(params or {})))
        result = self.responses.get(path, {"response": []})
        if isinstance(result, Exception):
            raise result
        return result


def team_entry(team_id, name, **team):
    return {
        "team": {"id": team_id, "name": name, **team},
        "venue": {"id": team_id * 10, "name": f"{name} Stadium"},
    }


# -------------------- Settings / Database -------------------- #


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        redis_url=None,
        api_key=API_KEY,
        environment="test",
        api_football_key="test-football-key",
        api_football_rate_limit=0,
        import_job_max_retries=0,
    )


@pytest.fixture
def db_manager(settings):
    db = DatabaseManager(settings)
    db.initialize_sync()
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def container():
    return Container()


# -------------------- API-Football Fixtures -------------------- #


@pytest.fixture
def premier_league_teams():
    """/teams payload for league 39 / 2023: one duplicate id, one entry without name"""
    return {
        "paging": {"current": 1, "total": 1},
        "response": [
            team_entry(33, "Manchester United", code="MUN", country="England", founded=1878),
            team_entry(42, "Arsenal", code="ARS", country="England", founded="1886"),
            team_entry(42, "Arsenal FC", code="ARS", country="England", founded=1886),
            {"team": {"id": 99, "name": "   "}},
            {"team": {"id": None, "name": "Ghost"}},
        ],
    }


@pytest.fixture
def fake_client(premier_league_teams):
    return FakeApiFootballClient({"/teams": premier_league_teams})


@pytest.fixture
def teams_service(db_manager, fake_client):
    return TeamsService(TeamRepository(db_manager), fake_client)


@pytest.fixture
def make_fake_client():
    return FakeApiFootballClient
