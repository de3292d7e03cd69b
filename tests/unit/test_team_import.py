import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from kickoffhub.database.schema import LeagueTeamSeason, Team
from kickoffhub.modules.teams.service import build_team_row


def _count(db_manager, model):
    with db_manager.session_scope() as session:
        return session.scalar(select(func.count()).select_from(model))


def test_build_team_row_maps_fields():
    row = build_team_row(
        {
            "team": {
                "id": "33",
                "name": " Manchester  United ",
                "code": "MUN",
                "country": "England",
                "founded": "1878 (est.)",
                "national": False,
                "logo": "https://media.api-sports.io/football/teams/33.png",
            },
            "venue": {"id": 556, "name": "Old Trafford"},
        }
    )
    assert row == {
        "id": 33,
        "name": "Manchester United",
        "code": "MUN",
        "country": "England",
        "founded": 1878,
        "national": False,
        "logo": "https://media.api-sports.io/football/teams/33.png",
        "venue_id": 556,
    }


@pytest.mark.parametrize(
    "entry",
    [
        None,
        {},
        {"team": None},
        {"team": {"id": 0, "name": "Zero"}},
        {"team": {"id": -4, "name": "Negative"}},
        {"team": {"id": "abc", "name": "Letters"}},
        {"team": {"id": 7, "name": ""}},
        {"team": {"id": 7}},
    ],
)
def test_build_team_row_drops_invalid_entries(entry):
    assert build_team_row(entry) is None


@pytest.mark.asyncio
async def test_import_stores_valid_unique_teams(teams_service, db_manager, fake_client):
    summary = await teams_service.perform_team_import(39, 2023)

    assert fake_client.calls == [("/teams", {"league": 39, "season": 2023})]
    assert summary["imported"] == 2
    assert summary["mappings_inserted"] == 2
    assert summary["mapping_errors"] == []
    assert summary["league"] == 39 and summary["season"] == 2023

    with db_manager.session_scope() as session:
        arsenal = session.get(Team, 42)
        assert arsenal.name == "Arsenal FC"  # letzter Eintrag gewinnt
        assert arsenal.venue_id == 420
        assert session.get(Team, 99) is None


@pytest.mark.asyncio
async def test_import_is_idempotent(teams_service, db_manager):
    await teams_service.perform_team_import(39, 2023)
    again = await teams_service.perform_team_import(39, 2023)

    assert again["imported"] == 2
    assert _count(db_manager, Team) == 2
    assert _count(db_manager, LeagueTeamSeason) == 2


@pytest.mark.asyncio
async def test_reimport_updates_fields_but_keeps_popular_flag(teams_service, db_manager, fake_client):
    await teams_service.perform_team_import(39, 2023)
    await teams_service.update_team(33, {"is_popular": True})

    fake_client.responses["/teams"]["response"][0]["team"]["name"] = "Man Utd"
    await teams_service.perform_team_import(39, 2023)

    team = await teams_service.get_team(33)
    assert team["name"] == "Man Utd"
    assert team["is_popular"] is True


@pytest.mark.asyncio
async def test_empty_provider_response(db_manager, make_fake_client):
    from kickoffhub.modules.teams.repository import TeamRepository
    from kickoffhub.modules.teams.service import TeamsService

    service = TeamsService(TeamRepository(db_manager), make_fake_client({"/teams": {"response": []}}))
    summary = await service.perform_team_import(1, 2020)

    assert summary["imported"] == 0
    assert summary["message"] == "API-Football returned no teams"
    assert _count(db_manager, Team) == 0


@pytest.mark.asyncio
async def test_only_invalid_entries(db_manager, make_fake_client):
    from kickoffhub.modules.teams.repository import TeamRepository
    from kickoffhub.modules.teams.service import TeamsService

    client = make_fake_client({"/teams": {"response": [{"team": {"id": 0, "name": "x"}}]}})
    summary = await TeamsService(TeamRepository(db_manager), client).perform_team_import(1, 2020)

    assert summary["imported"] == 0
    assert summary["message"] == "No valid teams to store"


@pytest.mark.asyncio
async def test_mapping_errors_are_collected(teams_service, monkeypatch):
    original = teams_service.repository.upsert_mapping

    def flaky(league_id, team_id, season):
        if team_id == 42:
            raise OperationalError("INSERT", {}, Exception("database is locked"))
        return original(league_id, team_id, season)

    monkeypatch.setattr(teams_service.repository, "upsert_mapping", flaky)

    summary = await teams_service.perform_team_import(39, 2023)

    assert summary["imported"] == 2
    assert summary["mappings_inserted"] == 1
    assert [e["team_id"] for e in summary["mapping_errors"]] == [42]
    assert "database is locked" in summary["mapping_errors"][0]["reason"]


@pytest.mark.asyncio
async def test_background_import_without_queue_runs_inline(teams_service):
    from kickoffhub.modules.teams.queue import TeamImportQueue

    teams_service.queue = TeamImportQueue(None)
    result = await teams_service.import_teams("39", "2023", background=True)

    assert result["queued"] is False
    assert "synchronously" in result["note"]
    assert result["imported"] == 2


@pytest.mark.asyncio
async def test_teams_by_league_after_import(teams_service):
    from kickoffhub.core.exceptions import NotFoundException

    await teams_service.perform_team_import(39, 2023)

    teams = await teams_service.get_teams_by_league("39")
    assert [t["name"] for t in teams] == ["Arsenal FC", "Manchester United"]

    with pytest.raises(NotFoundException) as exc:
        await teams_service.get_teams_by_league(140)
    assert exc.value.code == "NO_LEAGUE_MAPPINGS"


@pytest.mark.asyncio
async def test_update_rejects_null_for_non_nullable_flags(teams_service):
    from kickoffhub.core.exceptions import ValidationException

    created = await teams_service.create_team({"id": 5001, "name": "Wrexham"})

    for field in ("is_popular", "national"):
        with pytest.raises(ValidationException) as exc:
            await teams_service.update_team(created["id"], {field: None})
        assert exc.value.code == "INVALID_TEAM_FIELD"

    team = await teams_service.get_team(5001)
    assert team["is_popular"] is False


@pytest.mark.asyncio
async def test_update_constraint_violation_maps_to_conflict(teams_service, monkeypatch):
    from sqlalchemy.exc import IntegrityError

    from kickoffhub.core.exceptions import ConflictException

    await teams_service.create_team({"id": 5002, "name": "Bangor City"})

    def failing_update(team_id, values):
        raise IntegrityError("UPDATE teams", {}, Exception("constraint failed"))

    monkeypatch.setattr(teams_service.repository, "update", failing_update)

    with pytest.raises(ConflictException) as exc:
        await teams_service.update_team(5002, {"name": "Bangor 1876"})
    assert exc.value.code == "TEAM_CONFLICT"


@pytest.mark.asyncio
async def test_create_requires_provider_id(teams_service):
    from kickoffhub.core.exceptions import ConflictException, ValidationException

    with pytest.raises(ValidationException) as exc:
        await teams_service.create_team({"name": "Wrexham"})
    assert str(exc.value) == "id is required"

    await teams_service.perform_team_import(39, 2023)
    with pytest.raises(ConflictException):
        await teams_service.create_team({"id": 33, "name": "Duplicate United"})
