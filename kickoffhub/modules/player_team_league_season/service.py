from typing import Any

from sqlalchemy.exc import IntegrityError

from ...common.parsing import parse_positive_int
from ...core.exceptions import ConflictException, NotFoundException, ValidationException
from ...domain.models import PlayerOut, PlayerTeamLeagueSeasonOut, dump_one
from .repository import KEY_COLUMNS, PlayerTeamLeagueSeasonRepository


class PlayerTeamLeagueSeasonService:
    """Kaderzugehörigkeit Spieler/Liga/Team/Saison (wird vom Spieler-Import befüllt)"""

    def __init__(self, repository: PlayerTeamLeagueSeasonRepository):
        self.repository = repository

    @staticmethod
    def _key(values: dict[str, Any]) -> dict[str, int]:
        return {col: parse_positive_int(values.get(col), col) for col in KEY_COLUMNS}

    def _require_player(self, player_id: int) -> None:
        if not self.repository.player_exists(player_id):
            raise ConflictException(f"Player {player_id} does not exist", "PLAYER_NOT_STORED")

    async def create_mapping(self, payload: dict[str, Any]) -> dict[str, int]:
        row = self._key(payload)
        self._require_player(row["player_id"])
        self.repository.upsert(row)
        return row

    async def list_players(self, league_id: Any, team_id: Any, season: Any) -> dict[str, Any]:
        filters = {
            "league_id": parse_positive_int(league_id, "league_id"),
            "team_id": parse_positive_int(team_id, "team_id"),
            "season": parse_positive_int(season, "season"),
        }
        rows = self.repository.find_with_players(**filters)
        return {
            "filters": filters,
            "total": len(rows),
            "players": [
                {**dump_one(PlayerTeamLeagueSeasonOut, row), "player": dump_one(PlayerOut, row.player)}
                for row in rows
            ],
        }

    async def update_mapping(self, identifiers: dict[str, Any], payload: dict[str, Any]) -> dict[str, Any]:
        key = self._key(identifiers)
        updates = {
            col: parse_positive_int(payload[col], col)
            for col in KEY_COLUMNS
            if payload.get(col) is not None
        }
        if not updates:
            raise ValidationException("No fields to update", "MAPPING_UPDATE_EMPTY")
        if "player_id" in updates:
            self._require_player(updates["player_id"])

        try:
            updated = self.repository.update(key, updates)
        except IntegrityError:
            raise ConflictException("Record with these values already exists", "MAPPING_CONFLICT") from None
        if not updated:
            raise NotFoundException("Record does not exist")
        return dump_one(PlayerTeamLeagueSeasonOut, self.repository.get({**key, **updates}))

    async def delete_mapping(self, identifiers: dict[str, Any]) -> None:
        if not self.repository.delete(self._key(identifiers)):
            raise NotFoundException("Record does not exist")
