import logging
from typing import Any

from ...common.parsing import parse_positive_int
from ...core.exceptions import NotFoundException
from ...domain.models import SeasonOut, dump_many
from .repository import SeasonRepository


class SeasonsService:
    def __init__(self, repository: SeasonRepository):
        self.repository = repository
        self.logger = logging.getLogger("seasons")

    async def list_seasons(self) -> list[dict[str, Any]]:
        return dump_many(SeasonOut, self.repository.list_ordered())

    async def create_season(self, value: Any) -> dict[str, Any]:
        """Find-or-create; ``created`` sagt, ob die Saison neu angelegt wurde"""
        value = parse_positive_int(value, "season")
        _, created = self.repository.find_or_create(value)
        if created:
            self.logger.info(f"Created season {value}")
        return {"season": value, "created": created}

    async def delete_season(self, value: Any) -> None:
        value = parse_positive_int(value, "season")
        if not self.repository.delete(value):
            raise NotFoundException("Season not found", "SEASON_NOT_FOUND")
