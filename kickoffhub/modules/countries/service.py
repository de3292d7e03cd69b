import logging
from typing import Any

from ...common.parsing import (
    MAX_SEARCH_LIMIT,
    escape_like,
    parse_pagination,
    parse_positive_int,
    require_keyword,
)
from ...core.exceptions import NotFoundException, ValidationException
from ...domain.models import CountryOut, build_pagination, dump_many, dump_one
from .repository import CountryRepository


class CountriesService:
    def __init__(self, repository: CountryRepository):
        self.repository = repository
        self.logger = logging.getLogger("countries")

    async def list_countries(self, page: Any = None, limit: Any = None) -> dict[str, Any]:
        page_number, limit_number = parse_pagination(page, limit)
        if limit_number > MAX_SEARCH_LIMIT:
            raise ValidationException(f"Limit cannot exceed {MAX_SEARCH_LIMIT}", "LIMIT_TOO_LARGE")

        rows, count = self.repository.paginate((page_number - 1) * limit_number, limit_number)
        pagination = build_pagination(count, page_number, limit_number, with_links=True)
        if pagination["total_pages"] and page_number > pagination["total_pages"]:
            raise ValidationException("Page exceeds total pages", "PAGE_OUT_OF_RANGE")

        return {"data": dump_many(CountryOut, rows), "pagination": pagination}

    async def search_countries(
        self, name: Any = None, limit: Any = None, page: Any = None
    ) -> dict[str, Any]:
        keyword = require_keyword(name)
        page_number, limit_number = parse_pagination(page, limit)

        pattern = f"%{escape_like(keyword.lower())}%"
        rows, count = self.repository.search(
            pattern, (page_number - 1) * limit_number, limit_number
        )
        return {
            "results": dump_many(CountryOut, rows),
            "pagination": build_pagination(count, page_number, limit_number),
            "keyword": keyword,
        }

    async def get_country(self, country_id: Any) -> dict[str, Any]:
        country_id = parse_positive_int(country_id, "id")
        country = self.repository.get(country_id)
        if country is None:
            raise NotFoundException("Country does not exist")
        return dump_one(CountryOut, country)
