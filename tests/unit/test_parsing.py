import pytest

from kickoffhub.common.parsing import (
    clean_text,
    escape_like,
    parse_pagination,
    parse_positive_int,
    parse_search_limit,
    require_keyword,
    total_pages,
)
from kickoffhub.core.exceptions import ValidationException
from kickoffhub.domain.models import build_pagination


def test_parse_positive_int_accepts_ints_and_numeric_strings():
    assert parse_positive_int(5, "x") == 5
    assert parse_positive_int("12", "x") == 12
    assert parse_positive_int(" +7 ", "x") == 7
    assert parse_positive_int(3.0, "x") == 3


@pytest.mark.parametrize("value", [0, -1, "abc", "1.5", 2.5, True, "12abc"])
def test_parse_positive_int_rejects(value):
    with pytest.raises(ValidationException) as exc:
        parse_positive_int(value, "league")
    assert exc.value.status_code == 400
    assert "league" in exc.value.message


def test_parse_positive_int_default_and_required():
    assert parse_positive_int(None, "page", 1) == 1
    assert parse_positive_int("  ", "page", 4) == 4
    with pytest.raises(ValidationException, match="season is required"):
        parse_positive_int(None, "season")


def test_pagination_defaults():
    assert parse_pagination() == (1, 20)
    assert parse_pagination("3", "50") == (3, 50)


def test_search_limit_bounds():
    assert parse_search_limit(None) == 20
    assert parse_search_limit("100") == 100
    with pytest.raises(ValidationException):
        parse_search_limit("101")


def test_require_keyword():
    assert require_keyword("  ars ") == "ars"
    with pytest.raises(ValidationException, match="name query parameter is required"):
        require_keyword("   ")


def test_escape_like():
    assert escape_like("100%_a\\b") == "100\\%\\_a\\\\b"


def test_clean_text():
    assert clean_text("  Man   United ") == "Man United"
    assert clean_text("   ") is None
    assert clean_text(None) is None


def test_total_pages_and_pagination_block():
    assert total_pages(0, 20) == 0
    assert total_pages(41, 20) == 3
    assert build_pagination(41, 1, 20) == {
        "total_items": 41,
        "total_pages": 3,
        "page": 1,
        "limit": 20,
    }
    links = build_pagination(41, 3, 20, with_links=True)
    assert links["has_next_page"] is False
    assert links["has_prev_page"] is True
