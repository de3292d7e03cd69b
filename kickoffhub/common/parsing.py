import re
from typing import Any

from ..core.exceptions import ValidationException

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_SEARCH_LIMIT = 100


def clean_text(s: str | None) -> str | None:
    if s is None:
        return None
    s = re.sub(r"\s+", " ", str(s).strip())
    return s or None


def parse_positive_int(value: Any, field: str, default: int | None = None) -> int:
    """Parst einen positiven Integer aus Query-/Body-Werten.

    ``None`` oder leerer String liefern ``default``; fehlt auch dieser, ist der Wert
    Pflicht. Booleans und Floats mit Nachkommastellen werden abgelehnt.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise ValidationException(f"{field} is required")
    if isinstance(value, bool):
        raise ValidationException(f"{field} must be a positive integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationException(f"{field} must be a positive integer")
        value = int(value)
    if isinstance(value, str):
        if not re.fullmatch(r"\+?\d+", value.strip()):
            raise ValidationException(f"{field} must be a positive integer")
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ValidationException(f"{field} must be a positive integer")
    return value


def parse_pagination(page: Any = None, limit: Any = None) -> tuple[int, int]:
    return (
        parse_positive_int(page, "page", DEFAULT_PAGE),
        parse_positive_int(limit, "limit", DEFAULT_LIMIT),
    )


def parse_search_limit(limit: Any = None) -> int:
    value = parse_positive_int(limit, "limit", DEFAULT_LIMIT)
    if value > MAX_SEARCH_LIMIT:
        raise ValidationException(f"limit must be between 1 and {MAX_SEARCH_LIMIT}")
    return value


def require_keyword(value: str | None, field: str = "name") -> str:
    keyword = (value or "").strip()
    if not keyword:
        raise ValidationException(f"{field} query parameter is required")
    return keyword


def escape_like(value: str) -> str:
    # backslash first, sonst werden die eigenen Escapes verdoppelt
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit if total else 0
