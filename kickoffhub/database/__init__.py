"""
Database Module
Schema und DatabaseManager
"""

from .manager import DatabaseManager
from .schema import Base, Country, League, LeagueTeamSeason, Season, Team

__all__ = [
    "DatabaseManager",
    "Base",
    "Country",
    "League",
    "Season",
    "Team",
    "LeagueTeamSeason",
]
