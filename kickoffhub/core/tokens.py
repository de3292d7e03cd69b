"""Well-known container keys shared by the bootstrap and the feature modules."""

from __future__ import annotations


class Tokens:
    # Infrastructure
    SETTINGS = "settings"
    LOGGER = "logger"
    DATABASE = "database"
    CACHE = "cache"
    METRICS = "metrics"

    # Services
    API_FOOTBALL = "services.api_football"
    COUNTRIES = "services.countries"
    LEAGUES = "services.leagues"
    SEASONS = "services.seasons"
    LEAGUE_TEAM_SEASON = "services.league_team_season"
    TEAMS = "services.teams"
    VENUES = "services.venues"
    PLAYERS = "services.players"
    PLAYER_TEAM_LEAGUE_SEASON = "services.player_team_league_season"

    # Queues
    TEAM_IMPORT_QUEUE = "queues.team_import"


__all__ = ["Tokens"]
