"""
Database Schema
SQLAlchemy Models für die KickOffHub Referenzdaten
"""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Country(Base):
    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    code = Column(String(10))
    flag = Column(Text)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    leagues = relationship("League", back_populates="country")


class League(Base):
    __tablename__ = "leagues"

    # IDs werden vom Provider (API-Football) vergeben
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)
    type = Column(String(10))
    logo = Column(Text)
    country_id = Column(Integer, ForeignKey("countries.id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    country = relationship("Country", back_populates="leagues")


class Season(Base):
    __tablename__ = "seasons"

    season = Column(Integer, primary_key=True, autoincrement=False)


class Team(Base):
    __tablename__ = "teams"

    # IDs werden vom Provider (API-Football) vergeben, auch bei manuell angelegten Teams
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    code = Column(String(10))
    country = Column(String(255))
    founded = Column(Integer)
    national = Column(Boolean, default=False)
    logo = Column(Text)
    venue_id = Column(Integer)
    is_popular = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())


class LeagueTeamSeason(Base):
    __tablename__ = "leagues_teams_season"

    league_id = Column(Integer, primary_key=True, autoincrement=False)
    team_id = Column(Integer, primary_key=True, autoincrement=False)
    season = Column(Integer, primary_key=True, autoincrement=False)


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255))
    address = Column(String(255))
    city = Column(String(255))
    capacity = Column(Integer)
    surface = Column(String(50))
    image = Column(String(255))
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255))
    firstname = Column(String(255))
    lastname = Column(String(255))
    age = Column(Integer)
    birth_date = Column(Date)
    birth_place = Column(String(255))
    birth_country = Column(String(255))
    nationality = Column(String(255))
    height = Column(String(20))
    weight = Column(String(20))
    number = Column(Integer)
    position = Column(String(100))
    photo = Column(String(1024))
    is_popular = Column(Boolean, nullable=False, default=False)

    # Relationships
    memberships = relationship(
        "PlayerTeamLeagueSeason", back_populates="player", cascade="all, delete-orphan"
    )


class PlayerTeamLeagueSeason(Base):
    __tablename__ = "players_teams_league_season"

    player_id = Column(
        Integer, ForeignKey("players.id", ondelete="CASCADE"), primary_key=True, autoincrement=False
    )
    league_id = Column(Integer, primary_key=True, autoincrement=False)
    team_id = Column(Integer, primary_key=True, autoincrement=False)
    season = Column(Integer, primary_key=True, autoincrement=False)

    # Relationships
    player = relationship("Player", back_populates="memberships")
