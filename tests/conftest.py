"""
Fixture condivise: SQLite in memoria (StaticPool), dataset piccolo ma
completo e TestClient con get_db sovrascritto.

Dataset (stagione 3):
  lega div 1 (public_id 11): Alpha (tc1), Beta (tc2), Gamma (tc3)
    m1 Alpha 2-1 Beta (Historic), m2 Beta 0-0 Alpha, m3 Alpha 1-3 Gamma,
    m4 Beta - Gamma senza punteggio
  coppa (public_id 12): Alpha (tc4) 2-0 Beta (tc5) in m5
  summer cup 2024 (public_id 13) senza partite
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ffl_stats.core.database import Base, get_db
from ffl_stats.main import app
from ffl_stats.models import (
    Competition,
    EloPlayer,
    EloPlayerSeason,
    EloSeason,
    Goal,
    Match,
    Player,
    PlayerCompetition,
    PlayerMatchStats,
    Team,
    TeamCompetition,
    TeamMatchStats,
)
from ffl_stats.services.cache import clear_team_competition_cache


def seed(db) -> None:
    db.add_all([
        Team(id=1, public_id=101, name="Alpha", country="ES", image="/alpha.png"),
        Team(id=2, public_id=102, name="Beta", country="AR"),
        Team(id=3, public_id=103, name="Gamma", country="ES"),
    ])
    db.add_all([
        Competition(
            id=1, public_id=11, name="Liga", type="league", season=3, division=1,
            start_date=date(2024, 3, 1), end_date=date(2024, 3, 31), status="finished",
            champion_team_id=1, team_count=3, match_count=4,
        ),
        Competition(
            id=2, public_id=12, name="Copa", type="cup", season=3,
            start_date=date(2024, 4, 1), end_date=date(2024, 4, 30), status="finished",
            team_count=2, match_count=1,
        ),
        Competition(
            id=3, public_id=13, name="Summer", type="summer_cup", year=2024,
            start_date=date(2024, 7, 1), status="upcoming",
        ),
    ])
    db.add_all([
        TeamCompetition(
            id=1, team_id=1, competition_id=1, matches_played=3, won=1, draw=1, lost=1,
            goals_scored=3, goals_conceded=4, cs=1, points=4, possession_avg=50,
            kits=[{"image": "/kit-alpha.png", "color": "#000000"}],
        ),
        TeamCompetition(
            id=2, team_id=2, competition_id=1, matches_played=2, draw=1, lost=1,
            goals_scored=1, goals_conceded=2, cs=1, points=1, possession_avg=45, kits=[],
        ),
        TeamCompetition(
            id=3, team_id=3, competition_id=1, matches_played=1, won=1,
            goals_scored=3, goals_conceded=1, points=3, possession_avg=60, kits=[],
        ),
        TeamCompetition(
            id=4, team_id=1, competition_id=2, matches_played=1, won=1,
            goals_scored=2, cs=1, points=3, possession_avg=60, kits=[],
        ),
        TeamCompetition(
            id=5, team_id=2, competition_id=2, matches_played=1, lost=1,
            goals_conceded=2, possession_avg=40, kits=[],
        ),
    ])
    db.add_all([
        Player(id=1, public_id=201, name="Ana Lopez", country="ES"),
        Player(id=2, public_id=202, name="Bruno Diaz", country="AR"),
        Player(id=3, public_id=203, name="Carla Ruiz", country="AR"),
        Player(id=4, public_id=204, name="Dario Gil", country="ES"),
        Player(id=5, public_id=205, name="Eva Sol", country="ES"),
    ])
    db.add_all([
        PlayerCompetition(
            id=1, player_id=1, team_competition_id=1, position="ST", matches_played=3,
            won=1, draw=1, lost=1, goals=2, kicks=10, passes=20, minutes_played=1800, avg=7.0,
        ),
        PlayerCompetition(
            id=2, player_id=2, team_competition_id=1, position="GK", matches_played=3,
            won=1, draw=1, lost=1, assists=1, saves=5, cs=1, goals_conceded=4, avg=6.5,
        ),
        PlayerCompetition(id=3, player_id=3, team_competition_id=2, position="ST", matches_played=2, goals=1),
        PlayerCompetition(id=4, player_id=4, team_competition_id=3, position="ST", matches_played=1, won=1, goals=3),
        PlayerCompetition(
            id=5, player_id=1, team_competition_id=4, position="ST", matches_played=1, won=1, goals=1, avg=8.0,
        ),
        PlayerCompetition(
            id=6, player_id=2, team_competition_id=4, position="GK", matches_played=1, won=1, assists=1, cs=1,
        ),
    ])
    db.add_all([
        Match(id=1, competition_id=1, team1_competition_id=1, team2_competition_id=2,
              date=datetime(2024, 3, 10, 20, 0), score_team1=2, score_team2=1, comments="Historic"),
        Match(id=2, competition_id=1, team1_competition_id=2, team2_competition_id=1,
              date=datetime(2024, 3, 17, 20, 0), score_team1=0, score_team2=0),
        Match(id=3, competition_id=1, team1_competition_id=1, team2_competition_id=3,
              date=datetime(2024, 3, 24, 20, 0), score_team1=1, score_team2=3),
        Match(id=4, competition_id=1, team1_competition_id=2, team2_competition_id=3,
              date=datetime(2024, 3, 31, 20, 0)),
        Match(id=5, competition_id=2, team1_competition_id=4, team2_competition_id=5,
              date=datetime(2024, 4, 10, 20, 0), score_team1=2, score_team2=0),
    ])
    db.add_all([
        PlayerMatchStats(id=1, match_id=1, player_competition_id=1, team_competition_id=1, position="ST",
                         goals=1, kicks=4, minutes_played=600, avg=7.5),
        PlayerMatchStats(id=2, match_id=1, player_competition_id=2, team_competition_id=1, position="GK",
                         assists=1, goals_conceded=1, saves=2),
        PlayerMatchStats(id=3, match_id=1, player_competition_id=3, team_competition_id=2, position="ST", goals=1),
        PlayerMatchStats(id=4, match_id=2, player_competition_id=1, team_competition_id=1, position="ST",
                         kicks=3, cs=1),
        PlayerMatchStats(id=5, match_id=2, player_competition_id=2, team_competition_id=1, position="GK", cs=1),
        PlayerMatchStats(id=6, match_id=3, player_competition_id=1, team_competition_id=1, position="ST",
                         goals=1, kicks=3),
        PlayerMatchStats(id=7, match_id=3, player_competition_id=2, team_competition_id=1, position="GK",
                         goals_conceded=3),
        PlayerMatchStats(id=8, match_id=3, player_competition_id=4, team_competition_id=3, position="ST", goals=3),
        PlayerMatchStats(id=9, match_id=5, player_competition_id=5, team_competition_id=4, position="ST",
                         goals=1, kicks=2, cs=1),
        PlayerMatchStats(id=10, match_id=5, player_competition_id=6, team_competition_id=4, position="GK",
                         assists=1, cs=1),
    ])
    db.add_all([
        TeamMatchStats(id=1, match_id=1, team_competition_id=1, won=1, goals_scored=2, goals_conceded=1,
                       points=3, possession=550, kicks=10, passes=30, shots_on_goal=4),
        TeamMatchStats(id=2, match_id=1, team_competition_id=2, lost=1, goals_scored=1, goals_conceded=2,
                       possession=450, kicks=8, passes=20, shots_on_goal=2),
        TeamMatchStats(id=3, match_id=2, team_competition_id=1, draw=1, cs=1, points=1, possession=500),
        TeamMatchStats(id=4, match_id=2, team_competition_id=2, draw=1, cs=1, points=1, possession=500),
        TeamMatchStats(id=5, match_id=3, team_competition_id=1, lost=1, goals_scored=1, goals_conceded=3,
                       possession=480),
        TeamMatchStats(id=6, match_id=3, team_competition_id=3, won=1, goals_scored=3, goals_conceded=1,
                       points=3, possession=520),
        TeamMatchStats(id=7, match_id=5, team_competition_id=4, won=1, goals_scored=2, cs=1, points=3,
                       possession=600),
        TeamMatchStats(id=8, match_id=5, team_competition_id=5, lost=1, goals_conceded=2, possession=400),
    ])
    db.add_all([
        Goal(id=1, match_id=1, team_competition_id=1, scorer_id=1, assist_id=2, minute=5),
        Goal(id=2, match_id=1, team_competition_id=2, scorer_id=3, minute=9),
        Goal(id=3, match_id=3, team_competition_id=1, scorer_id=1, minute=3),
        Goal(id=4, match_id=3, team_competition_id=3, scorer_id=4, minute=4),
        Goal(id=5, match_id=3, team_competition_id=3, scorer_id=4, minute=7),
        Goal(id=6, match_id=3, team_competition_id=3, scorer_id=4, minute=11),
        Goal(id=7, match_id=5, team_competition_id=4, scorer_id=5, assist_id=6, minute=2),
    ])
    db.add_all([
        EloSeason(id=1, name="S1", is_active=True),
        EloPlayer(id=1, name="Ana", elo=1200, wins=10, losses=5, matches=15),
        EloPlayer(id=2, name="Bruno", elo=1100, wins=3, losses=1, matches=4),
    ])
    db.flush()
    db.add_all([
        EloPlayerSeason(id=1, elo_player_id=1, elo_season_id=1, elo=1050, wins=2, losses=0, matches=2),
        EloPlayerSeason(id=2, elo_player_id=2, elo_season_id=1, elo=1080, wins=1, losses=3, matches=4),
    ])
    db.commit()


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    seed(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_team_competition_cache()
    yield
    clear_team_competition_cache()
