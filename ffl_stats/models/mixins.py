"""Colonne statistiche condivise tra aggregato per competizione e riga per partita."""

from sqlalchemy import Column, Float, Integer

# Contatori giocatore sommabili: stesso nome in player_competitions e player_match_stats.
PLAYER_COUNTER_FIELDS = (
    "won",
    "draw",
    "lost",
    "starter",
    "substitute",
    "minutes_played",
    "goals",
    "assists",
    "preassists",
    "kicks",
    "passes",
    "passes_forward",
    "passes_lateral",
    "passes_backward",
    "keypass",
    "autopass",
    "misspass",
    "shots_on_goal",
    "shots_off_goal",
    "shots_defended",
    "saves",
    "clearances",
    "recoveries",
    "goals_conceded",
    "cs",
    "owngoals",
)


class PlayerCounterColumns:
    won = Column(Integer, nullable=False, default=0)
    draw = Column(Integer, nullable=False, default=0)
    lost = Column(Integer, nullable=False, default=0)
    starter = Column(Integer, nullable=False, default=0)
    substitute = Column(Integer, nullable=False, default=0)
    minutes_played = Column(Integer, nullable=False, default=0)
    goals = Column(Integer, nullable=False, default=0)
    assists = Column(Integer, nullable=False, default=0)
    preassists = Column(Integer, nullable=False, default=0)
    kicks = Column(Integer, nullable=False, default=0)
    passes = Column(Integer, nullable=False, default=0)
    passes_forward = Column(Integer, nullable=False, default=0)
    passes_lateral = Column(Integer, nullable=False, default=0)
    passes_backward = Column(Integer, nullable=False, default=0)
    keypass = Column(Integer, nullable=False, default=0)
    autopass = Column(Integer, nullable=False, default=0)
    misspass = Column(Integer, nullable=False, default=0)
    shots_on_goal = Column(Integer, nullable=False, default=0)
    shots_off_goal = Column(Integer, nullable=False, default=0)
    shots_defended = Column(Integer, nullable=False, default=0)
    saves = Column(Integer, nullable=False, default=0)
    clearances = Column(Integer, nullable=False, default=0)
    recoveries = Column(Integer, nullable=False, default=0)
    goals_conceded = Column(Integer, nullable=False, default=0)
    cs = Column(Integer, nullable=False, default=0)
    owngoals = Column(Integer, nullable=False, default=0)
    avg = Column(Float, nullable=True)
