"""TTL della mappa team-competition -> team."""

from ffl_stats.services.cache import TTLCache, get_team_competition_team_map, team_competition_cache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_value_expires_after_ttl():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=300, clock=clock)
    loads = []

    def loader():
        loads.append(clock.now)
        return {"n": len(loads)}

    assert cache.get_or_load(loader) == {"n": 1}
    clock.now = 299
    assert cache.get_or_load(loader) == {"n": 1}
    clock.now = 300
    assert cache.get_or_load(loader) == {"n": 2}
    assert loads == [0.0, 300]


def test_clear_forces_reload():
    cache = TTLCache(ttl_seconds=300, clock=FakeClock())
    cache.set("x")
    cache.clear()
    assert cache.get() is None


def test_team_competition_map(db_session):
    mapping = get_team_competition_team_map(db_session)
    assert mapping == {"1": "1", "2": "2", "3": "3", "4": "1", "5": "2"}
    assert team_competition_cache().get() is mapping
