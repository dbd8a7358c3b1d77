"""API JSON e pagine HTML tramite TestClient."""

import pytest


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_player_graphs_api(client):
    response = client.get("/api/players/201/graphs")
    assert response.status_code == 200
    body = response.json()
    assert len(body["goals_by_opponent"]) == 3
    missing = client.get("/api/players/999/graphs")
    assert missing.status_code == 404
    assert missing.json() == {"error": "not_found"}


def test_standings_api(client):
    response = client.get("/api/competitions/11/standings")
    assert response.status_code == 200
    assert [row["name"] for row in response.json()["standings"]] == ["Alpha", "Gamma", "Beta"]
    missing = client.get("/api/competitions/999/standings")
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Competizione non trovata"}


def test_season_api(client):
    response = client.get("/api/seasons/11")
    assert response.status_code == 200
    assert len(response.json()["matches"]) == 4
    missing = client.get("/api/seasons/999")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Competición no encontrada"}


def test_teams_api(client):
    response = client.get("/api/teams", params={"q": "al"})
    assert response.status_code == 200
    assert [t["name"] for t in response.json()["teams"]] == ["Alpha"]


@pytest.mark.parametrize(
    "url",
    [
        "/",
        "/competitions",
        "/competitions/11",
        "/competitions/11?page=9",
        "/seasons/season-3",
        "/seasons/season-3?highlight=cup",
        "/teams",
        "/teams?q=be&country=AR&sort=name_desc",
        "/teams/101",
        "/teams/101?tab=1&filter=cup&outcome=win",
        "/players",
        "/players?stat1=goals&op1=gte&val1=3&competition=only_div_1",
        "/players/201",
        "/players/202?tab=1&filter=league&outcome=draw",
        "/matches/1",
        "/matches/4",
        "/elo",
    ],
)
def test_html_pages_render(client, url):
    response = client.get(url)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")


@pytest.mark.parametrize(
    "url, message",
    [
        ("/matches/999", "Partido no encontrado"),
        ("/teams/999", "Squadra non trovata"),
        ("/players/nope", "Giocatore non trovato"),
        ("/seasons/season-9", "Stagione non trovata"),
    ],
)
def test_missing_pages_render_not_found(client, url, message):
    response = client.get(url)
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/html")
    assert message in response.text


@pytest.mark.parametrize(
    "url",
    [
        "/competitions/11?page=abc",
        "/teams?page=x",
        "/teams/101?page=&roster_page=zz",
        "/players?page=abc",
        "/players/201?page=-",
    ],
)
def test_bad_page_values_fall_back_to_first_page(client, url):
    response = client.get(url)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")


def test_teams_api_clamps_page(client):
    assert client.get("/api/teams", params={"page": 0}).json()["page"] == 1
    assert client.get("/api/teams", params={"page": 99}).json()["page"] == 1
