from fastapi.testclient import TestClient

from server.app import create_app
from server.registry import SessionRegistry
from tests.fakes import FakeSynonyms, RecordingTransport, ScriptedWordSource
from wordwizard import GameConfig, LeaderboardService
from wordwizard.exceptions import TransportError


def _registry(words, synonyms=None, leaderboard=None, config=None) -> SessionRegistry:
    return SessionRegistry(
        ScriptedWordSource(words),
        synonyms or FakeSynonyms(["world"]),
        leaderboard,
        config or GameConfig(win_delay=60, loss_delay=60),
    )


def _create_session(client: TestClient, player_name: str = "Ann") -> str:
    resp = client.post("/sessions", json={"player_name": player_name})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert "session_id" in data and isinstance(data["session_id"], str)
    assert data["snapshot"]["phase"] == "active"
    return data["session_id"]


def test_create_session_and_snapshot():
    with TestClient(create_app(_registry(["planet"]))) as client:
        sid = _create_session(client)

        snap = client.get(f"/sessions/{sid}")
        assert snap.status_code == 200
        data = snap.json()

        assert data["player_name"] == "Ann"
        assert data["level"] == 1
        assert data["score"] == 100
        assert data["attempts_left"] == 10
        assert data["revealed_word"] is None


def test_unknown_session_is_404():
    with TestClient(create_app(_registry(["planet"]))) as client:
        assert client.get("/sessions/doesnotexist").status_code == 404
        assert client.post("/sessions/doesnotexist/guess", json={"guess": "x"}).status_code == 404
        assert client.delete("/sessions/doesnotexist").status_code == 404


def test_wrong_then_correct_guess():
    with TestClient(create_app(_registry(["planet", "asteroid"]))) as client:
        sid = _create_session(client)

        wrong = client.post(f"/sessions/{sid}/guess", json={"guess": "moon"})
        assert wrong.status_code == 200
        assert wrong.json() == {
            "correct": False,
            "score": 90,
            "attempts_left": 9,
            "phase": "active",
            "revealed_word": None,
        }

        right = client.post(f"/sessions/{sid}/guess", json={"guess": "Planet"})
        assert right.json()["correct"] is True
        assert right.json()["phase"] == "won"

        # Won sessions accept no further guesses until the next word arrives
        again = client.post(f"/sessions/{sid}/guess", json={"guess": "planet"})
        assert again.status_code == 409
        assert again.json()["reason"] == "not_active"


def test_empty_guess_is_rejected():
    with TestClient(create_app(_registry(["planet"]))) as client:
        sid = _create_session(client)

        resp = client.post(f"/sessions/{sid}/guess", json={"guess": "   "})

        assert resp.status_code == 409
        assert resp.json()["accepted"] is False
        assert resp.json()["reason"] == "empty_guess"
        assert client.get(f"/sessions/{sid}").json()["score"] == 100


def test_assists_and_hint():
    with TestClient(create_app(_registry(["banana"]))) as client:
        sid = _create_session(client)

        letter = client.post(f"/sessions/{sid}/letter", json={"letter": "A"})
        assert letter.json() == {"letter": "a", "count": 3, "score": 95}

        length = client.post(f"/sessions/{sid}/length")
        assert length.json() == {"length": 6, "score": 90}

        locked = client.post(f"/sessions/{sid}/hint")
        assert locked.status_code == 409
        assert locked.json()["reason"] == "hint_locked"

        for _ in range(5):
            client.post(f"/sessions/{sid}/guess", json={"guess": "wrong"})

        hint = client.post(f"/sessions/{sid}/hint")
        assert hint.status_code == 200
        assert hint.json() == {"hint": "world", "fallback": False, "score": 35}


def test_loss_reveals_word_then_new_game():
    with TestClient(create_app(_registry(["planet", "orbit"]))) as client:
        sid = _create_session(client)

        for _ in range(9):
            client.post(f"/sessions/{sid}/guess", json={"guess": "wrong"})
        last = client.post(f"/sessions/{sid}/guess", json={"guess": "wrong"})
        assert last.json()["phase"] == "lost"
        assert last.json()["revealed_word"] == "planet"

        restarted = client.post(f"/sessions/{sid}/new-game")
        assert restarted.status_code == 200
        assert restarted.json()["phase"] == "active"
        assert restarted.json()["level"] == 1
        assert restarted.json()["revealed_word"] is None


def test_events_endpoint_pages_by_index():
    with TestClient(create_app(_registry(["planet"]))) as client:
        sid = _create_session(client)
        client.post(f"/sessions/{sid}/guess", json={"guess": "moon"})

        all_events = client.get(f"/sessions/{sid}/events").json()["events"]
        assert [e["event_type"] for e in all_events] == [
            "game_start", "word_requested", "word_bound", "guess_wrong",
        ]

        tail = client.get(f"/sessions/{sid}/events", params={"since": 3}).json()
        assert tail["since"] == 3
        assert [(e["index"], e["event_type"]) for e in tail["events"]] == [(3, "guess_wrong")]


def test_delete_session():
    with TestClient(create_app(_registry(["planet"]))) as client:
        sid = _create_session(client)

        assert client.delete(f"/sessions/{sid}").json() == {"session_id": sid, "closed": True}
        assert client.get(f"/sessions/{sid}").status_code == 404


def test_leaderboard_ranks_entries():
    transport = RecordingTransport(body="Alice|100|75|Level3|2024-01-01\nBob|oops|1\nCara|90|30|Level1|2024-01-02\n")
    with TestClient(create_app(_registry(["planet"], leaderboard=LeaderboardService(transport)))) as client:
        resp = client.get("/leaderboard", params={"limit": 10})

        assert resp.status_code == 200
        data = resp.json()
        assert data["limit"] == 10
        assert [(e["rank"], e["name"], e["time"]) for e in data["entries"]] == [
            (1, "Alice", "01:15"),
            (2, "Cara", "00:30"),
        ]
        assert transport.fetched_limits == [10]


def test_leaderboard_unconfigured_and_failing():
    with TestClient(create_app(_registry(["planet"]))) as client:
        assert client.get("/leaderboard").status_code == 503

    failing = LeaderboardService(RecordingTransport(error=TransportError("Failed to fetch leaderboard", 500)))
    with TestClient(create_app(_registry(["planet"], leaderboard=failing))) as client:
        assert client.get("/leaderboard", params={"limit": 5}).status_code == 502


def test_winning_submits_score():
    transport = RecordingTransport()
    with TestClient(create_app(_registry(["planet"], leaderboard=LeaderboardService(transport)))) as client:
        sid = _create_session(client, player_name="Jo hn")
        client.post(f"/sessions/{sid}/guess", json={"guess": "planet"})

        events = client.get(f"/sessions/{sid}/events").json()["events"]

        assert "score_submission" in [e["event_type"] for e in events]
        assert len(transport.payloads) == 1
        assert transport.payloads[0].startswith("John/100/")
        assert transport.payloads[0].endswith("/Level1")


def test_hint_for_replaced_word_reports_stale():
    sessions = []
    synonyms = FakeSynonyms(["world"], on_call=lambda: sessions[0].start_new_game())
    registry = _registry(["planet", "orbit"], synonyms=synonyms)
    with TestClient(create_app(registry)) as client:
        sid = _create_session(client)
        sessions.append(registry._sessions[sid])
        for _ in range(5):
            client.post(f"/sessions/{sid}/guess", json={"guess": "wrong"})

        resp = client.post(f"/sessions/{sid}/hint")

        assert resp.status_code == 409
        assert resp.json()["reason"] == "stale"


def test_events_endpoint_with_capped_log():
    config = GameConfig(win_delay=60, loss_delay=60, event_log_limit=3)
    with TestClient(create_app(_registry(["planet"], config=config))) as client:
        sid = _create_session(client)
        for _ in range(3):
            client.post(f"/sessions/{sid}/guess", json={"guess": "moon"})

        events = client.get(f"/sessions/{sid}/events").json()["events"]

        assert [e["index"] for e in events] == [3, 4, 5]
        assert all(e["event_type"] == "guess_wrong" for e in events)
        assert client.get(f"/sessions/{sid}").json()["event_count"] == 6
