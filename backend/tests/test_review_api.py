import uuid
from datetime import date, timedelta

from fastapi.testclient import TestClient

from flashbox.api.dependencies import get_store
from flashbox.core.config import settings
from flashbox.core.exceptions import PersistenceError
from flashbox.domain.review.policy import BOX_INTERVALS
from flashbox.main import app

TODAY = date(2024, 3, 4)


def _start(client, headers, **payload):
    response = client.post("/review/sessions", headers=headers, json=payload)
    assert response.status_code == 201
    return response.json()


class TestStartSession:
    """POST /review/sessions"""

    def test_empty_session_is_exhausted(self, client: TestClient, headers):
        data = _start(client, headers)

        assert data["exhausted"] is True
        assert data["current"] is None
        assert data["remaining"] == 0

    def test_session_presents_lowest_box_first(self, client: TestClient, headers, make_card):
        make_card(box=3)
        low = make_card(box=1)

        data = _start(client, headers)

        assert data["current"]["id"] == str(low.id)
        assert data["remaining"] == 2
        assert data["summary"]["total"] == 2

    def test_scoped_to_decks(self, client: TestClient, headers, make_card):
        make_card()

        data = _start(client, headers, deck_ids=[str(uuid.uuid4())])

        assert data["exhausted"] is True


class TestReportOutcome:
    """POST /review/sessions/{session_id}/outcome"""

    def test_remembered_card_leaves_due_set(self, client: TestClient, headers, make_card, store):
        card = make_card(box=1)
        session = _start(client, headers)

        response = client.post(
            f"/review/sessions/{session['session_id']}/outcome",
            headers=headers,
            json={"outcome": "remembered"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["box"] == 2
        assert data["next_review_date"] == (TODAY + timedelta(days=BOX_INTERVALS[2])).isoformat()
        assert data["synced"] is True
        assert data["session"]["exhausted"] is True
        assert data["session"]["summary"]["remembered"] == 1

        assert store.get_flashcard(card.id).box == 2
        assert client.get("/flashcards/due", headers=headers).json() == []

    def test_invalid_outcome(self, client: TestClient, headers, make_card):
        make_card()
        session = _start(client, headers)

        response = client.post(
            f"/review/sessions/{session['session_id']}/outcome",
            headers=headers,
            json={"outcome": "easy"},
        )
        assert response.status_code == 422

    def test_outcome_on_exhausted_session(self, client: TestClient, headers):
        session = _start(client, headers)

        response = client.post(
            f"/review/sessions/{session['session_id']}/outcome",
            headers=headers,
            json={"outcome": "forgotten"},
        )
        assert response.status_code == 409

    def test_unsynced_write_is_flagged(self, client: TestClient, headers, make_card, store, monkeypatch):
        make_card(box=2)
        next_card = make_card(box=3)

        class OfflineStore:
            def get_flashcards(self, *args, **kwargs):
                return store.get_flashcards(*args, **kwargs)

            def get_flashcard(self, flashcard_id):
                return store.get_flashcard(flashcard_id)

            def update_schedule(self, *args):
                raise PersistenceError("offline")

        monkeypatch.setattr(settings, "PERSIST_RETRY_DELAY_SECONDS", 0)
        app.dependency_overrides[get_store] = lambda: OfflineStore()

        session = _start(client, headers)
        response = client.post(
            f"/review/sessions/{session['session_id']}/outcome",
            headers=headers,
            json={"outcome": "forgotten"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["synced"] is False
        assert data["session"]["summary"]["unsynced"] == 1
        assert data["session"]["current"]["id"] == str(next_card.id)

    def test_card_deleted_while_shown(self, client: TestClient, headers, make_card):
        card = make_card(box=2)
        session = _start(client, headers)
        assert session["current"]["id"] == str(card.id)

        assert client.delete(f"/flashcards/{card.id}", headers=headers).status_code == 204

        response = client.post(
            f"/review/sessions/{session['session_id']}/outcome",
            headers=headers,
            json={"outcome": "remembered"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["deleted"] is True
        assert data["session"]["exhausted"] is True
        assert data["session"]["summary"]["remembered"] == 0
        assert data["session"]["summary"]["dropped"] == 1


class TestSkipAndAbandon:
    def test_skip_keeps_card_due(self, client: TestClient, headers, make_card):
        card = make_card()
        session = _start(client, headers)

        response = client.post(f"/review/sessions/{session['session_id']}/skip", headers=headers)

        assert response.status_code == 200
        assert response.json()["exhausted"] is True
        assert response.json()["summary"]["skipped"] == 1
        due = client.get("/flashcards/due", headers=headers).json()
        assert [c["id"] for c in due] == [str(card.id)]

    def test_get_session_state(self, client: TestClient, headers, make_card):
        card = make_card()
        session = _start(client, headers)

        response = client.get(f"/review/sessions/{session['session_id']}", headers=headers)

        assert response.status_code == 200
        assert response.json()["current"]["id"] == str(card.id)

    def test_session_deleted_mid_review(self, client: TestClient, headers, make_card):
        a = make_card(box=1)
        b = make_card(box=2)
        c = make_card(box=3)
        session = _start(client, headers)
        sid = session["session_id"]

        client.delete(f"/flashcards/{b.id}", headers=headers)

        first = client.post(f"/review/sessions/{sid}/outcome", headers=headers, json={"outcome": "remembered"})
        assert first.json()["flashcard_id"] == str(a.id)
        assert first.json()["session"]["current"]["id"] == str(c.id)

        second = client.post(f"/review/sessions/{sid}/outcome", headers=headers, json={"outcome": "remembered"})
        assert second.json()["session"]["exhausted"] is True

    def test_abandon(self, client: TestClient, headers):
        session = _start(client, headers)
        sid = session["session_id"]

        assert client.delete(f"/review/sessions/{sid}", headers=headers).status_code == 204
        assert client.get(f"/review/sessions/{sid}", headers=headers).status_code == 404

    def test_other_owner_cannot_drive_session(self, client: TestClient, headers):
        session = _start(client, headers)

        response = client.get(
            f"/review/sessions/{session['session_id']}",
            headers={"X-Owner-Id": str(uuid.uuid4())},
        )
        assert response.status_code == 404


class UnavailableStore:
    def get_flashcards(self, *args, **kwargs):
        raise PersistenceError("database is down")

    def get_flashcard(self, flashcard_id):
        raise PersistenceError("database is down")

    def update_schedule(self, *args):
        raise PersistenceError("database is down")

    def box_counts(self, *args, **kwargs):
        raise PersistenceError("database is down")


class TestStoreUnavailable:
    """Read failures surface as 503 instead of an unhandled error."""

    def test_start_session(self, client: TestClient, headers):
        app.dependency_overrides[get_store] = lambda: UnavailableStore()

        response = client.post("/review/sessions", headers=headers, json={})

        assert response.status_code == 503
        assert response.json()["detail"] == "Flashcards temporarily unavailable"

    def test_due_flashcards(self, client: TestClient, headers):
        app.dependency_overrides[get_store] = lambda: UnavailableStore()

        assert client.get("/flashcards/due", headers=headers).status_code == 503

    def test_flashcard_stats(self, client: TestClient, headers):
        app.dependency_overrides[get_store] = lambda: UnavailableStore()

        assert client.get("/flashcards/stats", headers=headers).status_code == 503

    def test_list_flashcards(self, client: TestClient, headers):
        app.dependency_overrides[get_store] = lambda: UnavailableStore()

        assert client.get("/flashcards/", headers=headers).status_code == 503
