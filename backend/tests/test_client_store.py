from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from imageshare.client.api import RequestInFlightError, SessionClient, SessionRequestError
from imageshare.client.store import (
    Store,
    images_reducer,
    receive_images,
    remove_user,
    session_loaded,
    session_reducer,
    set_user,
)

ALICE = {"id": 1, "username": "alice123", "profileImageUrl": None}


def test_session_reducer_transitions() -> None:
    state = session_reducer(None, {"type": "@@init"})
    assert state == {"user": None, "loaded": False}

    state = session_reducer(state, set_user(ALICE))
    assert state["user"] == ALICE

    state = session_reducer(state, session_loaded())
    state = session_reducer(state, remove_user())
    assert state == {"user": None, "loaded": True}


def test_images_cache_cleared_on_remove_user() -> None:
    state = images_reducer(None, receive_images([{"id": 1}]))
    state = images_reducer(state, receive_images([{"id": 2}]))
    assert [image["id"] for image in state] == [1, 2]

    assert images_reducer(state, remove_user()) == []
    assert images_reducer(state, set_user(ALICE)) is state


def test_store_notifies_subscribers_until_unsubscribed() -> None:
    store = Store()
    seen = []
    unsubscribe = store.subscribe(lambda state: seen.append(state["session"]["user"]))

    store.dispatch(set_user(ALICE))
    unsubscribe()
    store.dispatch(remove_user())

    assert seen == [ALICE]
    assert store.current_user is None


def test_restore_marks_loaded_even_when_anonymous(client: TestClient) -> None:
    session = SessionClient(client)
    assert not session.store.is_loaded

    assert session.restore_user() is None
    assert session.store.is_loaded


def test_restore_failure_leaves_store_anonymous() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    http = httpx.Client(base_url="http://testserver", transport=httpx.MockTransport(refuse))
    session = SessionClient(http)

    assert session.restore_user() is None
    assert session.store.is_loaded


def test_client_session_round_trip(client: TestClient) -> None:
    session = SessionClient(client)
    session.restore_csrf()

    user = session.signup("alice123", "secret1")
    assert session.store.current_user == user
    assert "hashedPassword" not in user
    assert client.cookies["token"] not in str(session.store.state)

    session.store.dispatch(receive_images([{"id": 99, "key": "stale"}]))

    session.logout()
    assert session.store.current_user is None
    assert session.store.state["images"] == []

    assert session.login("alice123", "secret1")["id"] == user["id"]
    assert session.restore_user()["id"] == user["id"]

    stored = session.csrf_fetch("POST", "/api/images", json={"key": "uploads/a.png"})
    assert stored.status_code == 201
    images = session.fetch_images(user["id"])
    assert [image["key"] for image in images] == ["uploads/a.png"]
    assert session.store.state["images"] == images


def test_failed_login_raises_and_keeps_state(client: TestClient) -> None:
    session = SessionClient(client)
    session.restore_csrf()

    with pytest.raises(SessionRequestError) as excinfo:
        session.login("nobody123", "secret1")

    assert excinfo.value.status_code == 401
    assert excinfo.value.errors == ["The provided credentials were invalid."]
    assert session.store.current_user is None


def test_mutations_are_single_flight(client: TestClient) -> None:
    session = SessionClient(client)
    session.restore_csrf()

    with session._single_flight():
        with pytest.raises(RequestInFlightError):
            session.login("alice123", "secret1")
