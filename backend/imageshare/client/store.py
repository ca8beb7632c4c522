"""Client-side state container for the current session and per-user caches.

State is a plain dict ``{"session": {...}, "images": [...]}`` replaced on every
dispatch. Reducers are pure functions of ``(state, action)``. Per-user caches
react to ``REMOVE_USER`` so nothing from a previous session survives logout.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

Action = dict[str, Any]
Reducer = Callable[[Any, Action], Any]
Listener = Callable[[dict[str, Any]], None]

SET_USER = "session/setUser"
REMOVE_USER = "session/removeUser"
SESSION_LOADED = "session/loaded"
RECEIVE_IMAGES = "images/receiveImages"


def set_user(user: dict[str, Any]) -> Action:
    return {"type": SET_USER, "payload": user}


def remove_user() -> Action:
    return {"type": REMOVE_USER}


def session_loaded() -> Action:
    return {"type": SESSION_LOADED}


def receive_images(images: list[dict[str, Any]]) -> Action:
    return {"type": RECEIVE_IMAGES, "images": images}


SESSION_INITIAL_STATE: dict[str, Any] = {"user": None, "loaded": False}


def session_reducer(state: dict[str, Any] | None, action: Action) -> dict[str, Any]:
    if state is None:
        state = SESSION_INITIAL_STATE
    kind = action.get("type")
    if kind == SET_USER:
        return {**state, "user": action["payload"]}
    if kind == REMOVE_USER:
        return {**state, "user": None}
    if kind == SESSION_LOADED:
        return {**state, "loaded": True}
    return state


def images_reducer(state: list[dict[str, Any]] | None, action: Action) -> list[dict[str, Any]]:
    if state is None:
        state = []
    kind = action.get("type")
    if kind == RECEIVE_IMAGES:
        return [*state, *action["images"]]
    if kind == REMOVE_USER:
        return []
    return state


def combine_reducers(reducers: dict[str, Reducer]) -> Reducer:
    def combined(state: dict[str, Any] | None, action: Action) -> dict[str, Any]:
        state = state or {}
        return {key: reducer(state.get(key), action) for key, reducer in reducers.items()}

    return combined


root_reducer = combine_reducers({"session": session_reducer, "images": images_reducer})


class Store:
    """Holds state and notifies subscribers after each dispatch."""

    def __init__(self, reducer: Reducer = root_reducer) -> None:
        self._reducer = reducer
        self._state = reducer(None, {"type": "@@init"})
        self._listeners: list[Listener] = []

    @property
    def state(self) -> dict[str, Any]:
        return self._state

    @property
    def current_user(self) -> dict[str, Any] | None:
        return self._state["session"]["user"]

    @property
    def is_loaded(self) -> bool:
        return self._state["session"]["loaded"]

    def dispatch(self, action: Action) -> Action:
        self._state = self._reducer(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
