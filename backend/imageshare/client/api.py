"""HTTP client that keeps a :class:`Store` in sync with the server session."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import httpx

from imageshare.client.store import (
    Store,
    receive_images,
    remove_user,
    session_loaded,
    set_user,
)

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "XSRF-TOKEN"
CSRF_HEADER_NAME = "XSRF-Token"
SAFE_METHODS = ("GET", "HEAD", "OPTIONS")


class SessionRequestError(RuntimeError):
    """Raised when the server rejects a session request."""

    def __init__(self, status_code: int, errors: list[str], title: str | None = None) -> None:
        self.status_code = status_code
        self.errors = errors
        self.title = title
        super().__init__(f"{status_code}: {title or 'request failed'}")


class RequestInFlightError(RuntimeError):
    """Raised when a session mutation is started while another is pending."""


class SessionClient:
    def __init__(self, http: httpx.Client, store: Store | None = None) -> None:
        self.http = http
        self.store = store or Store()
        self._in_flight = False

    def csrf_fetch(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, echoing the CSRF cookie in a header for unsafe methods."""

        method = method.upper()
        headers = dict(kwargs.pop("headers", None) or {})
        if method not in SAFE_METHODS:
            headers.setdefault("Content-Type", "application/json")
            token = self.http.cookies.get(CSRF_COOKIE_NAME)
            if token:
                headers[CSRF_HEADER_NAME] = token
        response = self.http.request(method, url, headers=headers, **kwargs)
        if response.status_code >= 400:
            raise _request_error(response)
        return response

    @contextmanager
    def _single_flight(self) -> Iterator[None]:
        if self._in_flight:
            raise RequestInFlightError("A session request is already in flight")
        self._in_flight = True
        try:
            yield
        finally:
            self._in_flight = False

    def restore_csrf(self) -> str:
        response = self.csrf_fetch("GET", "/api/csrf/restore")
        return response.json()["XSRF-Token"]

    def restore_user(self) -> dict[str, Any] | None:
        """Bootstrap the session once; failures leave the store anonymous."""

        try:
            response = self.csrf_fetch("GET", "/api/session")
        except (httpx.HTTPError, SessionRequestError) as exc:
            logger.warning("Session restore failed: %s", exc)
            self.store.dispatch(remove_user())
        else:
            user = response.json().get("user")
            self.store.dispatch(set_user(user) if user else remove_user())
        self.store.dispatch(session_loaded())
        return self.store.current_user

    def login(self, username: str, password: str) -> dict[str, Any]:
        with self._single_flight():
            response = self.csrf_fetch("POST", "/api/session", json={"username": username, "password": password})
        user = response.json()["user"]
        self.store.dispatch(set_user(user))
        return user

    def signup(self, username: str, password: str, profile_image_url: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"username": username, "password": password}
        if profile_image_url is not None:
            body["profileImageUrl"] = profile_image_url
        with self._single_flight():
            response = self.csrf_fetch("POST", "/api/users", json=body)
        user = response.json()["user"]
        self.store.dispatch(set_user(user))
        return user

    def logout(self) -> None:
        try:
            with self._single_flight():
                self.csrf_fetch("DELETE", "/api/session")
        finally:
            self.store.dispatch(remove_user())

    def fetch_images(self, user_id: int) -> list[dict[str, Any]]:
        response = self.csrf_fetch("GET", f"/api/images/{user_id}")
        images = response.json()["images"]
        self.store.dispatch(receive_images(images))
        return images


def _request_error(response: httpx.Response) -> SessionRequestError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    return SessionRequestError(response.status_code, list(body.get("errors") or []), body.get("title"))
