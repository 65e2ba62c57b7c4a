"""HTTP client for the Taskboard API.

The client never stores credentials on the underlying ``httpx.Client``.
Every authenticated request builds its ``Authorization`` header from the
current :class:`SessionState`, so two clients sharing one transport cannot
leak a token into each other's requests.
"""

import enum
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

import httpx

from app.errors import (
    AuthenticationError,
    AuthorizationError,
    CredentialsError,
    NotFoundError,
    TaskboardError,
    ValidationError,
)

logger = logging.getLogger("taskboard.client")


class SessionStatus(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the client's view of the server session."""

    status: SessionStatus = SessionStatus.READY
    token: str | None = None
    user: dict | None = None
    error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.READY and self.token is not None and self.user is not None


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    detail = payload.get("detail") if isinstance(payload, dict) else None
    detail = detail if isinstance(detail, str) else response.reason_phrase

    if response.status_code == 422:
        errors = payload.get("errors", {}) if isinstance(payload, dict) else {}
        raise ValidationError(errors, detail)
    if response.status_code == 401:
        if isinstance(payload, dict) and payload.get("error") == CredentialsError.error_code:
            raise CredentialsError(detail)
        raise AuthenticationError(detail)
    if response.status_code == 403:
        raise AuthorizationError(detail)
    if response.status_code == 404:
        raise NotFoundError(detail)
    error = TaskboardError(detail)
    error.status_code = response.status_code
    raise error


def _task_payload(
    title: str,
    description: str | None,
    due_date: date | str | None,
    completed: bool,
    priority: str | None,
) -> dict[str, Any]:
    if isinstance(due_date, date):
        due_date = due_date.isoformat()
    return {
        "title": title,
        "description": description,
        "due_date": due_date,
        "completed": completed,
        "priority": priority,
    }


class TaskboardClient:
    """Synchronous API client holding an explicit session state."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: httpx.Client | None = None,
        token: str | None = None,
    ) -> None:
        self._http = http if http is not None else httpx.Client(base_url=base_url)
        self.state = SessionState(token=token)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TaskboardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- plumbing ---

    def _auth_headers(self) -> dict[str, str]:
        if not self.state.token:
            raise AuthenticationError("Not signed in")
        return {"Authorization": f"Bearer {self.state.token}", "Accept": "application/json"}

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = self._http.request(method, url, headers={"Accept": "application/json"}, **kwargs)
        _raise_for_status(response)
        return response

    def _send_authenticated(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = self._http.request(method, url, headers=self._auth_headers(), **kwargs)
        try:
            _raise_for_status(response)
        except CredentialsError:
            # a password check failed; the token itself was accepted
            raise
        except AuthenticationError:
            logger.warning("Session rejected by server, clearing stored token")
            self.state = SessionState()
            raise
        return response

    def _sign_in(self, payload: dict) -> dict:
        self.state = SessionState(token=payload["token"], user=payload["user"])
        return payload["user"]

    # --- session ---

    def register(self, name: str, email: str, password: str, password_confirmation: str | None = None) -> dict:
        response = self._send(
            "POST",
            "/api/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password if password_confirmation is None else password_confirmation,
            },
        )
        return self._sign_in(response.json())

    def login(self, email: str, password: str, device_name: str = "auth_token") -> dict:
        response = self._send(
            "POST", "/api/login", json={"email": email, "password": password, "device_name": device_name}
        )
        return self._sign_in(response.json())

    def logout(self) -> None:
        """Revoke the current token on the server and forget it locally."""
        try:
            self._send_authenticated("POST", "/api/logout")
        finally:
            self.state = SessionState()

    def refresh(self) -> SessionState:
        """Recompute the session state from ``GET /api/user``."""
        if not self.state.token:
            self.state = SessionState()
            return self.state

        self.state = replace(self.state, status=SessionStatus.LOADING, error=None)
        try:
            response = self._send_authenticated("GET", "/api/user")
        except AuthenticationError:
            return self.state
        except (TaskboardError, httpx.HTTPError) as e:
            self.state = replace(self.state, status=SessionStatus.ERROR, error=str(e))
            return self.state

        self.state = replace(self.state, status=SessionStatus.READY, user=response.json())
        return self.state

    def update_profile(
        self,
        name: str,
        email: str,
        password_current: str | None = None,
        password: str | None = None,
        password_confirmation: str | None = None,
    ) -> dict:
        payload: dict[str, Any] = {"name": name, "email": email}
        if password is not None:
            payload["password_current"] = password_current
            payload["password"] = password
            payload["password_confirmation"] = password if password_confirmation is None else password_confirmation
        response = self._send_authenticated("PUT", "/api/user/profile", json=payload)
        user = response.json()["user"]
        self.state = replace(self.state, user=user)
        return user

    # --- tasks ---

    def list_tasks(self, search: str | None = None, completed: bool | None = None, priority: str | None = None) -> list:
        params: dict[str, str] = {}
        if search:
            params["search"] = search
        if completed is not None:
            params["completed"] = "1" if completed else "0"
        if priority:
            params["priority"] = priority
        return self._send_authenticated("GET", "/api/tasks", params=params).json()

    def create_task(
        self,
        title: str,
        description: str | None = None,
        due_date: date | str | None = None,
        completed: bool = False,
        priority: str | None = None,
    ) -> dict:
        payload = _task_payload(title, description, due_date, completed, priority)
        return self._send_authenticated("POST", "/api/tasks", json=payload).json()

    def get_task(self, task_id: int) -> dict:
        return self._send_authenticated("GET", f"/api/tasks/{task_id}").json()

    def update_task(
        self,
        task_id: int,
        title: str,
        description: str | None = None,
        due_date: date | str | None = None,
        completed: bool = False,
        priority: str | None = None,
    ) -> dict:
        payload = _task_payload(title, description, due_date, completed, priority)
        return self._send_authenticated("PUT", f"/api/tasks/{task_id}", json=payload).json()

    def delete_task(self, task_id: int) -> None:
        self._send_authenticated("DELETE", f"/api/tasks/{task_id}")
