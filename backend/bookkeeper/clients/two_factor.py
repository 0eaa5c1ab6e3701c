"""Client side of the account settings screen: sign-in guard and 2FA flow.

``AuthClient`` talks to ``/api/auth/*`` over a synchronous ``httpx.Client``.
Every failure surfaces as a single ``AuthError`` whose human-readable
message is worked out once, when the error is built.  ``BearerAuth`` is the
route guard: it refuses to send a request when nobody is signed in.

``TwoFactorSettings`` is the state machine behind the settings screen::

    idle -> setup-shown -> enabled | cancelled
    idle -> disable-shown -> disabled | cancelled
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Generator

import httpx

logger = logging.getLogger(__name__)


class TwoFactorState(str, Enum):
    IDLE = "idle"
    SETUP_SHOWN = "setup-shown"
    ENABLED = "enabled"
    DISABLE_SHOWN = "disable-shown"
    DISABLED = "disabled"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def extract_message(body: Any, reason_phrase: str | None = None) -> str:
    """Best human-readable message from an error payload.

    Tried in order: a plain string body, an ``error`` field (a string, or an
    object carrying ``message``), a ``message`` field, the HTTP reason
    phrase, and finally the payload dumped as JSON.
    """
    if isinstance(body, str) and body:
        return body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error:
            return error
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return error["message"]
        if isinstance(body.get("message"), str) and body["message"]:
            return body["message"]
    if reason_phrase:
        return reason_phrase
    return json.dumps(body)


class AuthError(Exception):
    """Any failed auth call.

    ``kind`` is one of ``unauthenticated`` (no token, or the server answered
    401), ``rejected`` (other 4xx), ``server`` (5xx) or ``network``.
    """

    def __init__(self, kind: str, message: str, status: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status

    @classmethod
    def from_response(cls, response: httpx.Response) -> AuthError:
        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.status_code == 401:
            kind = "unauthenticated"
        elif response.status_code >= 500:
            kind = "server"
        else:
            kind = "rejected"
        return cls(kind, extract_message(body, response.reason_phrase), response.status_code)

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind!r}, status={self.status!r}, message={self.message!r})"


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class BearerAuth(httpx.Auth):
    """Attach the stored token; refuse to send anything without one."""

    def __init__(self, token: str | None = None):
        self.token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if not self.token:
            raise AuthError("unauthenticated", "Please sign in to continue")
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


class AuthClient:
    def __init__(self, base_url: str, transport: httpx.BaseTransport | None = None):
        self.auth = BearerAuth()
        self.http = httpx.Client(base_url=base_url, auth=self.auth, transport=transport, timeout=30.0)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth.token)

    def close(self) -> None:
        self.http.close()

    def _call(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise AuthError("network", str(e) or type(e).__name__)
        if not response.is_success:
            raise AuthError.from_response(response)
        return response.json()

    def login(self, username: str, password: str) -> dict[str, Any]:
        data = self._call(
            "POST", "/api/auth/login", json={"username": username, "password": password}, auth=None
        )
        self.auth.token = data.get("token")
        return data

    def logout(self) -> None:
        self.auth.token = None

    def me(self) -> dict[str, Any]:
        return self._call("GET", "/api/auth/me")

    def setup_2fa(self) -> dict[str, Any]:
        return self._call("POST", "/api/auth/setup-2fa", json={})

    def enable_2fa(self, code: str, secret: str | None = None) -> dict[str, Any]:
        payload = {"code": code}
        if secret:
            payload["secret"] = secret
        return self._call("POST", "/api/auth/enable-2fa", json=payload)

    def disable_2fa(self, code: str) -> dict[str, Any]:
        return self._call("POST", "/api/auth/disable-2fa", json={"code": code})


# ---------------------------------------------------------------------------
# Settings screen
# ---------------------------------------------------------------------------

class TwoFactorSettings:
    """Drives the enable/disable 2FA dialogs.

    A failed call keeps the current state and records ``error``; a missing
    code is reported locally without contacting the server.
    """

    def __init__(self, api: AuthClient):
        self.api = api
        self.state = TwoFactorState.IDLE
        self.setup: dict[str, Any] | None = None
        self.error = ""
        self.success = ""

    def _reset_messages(self) -> None:
        self.error = ""
        self.success = ""

    def _require(self, *states: TwoFactorState) -> None:
        if self.state not in states:
            raise RuntimeError(f"Not allowed while {self.state.value}")

    def start_setup(self) -> bool:
        self._reset_messages()
        try:
            self.setup = self.api.setup_2fa()
        except AuthError as e:
            self.error = e.message
            return False
        self.state = TwoFactorState.SETUP_SHOWN
        return True

    def confirm_setup(self, code: str | None) -> bool:
        self._require(TwoFactorState.SETUP_SHOWN)
        if not code:
            self.error = "Please enter the verification code"
            return False

        self.error = ""
        try:
            self.api.enable_2fa(code, (self.setup or {}).get("secret"))
        except AuthError as e:
            self.error = e.message
            return False

        self.success = "2FA enabled successfully!"
        self.setup = None
        self.state = TwoFactorState.ENABLED
        return True

    def start_disable(self) -> None:
        self._reset_messages()
        self.state = TwoFactorState.DISABLE_SHOWN

    def confirm_disable(self, code: str | None) -> bool:
        self._require(TwoFactorState.DISABLE_SHOWN)
        if not code:
            self.error = "Please enter your 2FA code to disable"
            return False

        self.error = ""
        try:
            self.api.disable_2fa(code)
        except AuthError as e:
            self.error = e.message
            return False

        self.success = "2FA disabled successfully"
        self.state = TwoFactorState.DISABLED
        return True

    def cancel(self) -> None:
        self._require(TwoFactorState.SETUP_SHOWN, TwoFactorState.DISABLE_SHOWN)
        self.setup = None
        self.error = ""
        self.state = TwoFactorState.CANCELLED
