from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from time import perf_counter

from loyalty_admin.app.infrastructure.logging.logger import get_logger, log_action
from loyalty_admin.clients.loyalty_sdk.errors import ApiError, AuthError, auth_required_error
from loyalty_admin.clients.loyalty_sdk.http_client import HttpClient
from loyalty_admin.clients.loyalty_sdk.models import AdminProfile
from loyalty_admin.clients.loyalty_sdk.modules.auth_client import AuthClient

logger = get_logger("loyalty_admin.session")

SessionListener = Callable[[], None]


class SessionStatus(str, Enum):
    ANONYMOUS = "anonymous"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"


class SessionStore:
    """Owns the admin identity and the persisted bearer token.

    Registers itself as the gateway's auth-error handler, so any 401 drops the
    identity and fires ``on_session_expired`` listeners once per session.
    """

    def __init__(self, http: HttpClient, auth_client: AuthClient | None = None) -> None:
        self.http = http
        self.token_store = http.token_store
        self.auth_client = auth_client or AuthClient(http=http)
        self._status = SessionStatus.ANONYMOUS
        self._identity: AdminProfile | None = None
        self._last_error: ApiError | None = None
        self._verifying: threading.Event | None = None
        self._expired_listeners: list[SessionListener] = []
        self._lock = threading.Lock()
        http.register_auth_error_handler(self._handle_unauthorized)

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def identity(self) -> AdminProfile | None:
        return self._identity

    @property
    def token(self) -> str | None:
        return self.token_store.get_token()

    @property
    def last_error(self) -> ApiError | None:
        return self._last_error

    @property
    def is_authenticated(self) -> bool:
        return self._status == SessionStatus.AUTHENTICATED and self._identity is not None

    def require_authenticated(self) -> AdminProfile:
        identity = self._identity
        if self._status != SessionStatus.AUTHENTICATED or identity is None:
            raise auth_required_error()
        return identity

    def on_session_expired(self, listener: SessionListener) -> Callable[[], None]:
        self._expired_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._expired_listeners:
                self._expired_listeners.remove(listener)

        return unsubscribe

    def initialize(self) -> bool:
        """Verify the persisted token, sharing one verify call between concurrent callers."""
        with self._lock:
            in_flight = self._verifying
            if in_flight is None:
                if not self.token_store.get_token():
                    self._status = SessionStatus.ANONYMOUS
                    self._identity = None
                    return False
                in_flight = threading.Event()
                self._verifying = in_flight
                self._status = SessionStatus.VERIFYING
                owner = True
            else:
                owner = False

        if not owner:
            in_flight.wait()
            return self.is_authenticated

        started = perf_counter()
        try:
            response = self.auth_client.verify()
        except ApiError as error:
            self._last_error = error
            self._reset(clear_token=True)
            self._log("verify", "error", started, code=error.code)
        else:
            if response.success and response.admin is not None:
                with self._lock:
                    self._identity = response.admin
                    self._status = SessionStatus.AUTHENTICATED
                self._log("verify", "success", started)
            else:
                self._reset(clear_token=True)
                self._log("verify", "rejected", started)
        finally:
            with self._lock:
                self._verifying = None
            in_flight.set()
        return self.is_authenticated

    def login(self, email: str, password: str) -> bool:
        clean_email = (email or "").strip()
        if not clean_email or not password:
            self._last_error = ApiError(code="VALIDATION_ERROR", message="Email and password are required.")
            return False

        started = perf_counter()
        try:
            response = self.auth_client.login(clean_email, password)
        except ApiError as error:
            self._last_error = error
            self._log("login", "error", started, code=error.code)
            return False

        if not response.success or not response.token or response.admin is None:
            self._last_error = ApiError(code="LOGIN_FAILED", message=response.message or "Login failed")
            self._log("login", "rejected", started)
            return False

        self.token_store.set_token(response.token)
        with self._lock:
            self._identity = response.admin
            self._status = SessionStatus.AUTHENTICATED
        self._last_error = None
        self._log("login", "success", started)
        return True

    def logout(self) -> None:
        was_authenticated = self.is_authenticated
        admin_id = self._identity.id if self._identity else None
        self._reset(clear_token=True)
        if was_authenticated:
            log_action(logger, module="session", action="logout", outcome="success", admin_id=admin_id)

    def _handle_unauthorized(self, error: AuthError) -> None:
        with self._lock:
            expired = self._status == SessionStatus.AUTHENTICATED
            admin_id = self._identity.id if self._identity else None
            self._identity = None
            self._status = SessionStatus.ANONYMOUS
        self._last_error = error
        if not expired:
            return
        log_action(logger, module="session", action="expire", outcome="error", admin_id=admin_id, code=error.code)
        for listener in list(self._expired_listeners):
            listener()

    def _reset(self, clear_token: bool) -> None:
        if clear_token:
            self.token_store.clear()
        with self._lock:
            self._identity = None
            self._status = SessionStatus.ANONYMOUS

    def _log(self, action: str, outcome: str, started: float, **extra: object) -> None:
        log_action(
            logger,
            module="session",
            action=action,
            outcome=outcome,
            admin_id=self._identity.id if self._identity else None,
            duration_ms=int((perf_counter() - started) * 1000),
            **extra,
        )
