import logging
from typing import Any, Dict, Optional

from cinesync.client.api import ApiClient
from cinesync.client.storage import AuthStorage
from cinesync.errors import CineSyncError, InternalError

logger = logging.getLogger(__name__)


class AuthService:
    """Calls the /auth routes and keeps the session artifacts in storage."""

    def __init__(self, api: ApiClient, storage: AuthStorage):
        self.api = api
        self.storage = storage

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.post("/auth/login", {"email": email, "password": password})
        if not data or not data.get("token"):
            raise InternalError("No token received from server")

        # The placeholder endpoint returns only a token; fall back to what we know
        user = data.get("user") or {"email": email}
        self.storage.set_auth_data(
            token=data["token"],
            refresh_token=data.get("refreshToken") or data.get("refresh_token"),
            user=user,
        )
        return user

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.post("/auth/register", {"name": name, "email": email, "password": password})
        user = (data or {}).get("user") or {"name": name, "email": email}
        if data and data.get("token"):
            self.storage.set_auth_data(token=data["token"], user=user)
        return user

    async def logout(self) -> None:
        self.storage.clear_auth_data()

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        if not self.storage.is_authenticated():
            return None
        return self.storage.get_user()


class AuthProvider:
    """
    Session state shared by the form hooks: current user, last auth error and a
    loading flag. Errors are recorded and re-raised so each form can react too.
    """

    def __init__(self, service: AuthService):
        self.service = service
        self.user: Optional[Dict[str, Any]] = service.get_current_user()
        self.error: Optional[str] = None
        self.loading = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def clear_error(self) -> None:
        self.error = None

    async def login(self, email: str, password: str) -> None:
        self.loading = True
        try:
            self.user = await self.service.login(email, password)
        except CineSyncError as e:
            logger.error("Login failed: %s", e.message)
            self.error = e.message or str(e)
            raise
        finally:
            self.loading = False

    async def register(self, username: str, email: str, password: str) -> None:
        self.loading = True
        try:
            self.user = await self.service.register(username, email, password)
        except CineSyncError as e:
            logger.error("Registration failed: %s", e.message)
            self.error = e.message or str(e)
            raise
        finally:
            self.loading = False

    async def logout(self) -> None:
        try:
            await self.service.logout()
        finally:
            self.user = None
