from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

# Placeholder credentials accepted by /auth/login until a real user store exists
DEMO_EMAIL = "test@example.com"
DEMO_PASSWORD = "password"
DEMO_TOKEN = "dummy-jwt-token"


# LOGIN CONTRACT
class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    password: Optional[str] = None


# REGISTRATION CONTRACT (presence is checked by the route, not here)
class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.name and self.email and self.password)


# TOKEN RESPONSE CONTRACT
class Token(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


# CLIENT-SIDE SESSION ARTIFACTS
class AuthData(BaseModel):
    token: str
    refresh_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
