"""
Placeholder authentication routes.
Bodies are parsed by hand so that malformed JSON is answered like any other
internal failure (500 {"message": ...}) instead of FastAPI's 422.
"""

import logging

from fastapi import APIRouter, Request, status

from cinesync.authentication import schemas
from cinesync.errors import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


async def _read_json(request: Request) -> dict:
    payload = await request.json()
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    return payload


# Login
@router.post("/login", response_model=schemas.Token)
async def login(request: Request):
    try:
        credentials = schemas.LoginRequest(**await _read_json(request))
    except Exception:
        logger.exception("Error in login API route")
        raise ApiError(500, "Internal server error", key="message")

    # TODO: check credentials against a user store and issue a signed token
    if credentials.email == schemas.DEMO_EMAIL and credentials.password == schemas.DEMO_PASSWORD:
        return {"token": schemas.DEMO_TOKEN}

    logger.info("Rejected login for %s", credentials.email)
    raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid credentials", key="message")


# Register
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=schemas.MessageResponse)
async def register(request: Request):
    try:
        data = schemas.RegisterRequest(**await _read_json(request))
    except Exception:
        logger.exception("Error in register API route")
        raise ApiError(500, "Internal server error", key="message")

    if not data.is_complete():
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid registration data", key="message")

    # TODO: persist the account once a user store exists
    return {"message": "Registration successful"}
