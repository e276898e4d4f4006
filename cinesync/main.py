import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinesync.authentication.router import router as auth_router
from cinesync.config import get_settings
from cinesync.errors import ApiError, CineSyncError
from cinesync.logging_service import setup_logging
from cinesync.movies.router import router as movies_router
from cinesync.movies.tmdb import close_tmdb_client

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_tmdb_client()


app = FastAPI(title="CineSync API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every route is recomputed per request; nothing may be cached along the way
@app.middleware("http")
async def add_no_cache(request: Request, call_next):
    response = await call_next(request)
    response.headers["Cache-Control"] = "no-store, max-age=0, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed query parameters (e.g. ?page=abc) use the same body keys as the routes
    logger.warning("Rejected request to %s: %s", request.url.path, exc.errors())
    key = "message" if request.url.path.startswith("/auth") else "error"
    return JSONResponse(status_code=400, content={key: "Invalid request parameters"})


@app.exception_handler(CineSyncError)
async def cinesync_error_handler(request: Request, exc: CineSyncError):
    # Anything typed that escaped a route (e.g. missing TMDB credential)
    logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(movies_router)
app.include_router(auth_router)


@app.get("/health", tags=["system"])
def health_check() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cinesync.main:app", host="127.0.0.1", port=8000)
