"""
Form and browsing state containers used by the client.

Each class holds the state a page renders and exposes async operations that
update it. Navigation is left to the caller: operations take an `on_success`
callback instead of pushing a route themselves.
"""

import asyncio
import inspect
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import ValidationError as SchemaError

from cinesync.client.api import ApiClient
from cinesync.client.auth import AuthProvider
from cinesync.config import DEFAULT_IMAGE_HOST
from cinesync.errors import CineSyncError, InternalError
from cinesync.movies import utils
from cinesync.movies.schemas import ApiResponse, Movie, MovieCredits, MovieSource, MovieVideo

logger = logging.getLogger(__name__)

EMPTY_FIELDS_ERROR = "Please fill in all fields"


class FormEvent(Protocol):
    def prevent_default(self) -> None:
        ...


async def _continue(on_success: Optional[Callable[[], Any]]) -> None:
    if on_success is None:
        return
    result = on_success()
    if inspect.isawaitable(result):
        await result


# ---------------- Login ----------------

class LoginForm:
    FALLBACK_ERROR = "Login failed. Please check your credentials."

    def __init__(self, auth: AuthProvider):
        self.auth = auth
        self.email = ""
        self.password = ""
        self.form_error: Optional[str] = None
        self.is_loading = False

    @property
    def auth_error(self) -> Optional[str]:
        return self.auth.error

    async def handle_submit(
        self,
        event: Optional[FormEvent] = None,
        on_success: Optional[Callable[[], Any]] = None,
    ) -> bool:
        """Validate, log in, then hand control to `on_success`. Returns True on success."""
        if event is not None:
            event.prevent_default()
        self.form_error = None
        self.auth.clear_error()

        if not self.email or not self.password:
            self.form_error = EMPTY_FIELDS_ERROR
            return False

        self.is_loading = True
        try:
            await self.auth.login(self.email, self.password)
        except CineSyncError as e:
            self.form_error = e.message or self.FALLBACK_ERROR
            return False
        finally:
            self.is_loading = False

        await _continue(on_success)
        return True


# ---------------- Signup ----------------

class SignupForm:
    FALLBACK_ERROR = "Registration failed. Please try again."
    MIN_PASSWORD_LENGTH = 6

    def __init__(self, auth: AuthProvider):
        self.auth = auth
        self.username = ""
        self.email = ""
        self.password = ""
        self.confirm_password = ""
        self.form_error = ""

    @property
    def error(self) -> Optional[str]:
        return self.auth.error

    def validate(self) -> Optional[str]:
        if not (self.username and self.email and self.password and self.confirm_password):
            return EMPTY_FIELDS_ERROR
        if self.password != self.confirm_password:
            return "Passwords do not match"
        if len(self.password) < self.MIN_PASSWORD_LENGTH:
            return f"Password must be at least {self.MIN_PASSWORD_LENGTH} characters"
        return None

    async def handle_submit(
        self,
        event: Optional[FormEvent] = None,
        on_success: Optional[Callable[[], Any]] = None,
    ) -> bool:
        if event is not None:
            event.prevent_default()
        self.form_error = ""
        self.auth.clear_error()

        problem = self.validate()
        if problem:
            self.form_error = problem
            return False

        try:
            await self.auth.register(self.username, self.email, self.password)
        except CineSyncError as e:
            self.form_error = e.message or self.FALLBACK_ERROR
            return False

        await _continue(on_success)
        return True


# ---------------- Browsing ----------------

def normalize_movie(raw: Dict[str, Any]) -> Movie:
    """Keep only Movie fields and fill the gaps TMDB sometimes leaves."""
    title = raw.get("title") or ""
    genre_ids = raw.get("genre_ids") or [g["id"] for g in raw.get("genres") or []]
    return Movie(
        id=raw["id"],
        title=title,
        overview=raw.get("overview") or "",
        poster_path=raw.get("poster_path"),
        backdrop_path=raw.get("backdrop_path"),
        release_date=raw.get("release_date") or date.today().isoformat(),
        vote_average=raw.get("vote_average") or 0,
        vote_count=raw.get("vote_count") or 0,
        genre_ids=genre_ids,
        original_language=raw.get("original_language") or "en",
        original_title=raw.get("original_title") or title,
        popularity=raw.get("popularity") or 0,
        video=raw.get("video") or False,
        adult=raw.get("adult") or False,
    )


class MovieBrowser:
    """Popular/search listing with paging, plus the detail panel for one movie."""

    def __init__(self, api: ApiClient, image_host: str = DEFAULT_IMAGE_HOST):
        self.api = api
        self.image_host = image_host

        # list state
        self.movies: List[Movie] = []
        self.loading = False
        self.error: Optional[str] = None
        self.page = 1
        self.has_more = True
        self.query = ""

        # detail state
        self.selected_movie: Optional[Movie] = None
        self.details: Optional[Dict[str, Any]] = None
        self.videos: List[MovieVideo] = []
        self.credits: Optional[MovieCredits] = None
        self.recommendations: List[Movie] = []
        self.similar: List[Movie] = []
        self.details_loading = False

    async def fetch_movies(self, query: str = "", page: int = 1) -> None:
        self.loading = True
        self.error = None
        params: Dict[str, Any] = {"page": page}
        if query:
            params["query"] = query
        try:
            data = await self.api.get("/movies", params)
            envelope = ApiResponse[Dict[str, Any]].model_validate(data)
            formatted = [normalize_movie(m) for m in envelope.results]

            self.movies = formatted if page == 1 else self.movies + formatted
            self.has_more = page < envelope.total_pages
            self.page = page
        except (CineSyncError, SchemaError) as e:
            logger.error("Error fetching movies: %s", e)
            message = e.message if isinstance(e, CineSyncError) else None
            self.error = message or "Failed to fetch movies"
        finally:
            self.loading = False

    async def search(self, query: str) -> None:
        self.query = query
        await self.fetch_movies(query, 1)

    async def load_more(self) -> None:
        if self.loading or not self.has_more:
            return
        # Nothing listed yet: start from the first page
        next_page = self.page + 1 if self.movies else 1
        await self.fetch_movies(self.query, next_page)

    async def get_movie_details(self, movie_id: int) -> Dict[str, Any]:
        """Fetch details and the four sub-resources concurrently. Raises if details fail."""
        self.details_loading = True
        self.error = None
        try:
            details, videos, credits, recommendations, similar = await asyncio.gather(
                self.api.get(f"/movies/{movie_id}"),
                self.api.get(f"/movies/{movie_id}/videos"),
                self.api.get(f"/movies/{movie_id}/credits"),
                self.api.get(f"/movies/{movie_id}/recommendations"),
                self.api.get(f"/movies/{movie_id}/similar"),
                return_exceptions=True,
            )
            if isinstance(details, BaseException):
                raise details

            self.videos = [] if isinstance(videos, BaseException) else [
                MovieVideo.model_validate(v) for v in videos.get("results") or []
            ]
            self.credits = None if isinstance(credits, BaseException) else MovieCredits.model_validate(credits)
            self.recommendations = self._movie_list(recommendations)
            self.similar = self._movie_list(similar)

            runtime = details.get("runtime")
            self.selected_movie = normalize_movie(details).model_copy(update={
                "source": MovieSource.TMDB,
                "tmdb_id": details.get("id"),
                "thumbnail": utils.image_url(details.get("poster_path"), "w500", self.image_host),
                "backdrop": utils.image_url(details.get("backdrop_path"), "original", self.image_host),
                "trailer": utils.get_trailer([v.model_dump() for v in self.videos]),
                "duration": utils.format_duration(runtime) if runtime else None,
            })
            self.details = details
            return details
        except CineSyncError as e:
            logger.error("Error fetching movie details: %s", e)
            self.error = e.message or "Failed to fetch movie details"
            raise
        except SchemaError as e:
            logger.error("Malformed movie details payload: %s", e)
            self.error = "Failed to fetch movie details"
            raise InternalError() from e
        finally:
            self.details_loading = False

    @staticmethod
    def _movie_list(data: Any) -> List[Movie]:
        if isinstance(data, BaseException):
            return []
        return [normalize_movie(m) for m in data.get("results") or []]

    def clear_selected_movie(self) -> None:
        self.selected_movie = None
        self.details = None
        self.videos = []
        self.credits = None
        self.recommendations = []
        self.similar = []

    # ----- render helpers -----
    @property
    def cards(self) -> List[Dict[str, Any]]:
        return [utils.format_movie(m.model_dump(), self.image_host) for m in self.movies]

    @property
    def detail_view(self) -> Optional[Dict[str, Any]]:
        if self.details is None:
            return None
        view = utils.format_movie_details(self.details, self.image_host)
        release = self.details.get("release_date")
        view["year"] = utils.get_year_from_date(release)
        try:
            view["release_label"] = utils.format_date(release) if release else ""
        except ValueError:
            # Partial dates such as "2010" are shown as given
            view["release_label"] = release
        return view
