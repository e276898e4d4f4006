"""
Tests for the client hooks: login/signup forms and the movie browser.
Forms are exercised against a fake auth provider; the browser and auth service
talk to the real app through httpx's ASGI transport.
"""

import httpx
import pytest

from cinesync.client.api import ApiClient
from cinesync.client.auth import AuthProvider, AuthService
from cinesync.client.hooks import LoginForm, MovieBrowser, SignupForm, normalize_movie
from cinesync.client.storage import InMemoryAuthStorage
from cinesync.errors import AuthenticationError, InternalError, ValidationError
from cinesync.main import app
from cinesync.movies.schemas import MovieSource


# ---------------------------------------------------------------------
# 🧩 FIXTURES
# ---------------------------------------------------------------------
class FakeAuthProvider:
    def __init__(self, error=None):
        self.error = "stale error"
        self.login_calls = []
        self.register_calls = []
        self._raise = error

    def clear_error(self):
        self.error = None

    async def login(self, email, password):
        self.login_calls.append((email, password))
        if self._raise:
            self.error = self._raise.message
            raise self._raise

    async def register(self, username, email, password):
        self.register_calls.append((username, email, password))
        if self._raise:
            raise self._raise


class FakeEvent:
    def __init__(self):
        self.prevented = False

    def prevent_default(self):
        self.prevented = True


@pytest.fixture
def storage():
    return InMemoryAuthStorage()


@pytest.fixture
async def api(storage):
    client = ApiClient("http://testserver", storage, transport=httpx.ASGITransport(app=app))
    yield client
    await client.close()


# ---------------------------------------------------------------------
# 🔑 LOGIN FORM
# ---------------------------------------------------------------------
@pytest.mark.asyncio
@pytest.mark.parametrize("email, password", [("", "password"), ("test@example.com", ""), ("", "")])
async def test_login_form_empty_fields_never_reach_auth(email, password):
    auth = FakeAuthProvider()
    form = LoginForm(auth)
    form.email, form.password = email, password
    event = FakeEvent()
    navigated = []

    ok = await form.handle_submit(event, on_success=lambda: navigated.append("/dashboard"))

    assert ok is False
    assert event.prevented
    assert form.form_error == "Please fill in all fields"
    assert auth.login_calls == []
    assert navigated == []


@pytest.mark.asyncio
async def test_login_form_success_runs_continuation():
    auth = FakeAuthProvider()
    form = LoginForm(auth)
    form.email, form.password = "test@example.com", "password"
    navigated = []

    ok = await form.handle_submit(on_success=lambda: navigated.append("/dashboard"))

    assert ok is True
    assert auth.login_calls == [("test@example.com", "password")]
    assert navigated == ["/dashboard"]
    assert form.form_error is None
    assert form.auth_error is None
    assert form.is_loading is False


@pytest.mark.asyncio
async def test_login_form_shows_provider_message():
    auth = FakeAuthProvider(error=AuthenticationError("Invalid credentials"))
    form = LoginForm(auth)
    form.email, form.password = "test@example.com", "nope"

    assert await form.handle_submit() is False
    assert form.form_error == "Invalid credentials"
    assert form.auth_error == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_form_falls_back_when_error_has_no_message():
    form = LoginForm(FakeAuthProvider(error=InternalError()))
    form.email, form.password = "a@example.com", "pw"
    await form.handle_submit()
    assert form.form_error == LoginForm.FALLBACK_ERROR


@pytest.mark.asyncio
async def test_login_form_awaits_async_continuation():
    form = LoginForm(FakeAuthProvider())
    form.email, form.password = "a@example.com", "pw"
    navigated = []

    async def go():
        navigated.append("/dashboard")

    await form.handle_submit(on_success=go)
    assert navigated == ["/dashboard"]


# ---------------------------------------------------------------------
# 📝 SIGNUP FORM
# ---------------------------------------------------------------------
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fields, message",
    [
        (("", "a@example.com", "secret1", "secret1"), "Please fill in all fields"),
        (("ada", "a@example.com", "secret1", "secret2"), "Passwords do not match"),
        (("ada", "a@example.com", "abc", "abc"), "Password must be at least 6 characters"),
    ],
)
async def test_signup_form_local_validation(fields, message):
    auth = FakeAuthProvider()
    form = SignupForm(auth)
    form.username, form.email, form.password, form.confirm_password = fields

    assert await form.handle_submit() is False
    assert form.form_error == message
    assert auth.register_calls == []


@pytest.mark.asyncio
async def test_signup_form_success_and_failure():
    auth = FakeAuthProvider()
    form = SignupForm(auth)
    form.username, form.email, form.password, form.confirm_password = "ada", "a@example.com", "secret1", "secret1"
    assert await form.handle_submit() is True
    assert auth.register_calls == [("ada", "a@example.com", "secret1")]

    failing = SignupForm(FakeAuthProvider(error=ValidationError()))
    failing.username, failing.email, failing.password, failing.confirm_password = "ada", "a@example.com", "secret1", "secret1"
    assert await failing.handle_submit() is False
    assert failing.form_error == SignupForm.FALLBACK_ERROR


# ---------------------------------------------------------------------
# 🔐 AUTH SERVICE / PROVIDER AGAINST THE APP
# ---------------------------------------------------------------------
@pytest.mark.asyncio
async def test_login_round_trip_stores_session(api, storage):
    provider = AuthProvider(AuthService(api, storage))
    assert provider.is_authenticated is False

    await provider.login("test@example.com", "password")

    assert provider.is_authenticated
    assert storage.get_token() == "dummy-jwt-token"
    assert storage.get_user() == {"email": "test@example.com"}

    await provider.logout()
    assert provider.user is None
    assert storage.get_token() is None


@pytest.mark.asyncio
async def test_login_rejection_is_typed(api, storage):
    provider = AuthProvider(AuthService(api, storage))
    with pytest.raises(AuthenticationError):
        await provider.login("test@example.com", "wrong")
    assert provider.error == "Invalid credentials"
    assert storage.get_token() is None


@pytest.mark.asyncio
async def test_register_missing_field_is_validation_error(api, storage):
    service = AuthService(api, storage)
    with pytest.raises(ValidationError) as excinfo:
        await service.register("", "a@example.com", "secret1")
    assert excinfo.value.message == "Invalid registration data"


@pytest.mark.asyncio
async def test_login_form_end_to_end(api, storage):
    form = LoginForm(AuthProvider(AuthService(api, storage)))
    form.email, form.password = "test@example.com", "password"
    assert await form.handle_submit() is True
    assert storage.is_authenticated()


def html_api(storage):
    """An ApiClient whose server answers every request with 200 and an HTML page."""
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"})
    )
    return ApiClient("http://testserver", storage, transport=transport)


@pytest.mark.asyncio
async def test_non_json_success_body_is_an_internal_error(storage):
    api = html_api(storage)
    with pytest.raises(InternalError) as excinfo:
        await api.get("/movies")
    assert excinfo.value.message is None
    await api.close()


@pytest.mark.asyncio
async def test_login_form_falls_back_on_non_json_response(storage):
    api = html_api(storage)
    form = LoginForm(AuthProvider(AuthService(api, storage)))
    form.email, form.password = "test@example.com", "password"

    assert await form.handle_submit() is False
    assert form.form_error == LoginForm.FALLBACK_ERROR
    assert form.is_loading is False
    assert not storage.is_authenticated()
    await api.close()


# ---------------------------------------------------------------------
# 🎬 MOVIE BROWSER
# ---------------------------------------------------------------------
@pytest.mark.asyncio
async def test_browser_non_json_response_sets_fallback_error(storage):
    api = html_api(storage)
    browser = MovieBrowser(api)
    await browser.fetch_movies()
    assert browser.error == "Failed to fetch movies"
    assert browser.loading is False
    await api.close()


def test_normalize_movie_fills_defaults():
    movie = normalize_movie({"id": 5, "title": "Four Rooms", "overview": None, "genres": [{"id": 35, "name": "Comedy"}]})
    assert movie.overview == ""
    assert movie.vote_average == 0
    assert movie.original_title == "Four Rooms"
    assert movie.original_language == "en"
    assert movie.genre_ids == [35]
    assert movie.release_date


@pytest.mark.asyncio
async def test_browser_pages_through_popular(api, fake_tmdb):
    browser = MovieBrowser(api)
    await browser.fetch_movies()

    assert browser.error is None
    assert [m.title for m in browser.movies] == ["Inception", "Joker"]
    assert browser.has_more is True
    assert browser.loading is False

    await browser.load_more()
    assert browser.page == 2
    assert len(browser.movies) == 4
    assert fake_tmdb.calls == [("popular", (1,)), ("popular", (2,))]
    assert browser.cards[0]["poster_path"] == "https://image.tmdb.org/t/p/w500/27205.jpg"


@pytest.mark.asyncio
async def test_browser_search_resets_list(api, fake_tmdb):
    browser = MovieBrowser(api)
    await browser.fetch_movies()
    await browser.search("inception")

    assert browser.query == "inception"
    assert [m.title for m in browser.movies] == ["Inception"]
    assert browser.has_more is False
    assert fake_tmdb.calls[-1] == ("search", ("inception", 1))


@pytest.mark.asyncio
async def test_browser_records_server_error(api, fake_tmdb):
    fake_tmdb.fail = True
    browser = MovieBrowser(api)
    await browser.fetch_movies()
    assert browser.error == "Failed to fetch movies"
    assert browser.movies == []


@pytest.mark.asyncio
async def test_browser_movie_details(api, fake_tmdb):
    browser = MovieBrowser(api)
    details = await browser.get_movie_details(27205)

    assert details["id"] == 27205
    movie = browser.selected_movie
    assert movie.source is MovieSource.TMDB
    assert movie.trailer == "https://www.youtube.com/embed/YoHD9XEInc0"
    assert movie.duration == "2h 28m"
    assert [v.key for v in browser.videos] == ["teaser1", "YoHD9XEInc0"]
    assert browser.credits.cast[0].character == "Cobb"
    assert len(browser.recommendations) == 2
    assert len(browser.similar) == 2
    assert browser.detail_view["year"] == "2010"
    assert browser.detail_view["release_label"] == "July 16, 2010"

    browser.clear_selected_movie()
    assert browser.selected_movie is None
    assert browser.detail_view is None


@pytest.mark.asyncio
async def test_browser_details_failure_raises(api, fake_tmdb):
    fake_tmdb.fail = True
    browser = MovieBrowser(api)
    with pytest.raises(InternalError):
        await browser.get_movie_details(27205)
    assert browser.error == "Failed to fetch movie details"
    assert browser.details_loading is False


@pytest.mark.asyncio
async def test_browser_details_with_malformed_videos(api, fake_tmdb):
    """A video without a key cannot be parsed → error set, typed exception raised."""
    fake_tmdb.payloads["videos"] = {"id": 27205, "results": [{"id": "v1", "name": "Trailer", "site": "YouTube"}]}
    browser = MovieBrowser(api)
    with pytest.raises(InternalError):
        await browser.get_movie_details(27205)
    assert browser.error == "Failed to fetch movie details"
    assert browser.details_loading is False
    assert browser.selected_movie is None


@pytest.mark.asyncio
async def test_fresh_browser_load_more_fetches_first_page(api, fake_tmdb):
    browser = MovieBrowser(api)
    assert browser.loading is False

    await browser.load_more()
    assert fake_tmdb.calls == [("popular", (1,))]
    assert browser.page == 1
    assert len(browser.movies) == 2


@pytest.mark.asyncio
async def test_detail_view_keeps_partial_release_date(api, fake_tmdb):
    fake_tmdb.payloads["details"] = {**fake_tmdb.payloads["details"], "release_date": "2010"}
    browser = MovieBrowser(api)
    await browser.get_movie_details(27205)

    view = browser.detail_view
    assert view["year"] == "2010"
    assert view["release_label"] == "2010"
