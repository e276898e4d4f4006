"""
Shared fixtures: a fake TMDB client wired into the app through FastAPI's
dependency overrides, plus sample TMDB payloads.
"""

import pytest

from cinesync.main import app
from cinesync.movies.tmdb import get_tmdb_client


class FakeTMDBClient:
    """Records every call; returns canned payloads or raises when `fail` is set."""

    def __init__(self, payloads=None):
        self.payloads = payloads or {}
        self.calls = []
        self.fail = False

    async def _answer(self, name, *args):
        self.calls.append((name, args))
        if self.fail:
            raise RuntimeError("secret upstream detail: connection reset by 10.0.0.7")
        return self.payloads.get(name, {})

    async def get_popular_movies(self, page=1):
        return await self._answer("popular", page)

    async def get_top_rated_movies(self, page=1):
        return await self._answer("top_rated", page)

    async def get_upcoming_movies(self, page=1):
        return await self._answer("upcoming", page)

    async def search_movies(self, query, page=1):
        return await self._answer("search", query, page)

    async def get_movie_details(self, movie_id):
        return await self._answer("details", movie_id)

    async def get_movie_videos(self, movie_id):
        data = await self._answer("videos", movie_id)
        return data.get("results", [])

    async def get_movie_credits(self, movie_id):
        return await self._answer("credits", movie_id)

    async def get_similar_movies(self, movie_id, page=1):
        return await self._answer("similar", movie_id, page)

    async def get_movie_recommendations(self, movie_id, page=1):
        return await self._answer("recommendations", movie_id, page)

    async def get_movie_images(self, movie_id):
        return await self._answer("images", movie_id)

    async def get_movie_reviews(self, movie_id, page=1):
        return await self._answer("reviews", movie_id, page)


def _movie(movie_id, title, **extra):
    movie = {
        "id": movie_id,
        "title": title,
        "overview": f"{title} overview",
        "poster_path": f"/{movie_id}.jpg",
        "backdrop_path": None,
        "release_date": "2010-07-16",
        "vote_average": 8.4,
        "vote_count": 1200,
        "genre_ids": [28, 878],
        "original_language": "en",
        "original_title": title,
        "popularity": 99.5,
        "video": False,
        "adult": False,
    }
    movie.update(extra)
    return movie


@pytest.fixture
def tmdb_payloads():
    page = {
        "page": 1,
        "results": [_movie(27205, "Inception"), _movie(475557, "Joker")],
        "total_pages": 3,
        "total_results": 60,
    }
    details = _movie(
        27205,
        "Inception",
        runtime=148,
        genres=[{"id": 28, "name": "Action"}, {"id": 878, "name": "Science Fiction"}],
        tagline="Your mind is the scene of the crime.",
        budget=160000000,
    )
    videos = {
        "id": 27205,
        "results": [
            {"id": "v1", "key": "teaser1", "name": "Teaser", "site": "YouTube", "type": "Teaser"},
            {"id": "v2", "key": "YoHD9XEInc0", "name": "Official Trailer", "site": "YouTube", "type": "Trailer"},
        ],
    }
    credits = {
        "id": 27205,
        "cast": [{"id": 6193, "name": "Leonardo DiCaprio", "character": "Cobb", "profile_path": None}],
        "crew": [{"id": 525, "name": "Christopher Nolan", "job": "Director", "profile_path": None}],
    }
    return {
        "popular": page,
        "top_rated": page,
        "upcoming": page,
        "search": {**page, "results": page["results"][:1], "total_pages": 1, "total_results": 1},
        "details": details,
        "videos": videos,
        "credits": credits,
        "similar": page,
        "recommendations": page,
        "images": {"id": 27205, "backdrops": [], "posters": []},
        "reviews": {"id": 27205, "page": 1, "results": [], "total_pages": 0, "total_results": 0},
    }


@pytest.fixture
def fake_tmdb(tmdb_payloads):
    """Install a FakeTMDBClient for the duration of a test."""
    fake = FakeTMDBClient(tmdb_payloads)
    app.dependency_overrides[get_tmdb_client] = lambda: fake
    yield fake
    app.dependency_overrides.clear()
