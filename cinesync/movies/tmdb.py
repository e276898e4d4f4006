"""
Async client for the TMDB v3 REST API.

Every public method returns the decoded JSON body untouched (dicts and lists);
the route layer forwards those shapes as-is. Transport and HTTP failures are
wrapped in UpstreamError.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from cinesync.config import Settings, get_settings
from cinesync.errors import UpstreamError

logger = logging.getLogger(__name__)

DETAILS_APPENDS = "videos,credits,recommendations,similar"


class TMDBClient:
    """Thin wrapper over an httpx.AsyncClient bound to the TMDB base URL."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        api_key = settings.require_tmdb_api_key()
        self._client = httpx.AsyncClient(
            base_url=settings.tmdb_base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json;charset=utf-8",
            },
            params={"language": settings.tmdb_language},
            timeout=settings.tmdb_timeout,
            transport=transport,
        )

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug("GET %s params=%s", path, params)
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"TMDB returned {e.response.status_code} for {path}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"TMDB request to {path} failed: {e}") from e

    # ----- lists -----
    async def get_popular_movies(self, page: int = 1) -> Dict[str, Any]:
        return await self._get("/movie/popular", {"page": page})

    async def get_top_rated_movies(self, page: int = 1) -> Dict[str, Any]:
        return await self._get("/movie/top_rated", {"page": page})

    async def get_upcoming_movies(self, page: int = 1) -> Dict[str, Any]:
        return await self._get("/movie/upcoming", {"page": page})

    async def search_movies(self, query: str, page: int = 1) -> Dict[str, Any]:
        return await self._get("/search/movie", {"query": query, "page": page})

    # ----- single movie -----
    async def get_movie_details(self, movie_id: int) -> Dict[str, Any]:
        """Details with videos, credits, recommendations and similar appended."""
        return await self._get(f"/movie/{movie_id}", {"append_to_response": DETAILS_APPENDS})

    async def get_movie_videos(self, movie_id: int) -> List[Dict[str, Any]]:
        data = await self._get(f"/movie/{movie_id}/videos")
        return data.get("results", [])

    async def get_movie_credits(self, movie_id: int) -> Dict[str, Any]:
        return await self._get(f"/movie/{movie_id}/credits")

    async def get_similar_movies(self, movie_id: int, page: int = 1) -> Dict[str, Any]:
        return await self._get(f"/movie/{movie_id}/similar", {"page": page})

    async def get_movie_recommendations(self, movie_id: int, page: int = 1) -> Dict[str, Any]:
        return await self._get(f"/movie/{movie_id}/recommendations", {"page": page})

    async def get_movie_images(self, movie_id: int) -> Dict[str, Any]:
        return await self._get(f"/movie/{movie_id}/images")

    async def get_movie_reviews(self, movie_id: int, page: int = 1) -> Dict[str, Any]:
        return await self._get(f"/movie/{movie_id}/reviews", {"page": page})

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "TMDBClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


_client: Optional[TMDBClient] = None


def get_tmdb_client() -> TMDBClient:
    """FastAPI dependency: the process-wide client, built on first use."""
    global _client
    if _client is None:
        _client = TMDBClient(get_settings())
    return _client


async def close_tmdb_client() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
