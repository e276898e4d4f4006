"""
Movie routes: a thin proxy over TMDB.
Path ids are validated before TMDB is called; any downstream failure is logged
and answered with a generic 500 {"error": ...} body.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from cinesync.errors import ApiError, ValidationError
from cinesync.movies import utils
from cinesync.movies.tmdb import TMDBClient, get_tmdb_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["Movies"])


def valid_movie_id(movie_id: str) -> int:
    """
    Path id dependency. Must be declared before the TMDB client dependency:
    a bad id is a 400 even when the client cannot be built.
    """
    try:
        return utils.parse_movie_id(movie_id)
    except ValidationError as e:
        raise ApiError(400, e.message, key="error")


def _upstream_failure(route: str, message: str) -> ApiError:
    # Called from inside an except block so the traceback is logged
    logger.exception("Error in %s API route", route)
    return ApiError(500, message, key="error")


@router.get("")
async def list_movies(
    id: Optional[str] = None,
    query: Optional[str] = None,
    page: int = Query(1),
    tmdb: TMDBClient = Depends(get_tmdb_client),
):
    """
    GET /movies → details when ?id is given, search results when ?query is given,
    popular movies otherwise.
    """
    try:
        if id:
            return await tmdb.get_movie_details(int(id))
        if query:
            return await tmdb.search_movies(query, page)
        return await tmdb.get_popular_movies(page)
    except Exception:
        raise _upstream_failure("movies", "Failed to fetch movies")


@router.get("/top-rated")
async def top_rated_movies(page: int = Query(1), tmdb: TMDBClient = Depends(get_tmdb_client)):
    try:
        return await tmdb.get_top_rated_movies(page)
    except Exception:
        raise _upstream_failure("top rated movies", "Failed to fetch top rated movies")


@router.get("/upcoming")
async def upcoming_movies(page: int = Query(1), tmdb: TMDBClient = Depends(get_tmdb_client)):
    try:
        return await tmdb.get_upcoming_movies(page)
    except Exception:
        raise _upstream_failure("upcoming movies", "Failed to fetch upcoming movies")


@router.get("/{movie_id}")
async def get_movie(
    tmdb_id: int = Depends(valid_movie_id), tmdb: TMDBClient = Depends(get_tmdb_client)
):
    """GET /movies/{id} → details with videos, credits, recommendations and similar appended."""
    try:
        return await tmdb.get_movie_details(tmdb_id)
    except Exception:
        raise _upstream_failure("movie details", "Failed to fetch movie details")


@router.get("/{movie_id}/credits")
async def get_movie_credits(
    tmdb_id: int = Depends(valid_movie_id), tmdb: TMDBClient = Depends(get_tmdb_client)
):
    try:
        return await tmdb.get_movie_credits(tmdb_id)
    except Exception:
        raise _upstream_failure("movie credits", "Failed to fetch movie credits")


@router.get("/{movie_id}/recommendations")
async def get_movie_recommendations(
    tmdb_id: int = Depends(valid_movie_id),
    page: int = Query(1),
    tmdb: TMDBClient = Depends(get_tmdb_client),
):
    try:
        data = await tmdb.get_movie_recommendations(tmdb_id, page)
        return {"results": data.get("results", [])}
    except Exception:
        raise _upstream_failure("movie recommendations", "Failed to fetch movie recommendations")


@router.get("/{movie_id}/similar")
async def get_similar_movies(
    tmdb_id: int = Depends(valid_movie_id),
    page: int = Query(1),
    tmdb: TMDBClient = Depends(get_tmdb_client),
):
    try:
        data = await tmdb.get_similar_movies(tmdb_id, page)
        return {"results": data.get("results", [])}
    except Exception:
        raise _upstream_failure("similar movies", "Failed to fetch similar movies")


@router.get("/{movie_id}/videos")
async def get_movie_videos(
    tmdb_id: int = Depends(valid_movie_id), tmdb: TMDBClient = Depends(get_tmdb_client)
):
    try:
        videos = await tmdb.get_movie_videos(tmdb_id)
        return {"results": videos}
    except Exception:
        raise _upstream_failure("movie videos", "Failed to fetch movie videos")


@router.get("/{movie_id}/images")
async def get_movie_images(
    tmdb_id: int = Depends(valid_movie_id), tmdb: TMDBClient = Depends(get_tmdb_client)
):
    try:
        return await tmdb.get_movie_images(tmdb_id)
    except Exception:
        raise _upstream_failure("movie images", "Failed to fetch movie images")


@router.get("/{movie_id}/reviews")
async def get_movie_reviews(
    tmdb_id: int = Depends(valid_movie_id),
    page: int = Query(1),
    tmdb: TMDBClient = Depends(get_tmdb_client),
):
    try:
        return await tmdb.get_movie_reviews(tmdb_id, page)
    except Exception:
        raise _upstream_failure("movie reviews", "Failed to fetch movie reviews")
