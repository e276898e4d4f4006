import re
from datetime import date
from typing import Any, Dict, List, Optional

from cinesync.config import DEFAULT_IMAGE_HOST
from cinesync.errors import ValidationError

MOVIE_ID_PATTERN = re.compile(r"-?\d+")

NO_POSTER = "/images/no-poster.jpg"
NO_BACKDROP = "/images/no-backdrop.jpg"


def parse_movie_id(raw: str) -> int:
    """Parse a path segment as a base-10 movie id or raise ValidationError."""
    if raw is None or not MOVIE_ID_PATTERN.fullmatch(raw.strip()):
        raise ValidationError("Invalid movie ID")
    return int(raw)


def image_url(path: Optional[str], size: str = "w500", host: str = DEFAULT_IMAGE_HOST) -> Optional[str]:
    if not path:
        return None
    return f"https://{host}/t/p/{size}{path}"


# ---------------- Presentation formatting ----------------

def format_movie(movie: Dict[str, Any], host: str = DEFAULT_IMAGE_HOST) -> Dict[str, Any]:
    """Reshape a raw TMDB movie into the card payload the UI renders."""
    poster = image_url(movie.get("poster_path"), "w500", host) or NO_POSTER
    return {
        "id": movie["id"],
        "title": movie.get("title"),
        "overview": movie.get("overview"),
        "poster_path": poster,
        "backdrop_path": image_url(movie.get("backdrop_path"), "original", host) or NO_BACKDROP,
        "release_date": movie.get("release_date"),
        "vote_average": movie.get("vote_average"),
        "vote_count": movie.get("vote_count"),
        "genre_ids": movie.get("genre_ids") or [],
        "original_language": movie.get("original_language"),
        "original_title": movie.get("original_title"),
        "popularity": movie.get("popularity"),
        "video": movie.get("video"),
        "adult": movie.get("adult"),
        "source": "tmdb",
        "thumbnail": poster,
        "duration": "0:00",
    }


def format_movie_details(details: Dict[str, Any], host: str = DEFAULT_IMAGE_HOST) -> Dict[str, Any]:
    formatted = format_movie(details, host)
    for key in (
        "budget", "genres", "homepage", "imdb_id", "production_companies",
        "production_countries", "revenue", "runtime", "spoken_languages",
        "status", "tagline",
    ):
        formatted[key] = details.get(key)
    return formatted


def get_trailer(videos: List[Dict[str, Any]]) -> Optional[str]:
    """Embed URL of the first YouTube trailer, if any."""
    for video in videos:
        if video.get("type") == "Trailer" and video.get("site") == "YouTube":
            return f"https://www.youtube.com/embed/{video['key']}"
    return None


def format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins:02d}m"


def format_date(date_string: str) -> str:
    """'2010-07-16' -> 'July 16, 2010'"""
    parsed = date.fromisoformat(date_string)
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def get_year_from_date(date_string: Optional[str]) -> str:
    return date_string.split("-")[0] if date_string else ""
