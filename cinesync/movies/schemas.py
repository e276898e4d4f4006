from enum import Enum
from typing import Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class MovieSource(str, Enum):
    TMDB = "tmdb"      # catalog origin
    UPLOAD = "upload"  # user-uploaded


class Genre(BaseModel):
    id: int
    name: str


class Movie(BaseModel):
    # TMDB sends more fields than we model; keep them on the way through
    model_config = ConfigDict(extra="allow")

    id: Union[int, str] = Field(frozen=True)
    title: str
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    video: Optional[bool] = None
    media_type: Optional[str] = None
    popularity: Optional[float] = None
    original_language: Optional[str] = None
    original_title: Optional[str] = None
    genre_ids: Optional[List[int]] = None
    adult: Optional[bool] = None

    # App-specific
    source: Optional[MovieSource] = None
    duration: Optional[str] = None
    thumbnail: Optional[str] = None
    backdrop: Optional[str] = None
    trailer: Optional[str] = None
    tmdb_id: Optional[int] = None


class VideoSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    key: str
    name: str
    site: str
    type: str


class VideoCollection(BaseModel):
    results: List[VideoSummary] = []


class CastSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    character: Optional[str] = None
    profile_path: Optional[str] = None


class CrewSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    job: Optional[str] = None
    profile_path: Optional[str] = None


class CreditsSummary(BaseModel):
    cast: List[CastSummary] = []
    crew: List[CrewSummary] = []


class MovieDetails(Movie):
    runtime: Optional[int] = None
    genres: List[Genre] = []
    videos: VideoCollection = Field(default_factory=VideoCollection)
    credits: CreditsSummary = Field(default_factory=CreditsSummary)


class ApiResponse(BaseModel, Generic[T]):
    """Paginated envelope returned by every TMDB list endpoint."""

    page: int
    results: List[T]
    total_pages: int
    total_results: int

    @model_validator(mode="after")
    def check_results_fit(self):
        if len(self.results) > self.total_results:
            raise ValueError(
                f"Page holds {len(self.results)} results but total_results is {self.total_results}"
            )
        return self


# ---------------- Full TMDB shapes ----------------

class MovieVideo(VideoSummary):
    iso_639_1: Optional[str] = None
    iso_3166_1: Optional[str] = None
    official: Optional[bool] = None
    published_at: Optional[str] = None
    size: Optional[int] = None


class CastMember(CastSummary):
    adult: Optional[bool] = None
    gender: Optional[int] = None
    known_for_department: Optional[str] = None
    original_name: Optional[str] = None
    popularity: Optional[float] = None
    cast_id: Optional[int] = None
    credit_id: Optional[str] = None
    order: Optional[int] = None


class CrewMember(CrewSummary):
    adult: Optional[bool] = None
    gender: Optional[int] = None
    known_for_department: Optional[str] = None
    original_name: Optional[str] = None
    popularity: Optional[float] = None
    credit_id: Optional[str] = None
    department: Optional[str] = None


class MovieCredits(BaseModel):
    id: Optional[int] = None
    cast: List[CastMember] = []
    crew: List[CrewMember] = []


class ReviewAuthor(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_path: Optional[str] = None
    rating: Optional[float] = None


class MovieReview(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    author: str
    author_details: ReviewAuthor = Field(default_factory=ReviewAuthor)
    content: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    url: Optional[str] = None
