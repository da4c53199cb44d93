"""OMDb client: parameter checks, URL building, record normalization and a
process-lifetime metadata cache."""

import datetime
import re
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import requests
from pydantic import ValidationError as PydanticValidationError

from app.config.settings import settings
from app.errors import NotFoundError, UpstreamError, ValidationError
from app.schemas.api import RecommendationItem
from app.schemas.movies import NOT_AVAILABLE, MovieMetadata, OmdbMovieRecord
from app.utils.logger import get_logger

logger = get_logger(__name__)

SOURCE_PROVIDER = "OMDb API"
SOURCE_CACHE = "cache"
FIRST_FILM_YEAR = 1888
INVALID_PARAMS_ERROR = (
    'Either imdb_id (i) or both title (t) and year (y) must be provided. '
    'imdb_id must start with "tt" and title/year must be valid.'
)
IMDB_ID_RE = re.compile(r"^tt\d+$")
MIN_IMDB_ID_LENGTH = 7


@dataclass(frozen=True)
class LookupParams:
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    year: Optional[Union[str, int]] = None

    @classmethod
    def from_recommendation(cls, item: RecommendationItem) -> "LookupParams":
        return cls(imdb_id=item.imdb_id, title=item.title, year=item.year)

    @property
    def cache_key(self) -> str:
        if self.imdb_id:
            return self.imdb_id
        return f"{self.title}-{self.year}"


@dataclass(frozen=True)
class LookupResult:
    metadata: MovieMetadata
    cached: bool

    @property
    def source(self) -> str:
        return SOURCE_CACHE if self.cached else SOURCE_PROVIDER


@dataclass(frozen=True)
class PosterImage:
    content: bytes
    content_type: str


def _parse_year(year) -> Optional[int]:
    match = re.match(r"\s*(\d{4})", str(year)) if year is not None else None
    return int(match.group(1)) if match else None


def is_valid_imdb_id(imdb_id: str) -> bool:
    return bool(IMDB_ID_RE.match(imdb_id)) and len(imdb_id) >= MIN_IMDB_ID_LENGTH


def validate_lookup_params(params: LookupParams) -> bool:
    """An identifier wins when present; otherwise title and year must both be valid."""
    if params.imdb_id:
        return is_valid_imdb_id(params.imdb_id)

    if params.title and params.year:
        year_text = str(params.year).strip()
        if not (year_text.isascii() and year_text.isdigit()):
            return False
        year = int(year_text)
        max_year = datetime.date.today().year + 1
        return bool(params.title.strip()) and FIRST_FILM_YEAR <= year <= max_year

    return False


def build_query_params(params: LookupParams, api_key: str) -> Dict[str, str]:
    query = {"apikey": api_key}
    if params.imdb_id:
        query["i"] = params.imdb_id
    elif params.title and params.year:
        query["t"] = params.title
        query["y"] = str(params.year)
    else:
        raise ValidationError("Either imdbId or both title and year must be provided")
    return query


def build_movie_query(params: LookupParams, api_key: str) -> Dict[str, str]:
    query = build_query_params(params, api_key)
    query["plot"] = "full"
    query["r"] = "json"
    return query


def _optional(value: str) -> Optional[str]:
    value = (value or "").strip()
    return None if not value or value == NOT_AVAILABLE else value


def _split_list(value: str) -> List[str]:
    value = _optional(value)
    if value is None:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _to_int(value: str) -> Optional[int]:
    value = _optional(value)
    if value is None:
        return None
    try:
        return int(value.replace(",", ""))
    except ValueError:
        return None


def _to_float(value: str) -> Optional[float]:
    value = _optional(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def format_movie_data(record: OmdbMovieRecord) -> MovieMetadata:
    """Map a raw provider record onto MovieMetadata, turning every N/A into None."""
    return MovieMetadata(
        title=record.title,
        year=_parse_year(_optional(record.year)),
        rated=_optional(record.rated),
        released=_optional(record.released),
        runtime=_optional(record.runtime),
        genre=_split_list(record.genre),
        director=_optional(record.director),
        writer=_optional(record.writer),
        actors=_split_list(record.actors),
        plot=_optional(record.plot),
        poster=_optional(record.poster),
        ratings=record.ratings,
        metascore=_to_int(record.metascore),
        imdb_rating=_to_float(record.imdb_rating),
        imdb_votes=_to_int(record.imdb_votes),
        imdb_id=_optional(record.imdb_id),
        type=_optional(record.type),
        box_office=_optional(record.box_office),
        production=_optional(record.production),
    )


class MetadataCache:
    """Resolution key -> MovieMetadata for the life of the process. No expiry."""

    def __init__(self):
        self._items: Dict[str, MovieMetadata] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[MovieMetadata]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: MovieMetadata):
        with self._lock:
            # first write wins; a later write for the same key carries the same data
            self._items.setdefault(key, value)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class MovieMetadataClient:
    """Resolve recommendations into full OMDb metadata, cache first."""

    def __init__(
        self,
        api_key: str,
        base_url: str = settings.OMDB_API_URL,
        poster_url: str = settings.OMDB_POSTER_API_URL,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        cache: Optional[MetadataCache] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.poster_url = poster_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.cache = cache if cache is not None else MetadataCache()

    def _get(self, url: str, query: Dict[str, str], what: str) -> requests.Response:
        try:
            resp = self.session.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            # the request URL carries the api key; never log it
            logger.error("OMDb %s request failed: %s", what, type(e).__name__)
            raise UpstreamError(f"Failed to fetch movie {what}") from None
        if not resp.ok:
            logger.error("OMDb %s API error: %s", what, resp.status_code)
            raise UpstreamError(f"Failed to fetch movie {what}")
        return resp

    def lookup(self, params: LookupParams) -> LookupResult:
        key = params.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            return LookupResult(metadata=cached, cached=True)

        if not validate_lookup_params(params):
            raise ValidationError(INVALID_PARAMS_ERROR)

        resp = self._get(self.base_url, build_movie_query(params, self.api_key), "data")
        try:
            data = resp.json()
        except ValueError as e:
            logger.error("OMDb returned a non-JSON body: %s", repr(e))
            raise UpstreamError("Failed to fetch movie data") from e

        if data.get("Error"):
            raise NotFoundError(data["Error"])

        try:
            metadata = format_movie_data(OmdbMovieRecord.model_validate(data))
        except PydanticValidationError as e:
            logger.error("OMDb record did not match the expected shape: %s", repr(e))
            raise UpstreamError("Failed to fetch movie data") from e

        self.cache.set(key, metadata)
        logger.info("Fetched OMDb metadata for %s", key)
        return LookupResult(metadata=metadata, cached=False)

    def resolve(self, imdb_id: Optional[str] = None, title: Optional[str] = None, year=None) -> MovieMetadata:
        return self.lookup(LookupParams(imdb_id=imdb_id, title=title, year=year)).metadata

    def resolve_recommendation(self, item: RecommendationItem) -> MovieMetadata:
        return self.lookup(LookupParams.from_recommendation(item)).metadata

    def fetch_poster(self, params: LookupParams) -> PosterImage:
        """Fetch the poster bytes. A non-image answer means there is no poster."""
        if not validate_lookup_params(params):
            raise ValidationError(INVALID_PARAMS_ERROR)

        resp = self._get(self.poster_url, build_query_params(params, self.api_key), "poster")
        content_type = resp.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise NotFoundError("No poster found for this movie")
        return PosterImage(content=resp.content, content_type=content_type)
