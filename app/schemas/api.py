from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.config.settings import settings
from app.schemas.movies import MovieMetadata

DEFAULT_REGION = "Australia"
IMDB_ID_PATTERN = r"^tt\d{7,}$"
NO_PREFERENCES_ERROR = (
    "Please provide at least one preference: a description, select genres, or select categories"
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchOptions(CamelModel):
    """What the user is looking for.

    At least one of description, genres or categories must be non-empty for the
    options to be submittable (see `has_content`).
    """

    description: Optional[str] = ""
    genres: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    region: Optional[str] = DEFAULT_REGION

    @field_validator("genres", "categories", mode="before")
    @classmethod
    def dedupe_tags(cls, value):
        # tags behave as a set but keep the order the user picked them in
        if value is None:
            return []
        seen = []
        for tag in value:
            tag = str(tag).strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    @property
    def has_description(self) -> bool:
        return bool(self.description and self.description.strip())

    def has_content(self) -> bool:
        return self.has_description or bool(self.genres) or bool(self.categories)


class RecommendationsRequest(CamelModel):
    """Body of POST /recommendations."""
    search_options: SearchOptions


class RecommendationItem(CamelModel):
    title: str
    year: int
    imdb_id: Optional[str] = Field(default=None, pattern=IMDB_ID_PATTERN)


class RecommendationList(BaseModel):
    list: List[RecommendationItem] = Field(default_factory=list, max_length=settings.MAX_RECOMMENDATIONS)


class RecommendationsResponse(CamelModel):
    response: RecommendationList
    original_input: SearchOptions
    remaining_requests: int


class MovieLookupResponse(BaseModel):
    success: bool = True
    data: MovieMetadata
    source: str


class EnrichRequest(BaseModel):
    """Body of POST /recommendations/enrich."""
    list: List[RecommendationItem] = Field(max_length=settings.MAX_RECOMMENDATIONS)


class EnrichResponse(BaseModel):
    movies: List[MovieMetadata]


class ErrorResponse(BaseModel):
    error: str
