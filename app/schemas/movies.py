"""Pydantic schemas for movie metadata, on the provider side and on ours."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NOT_AVAILABLE = "N/A"


class RatingEntry(BaseModel):
    # field names match the provider so clients keep reading Source/Value
    source: str = Field(alias="Source")
    value: str = Field(alias="Value")

    model_config = ConfigDict(populate_by_name=True)


class OmdbMovieRecord(BaseModel):
    """Raw OMDb title record. Missing fields read as the provider's N/A sentinel."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(alias="Title")
    year: str = Field(default=NOT_AVAILABLE, alias="Year")
    rated: str = Field(default=NOT_AVAILABLE, alias="Rated")
    released: str = Field(default=NOT_AVAILABLE, alias="Released")
    runtime: str = Field(default=NOT_AVAILABLE, alias="Runtime")
    genre: str = Field(default=NOT_AVAILABLE, alias="Genre")
    director: str = Field(default=NOT_AVAILABLE, alias="Director")
    writer: str = Field(default=NOT_AVAILABLE, alias="Writer")
    actors: str = Field(default=NOT_AVAILABLE, alias="Actors")
    plot: str = Field(default=NOT_AVAILABLE, alias="Plot")
    poster: str = Field(default=NOT_AVAILABLE, alias="Poster")
    ratings: List[RatingEntry] = Field(default_factory=list, alias="Ratings")
    metascore: str = Field(default=NOT_AVAILABLE, alias="Metascore")
    imdb_rating: str = Field(default=NOT_AVAILABLE, alias="imdbRating")
    imdb_votes: str = Field(default=NOT_AVAILABLE, alias="imdbVotes")
    imdb_id: str = Field(default=NOT_AVAILABLE, alias="imdbID")
    type: str = Field(default=NOT_AVAILABLE, alias="Type")
    box_office: str = Field(default=NOT_AVAILABLE, alias="BoxOffice")
    production: str = Field(default=NOT_AVAILABLE, alias="Production")


class MovieMetadata(BaseModel):
    """Display-ready movie record. Unavailable values are None, never "N/A"."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str
    year: Optional[int] = None
    rated: Optional[str] = None
    released: Optional[str] = None
    runtime: Optional[str] = None
    genre: List[str] = Field(default_factory=list)
    director: Optional[str] = None
    writer: Optional[str] = None
    actors: List[str] = Field(default_factory=list)
    plot: Optional[str] = None
    poster: Optional[str] = None
    ratings: List[RatingEntry] = Field(default_factory=list)
    metascore: Optional[int] = None
    imdb_rating: Optional[float] = None
    imdb_votes: Optional[int] = None
    imdb_id: Optional[str] = None
    type: Optional[str] = None
    box_office: Optional[str] = None
    production: Optional[str] = None
