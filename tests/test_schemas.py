import pytest
from pydantic import ValidationError

from app.config.settings import settings
from app.process.recommendation import MovieRecommender
from app.schemas.api import EnrichRequest, RecommendationList, SearchOptions
from app.utils.rate_limiter import ServerRateLimiter


def make_items(count):
    return [{"title": f"Movie {n}", "year": 2000 + n, "imdbId": f"tt{1000000 + n}"} for n in range(count)]


@pytest.mark.parametrize("model", [RecommendationList, EnrichRequest])
def test_batch_size_follows_max_recommendations(model):
    limit = settings.MAX_RECOMMENDATIONS

    assert len(model.model_validate({"list": make_items(limit)}).list) == limit
    with pytest.raises(ValidationError):
        model.model_validate({"list": make_items(limit + 1)})


def test_output_schema_uses_the_same_bound(clock):
    recommender = MovieRecommender(limiter=ServerRateLimiter(5, 60, clock=clock))
    assert recommender.max_recommendations == settings.MAX_RECOMMENDATIONS


def test_search_options_dedupe_tags_and_default_region():
    options = SearchOptions.model_validate({"description": "x", "genres": ["Drama", "Drama"]})
    assert options.genres == ["Drama"]
    assert options.region == "Australia"
    assert options.model_dump(by_alias=True)["genres"] == ["Drama"]
