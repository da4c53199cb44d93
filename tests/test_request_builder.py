from app.config.settings import settings
from app.process.request_builder import (
    build_prompt,
    build_recommendation_request,
    wants_live_search,
)
from app.schemas.api import SearchOptions


def test_tags_only_new_release_uses_live_search():
    options = SearchOptions(description="", genres=["Comedy"], categories=["New Release"])
    request = build_recommendation_request(options)

    assert request.use_live_search is True
    assert request.model == settings.OPENAI_LIVE_SEARCH_MODEL
    assert "Comedy" in request.prompt
    assert "New Release" in request.prompt
    assert "Australia" in request.prompt


def test_plain_description_uses_default_model():
    options = SearchOptions(description="A slow burn detective story")
    request = build_recommendation_request(options)

    assert request.use_live_search is False
    assert request.model == settings.OPENAI_MODEL
    assert request.prompt.startswith("A slow burn detective story")


def test_freshness_keyword_in_description_triggers_live_search():
    assert wants_live_search(SearchOptions(description="Something RECENT with dinosaurs"))
    assert wants_live_search(SearchOptions(description="any new releases about space?"))
    assert not wants_live_search(SearchOptions(description="classic westerns"))


def test_new_releases_category_is_case_insensitive():
    assert wants_live_search(SearchOptions(categories=["new releases"]))
    assert not wants_live_search(SearchOptions(categories=["Award Winners"]))


def test_genre_clause_only_when_genres_present():
    prompt = build_prompt(SearchOptions(categories=["Cult Classics"]))
    assert "genres" not in prompt
    assert "Cult Classics" in prompt


def test_prompt_order_and_region():
    options = SearchOptions(
        description="  with a twist ending  ",
        genres=["Thriller", "Mystery"],
        categories=["Hidden Gems"],
        region="Canada",
    )
    prompt = build_prompt(options)

    assert prompt.index("Thriller, Mystery") < prompt.index("Hidden Gems") < prompt.index("with a twist ending")
    assert prompt.endswith("I'm watching from Canada, so favour movies available there.")
    assert "Australia" not in prompt


def test_blank_region_falls_back_to_default():
    prompt = build_prompt(SearchOptions(genres=["Drama"], region="  "), default_region="Australia")
    assert "I'm watching from Australia" in prompt


def test_tags_are_deduplicated_in_prompt():
    options = SearchOptions(genres=["Comedy", " Comedy", "Drama"])
    assert options.genres == ["Comedy", "Drama"]
    assert "Comedy, Drama." in build_prompt(options)


def test_models_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_MODEL", "custom-small")
    monkeypatch.setattr(settings, "OPENAI_LIVE_SEARCH_MODEL", "custom-live")

    assert build_recommendation_request(SearchOptions(genres=["Drama"])).model == "custom-small"
    assert build_recommendation_request(SearchOptions(categories=["New Release"])).model == "custom-live"


def test_explicit_models_override_settings():
    request = build_recommendation_request(SearchOptions(genres=["Drama"]), default_model="other-model")
    assert request.model == "other-model"
