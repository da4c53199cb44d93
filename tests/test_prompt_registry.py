import pytest
from jinja2 import TemplateNotFound

from app.utils.prompt_registry import PromptRegistry


def test_renders_recommender_instructions():
    text = PromptRegistry().render("recommend/movie_recommender", 1, max_recommendations=7)
    assert "at most 7 movies" in text
    assert "IMDb" in text


def test_unknown_version_raises():
    with pytest.raises(TemplateNotFound):
        PromptRegistry().load_prompt_template("recommend/movie_recommender", 99)
