from unittest.mock import MagicMock

import pytest

from app import cli
from app.errors import RateLimitError
from app.schemas.api import RecommendationItem, RecommendationList, RecommendationsResponse, SearchOptions
from app.schemas.movies import MovieMetadata


@pytest.fixture
def api_client(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(cli, "RecommendationsApiClient", MagicMock(return_value=client))
    return client


def make_response(items):
    return RecommendationsResponse(
        response=RecommendationList(list=items),
        original_input=SearchOptions(genres=["Sci-Fi"]),
        remaining_requests=4,
    )


def test_prints_enriched_movies(api_client, tmp_path, capsys):
    item = RecommendationItem(title="Alien", year=1979, imdb_id="tt0078748")
    api_client.get_recommendations.return_value = make_response([item])
    api_client.enrich.return_value = [
        MovieMetadata(title="Alien", year=1979, imdb_rating=8.5, genre=["Horror", "Sci-Fi"], plot="In space.")
    ]

    code = cli.main(["--genre", "Sci-Fi", "--state-file", str(tmp_path / "state.json")])

    assert code == 0
    out = capsys.readouterr().out
    assert "Alien (1979)  IMDb 8.5  [Horror, Sci-Fi]" in out
    assert "In space." in out
    options = api_client.get_recommendations.call_args.args[0]
    assert options.genres == ["Sci-Fi"]


def test_empty_recommendations_exit_code(api_client, tmp_path):
    api_client.get_recommendations.return_value = make_response([])
    assert cli.main(["--description", "anything", "--state-file", str(tmp_path / "s.json")]) == 1
    api_client.enrich.assert_not_called()


def test_errors_are_reported(api_client, tmp_path, capsys):
    api_client.get_recommendations.side_effect = RateLimitError("Rate limit exceeded. Please try again later.")
    assert cli.main(["--genre", "Drama", "--state-file", str(tmp_path / "s.json")]) == 2
    assert "Rate limit exceeded" in capsys.readouterr().err


def test_reset(api_client, tmp_path):
    api_client.remaining_requests = 5
    assert cli.main(["--reset", "--state-file", str(tmp_path / "s.json")]) == 0
    api_client.reset.assert_called_once()


def test_format_movie_without_rating():
    assert cli.format_movie(MovieMetadata(title="Unknown")) == "Unknown (?)"
