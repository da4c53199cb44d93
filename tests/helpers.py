"""Shared fakes for the test suite."""
import json
from types import SimpleNamespace
from unittest.mock import MagicMock


class FakeClock:
    """Manually advanced clock for limiter tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


OMDB_RECORD = {
    "Title": "Guardians of the Galaxy Vol. 2",
    "Year": "2017",
    "Rated": "PG-13",
    "Released": "05 May 2017",
    "Runtime": "136 min",
    "Genre": "Action, Adventure, Comedy",
    "Director": "James Gunn",
    "Writer": "James Gunn, Dan Abnett, Andy Lanning",
    "Actors": "Chris Pratt, Zoe Saldana, Dave Bautista",
    "Plot": "The Guardians struggle to keep together as a team.",
    "Poster": "https://m.media-amazon.com/images/poster.jpg",
    "Ratings": [
        {"Source": "Internet Movie Database", "Value": "7.6/10"},
        {"Source": "Rotten Tomatoes", "Value": "85%"},
    ],
    "Metascore": "67",
    "imdbRating": "7.6",
    "imdbVotes": "772,345",
    "imdbID": "tt3896198",
    "Type": "movie",
    "DVD": "N/A",
    "BoxOffice": "$389,813,101",
    "Production": "N/A",
    "Website": "N/A",
    "Response": "True",
}


def make_http_response(json_data=None, status_code=200, headers=None, content=b""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = headers or {"content-type": "application/json"}
    response.content = content
    if json_data is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_data
    return response


def make_openai_client(recommendations=None, flagged=False, categories=None, status="completed"):
    client = MagicMock()
    moderation_result = MagicMock()
    moderation_result.flagged = flagged
    moderation_result.categories.model_dump.return_value = categories or {}
    client.moderations.create.return_value = SimpleNamespace(results=[moderation_result])
    output = {"list": recommendations if recommendations is not None else []}
    client.responses.create.return_value = SimpleNamespace(status=status, output_text=json.dumps(output))
    return client
