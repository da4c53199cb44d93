"""
Pytest configuration for the movie recommendations tests.

Sets test environment variables before the app modules are imported and
provides fake OpenAI / OMDb collaborators so no test touches the network.
"""
import os
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("OMDB_API_KEY", "test-omdb-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from helpers import OMDB_RECORD, FakeClock, make_http_response, make_openai_client  # noqa: E402


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def omdb_record():
    return dict(OMDB_RECORD)


@pytest.fixture
def omdb_session(omdb_record):
    """requests.Session stand-in answering every GET with the sample record."""
    session = MagicMock()
    session.get.return_value = make_http_response(omdb_record)
    return session


@pytest.fixture
def sample_recommendations():
    return [
        {"title": "Guardians of the Galaxy Vol. 2", "year": 2017, "imdbId": "tt3896198"},
        {"title": "The Nice Guys", "year": 2016, "imdbId": "tt3799694"},
    ]


@pytest.fixture
def openai_client(sample_recommendations):
    return make_openai_client(sample_recommendations)
