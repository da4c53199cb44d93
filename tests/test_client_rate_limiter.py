import json

import pytest

from app.client.rate_limiter import (
    STORAGE_KEY,
    ClientRateLimiter,
    JsonFileStorage,
    MemoryStorage,
)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def limiter(storage, clock):
    return ClientRateLimiter(storage, max_requests=3, window_seconds=60, clock=clock)


def test_check_limit_records_each_allowed_request(limiter):
    assert limiter.check_limit()
    assert limiter.check_limit()
    assert limiter.get_current_count() == 2
    assert limiter.get_remaining_requests() == 1


def test_denies_once_window_is_full(limiter):
    for _ in range(3):
        assert limiter.check_limit()
    assert not limiter.check_limit()
    assert limiter.get_current_count() == 3


def test_sliding_window_frees_oldest_slot(limiter, clock):
    limiter.check_limit()
    clock.advance(30)
    limiter.check_limit()
    limiter.check_limit()
    assert not limiter.check_limit()

    clock.advance(31)
    assert limiter.get_remaining_requests() == 1
    assert limiter.check_limit()


def test_record_request_ignores_limit(limiter):
    for _ in range(4):
        limiter.record_request()
    assert limiter.get_current_count() == 4
    assert limiter.get_remaining_requests() == 0


def test_reset_clears_usage(limiter, storage):
    limiter.check_limit()
    limiter.reset()
    assert storage.get_item(STORAGE_KEY) is None
    assert limiter.get_remaining_requests() == 3


def test_without_storage_everything_is_allowed(clock):
    limiter = ClientRateLimiter(None, max_requests=1, window_seconds=60, clock=clock)
    assert all(limiter.check_limit() for _ in range(10))
    assert limiter.get_remaining_requests() == 1
    assert limiter.get_current_count() == 0
    limiter.reset()


def test_corrupt_storage_reads_as_empty(limiter, storage):
    storage.set_item(STORAGE_KEY, "{not json")
    assert limiter.get_current_count() == 0
    storage.set_item(STORAGE_KEY, json.dumps({"a": 1}))
    assert limiter.check_limit()


class BrokenStorage:
    def get_item(self, key):
        raise OSError("disk gone")

    def set_item(self, key, value):
        raise OSError("disk gone")

    def remove_item(self, key):
        raise OSError("disk gone")


def test_failing_storage_is_tolerated(clock):
    limiter = ClientRateLimiter(BrokenStorage(), max_requests=1, window_seconds=60, clock=clock)
    assert limiter.check_limit()
    assert limiter.check_limit()
    limiter.reset()


def test_json_file_storage_persists_across_instances(tmp_path, clock):
    path = str(tmp_path / "state" / "usage.json")
    first = ClientRateLimiter(JsonFileStorage(path), max_requests=2, window_seconds=60, clock=clock)
    first.check_limit()
    first.check_limit()

    second = ClientRateLimiter(JsonFileStorage(path), max_requests=2, window_seconds=60, clock=clock)
    assert not second.check_limit()

    second.reset()
    assert first.get_remaining_requests() == 2
