"""Tests for the concurrent per-letter technology download."""
import pytest
from unittest.mock import AsyncMock, patch

from core.config import ScraperConfig
from fetch.http_client import FetchError
from fetch.technologies import BUCKETS, fetch_all_technologies, technology_url


@pytest.fixture
def config():
    return ScraperConfig.from_mapping({
        "baseUrl": "https://example.com/src",
        "outputDir": "out",
        "retries": 2,
        "timeout": 1000,
        "userAgent": "Test/1.0",
        "privacyCategories": [10],
    })


def _bucket_of(url):
    return url.rsplit("/", 1)[1][:-len(".json")]


def test_buckets_cover_alphabet_and_catch_all():
    assert len(BUCKETS) == 27
    assert BUCKETS[0] == "a" and BUCKETS[-1] == "_"
    assert technology_url("https://example.com/src", "q") == "https://example.com/src/technologies/q.json"


@pytest.mark.asyncio
async def test_fetch_all_technologies_merges_buckets(config):
    async def fake_fetch(url, **kwargs):
        bucket = _bucket_of(url)
        return {f"{bucket}-one": {"cats": [10]}, f"{bucket}-two": {"cats": [1]}}

    with patch('fetch.technologies.fetch_json', new=AsyncMock(side_effect=fake_fetch)) as mock_fetch:
        result = await fetch_all_technologies(config, retry_delay=0)

    assert mock_fetch.await_count == 27
    assert len(result.technologies) == 54
    assert result.failed_buckets == ()
    kwargs = mock_fetch.await_args.kwargs
    assert kwargs["max_retries"] == 2
    assert kwargs["timeout"] == 1.0
    assert kwargs["headers"] == {"User-Agent": "Test/1.0"}


@pytest.mark.asyncio
async def test_failed_bucket_contributes_nothing(config):
    async def fake_fetch(url, **kwargs):
        bucket = _bucket_of(url)
        if bucket == "g":
            raise FetchError(url, 2, 2, "HTTP 404: Not Found")
        return {f"{bucket}-tech": {"cats": [10]}}

    with patch('fetch.technologies.fetch_json', new=AsyncMock(side_effect=fake_fetch)):
        result = await fetch_all_technologies(config, retry_delay=0)

    assert len(result.technologies) == 26
    assert "g-tech" not in result.technologies
    assert result.failed_buckets == ("g",)
    assert result.failure_count == 1


@pytest.mark.asyncio
async def test_later_bucket_wins_on_collision(config):
    async def fake_fetch(url, **kwargs):
        return {"Shared": {"description": _bucket_of(url)}}

    with patch('fetch.technologies.fetch_json', new=AsyncMock(side_effect=fake_fetch)):
        result = await fetch_all_technologies(config, retry_delay=0)

    assert result.technologies == {"Shared": {"description": "_"}}
