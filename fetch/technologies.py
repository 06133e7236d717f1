"""Concurrent download of the per-letter technology files."""
import asyncio
import logging
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from core.config import ScraperConfig
from fetch.http_client import fetch_json, FetchError, RETRY_DELAY

logger = logging.getLogger(__name__)

# a..z plus the catch-all bucket for names starting with a digit or symbol
BUCKETS: Tuple[str, ...] = tuple(string.ascii_lowercase) + ("_",)


@dataclass(frozen=True)
class AggregationResult:
    technologies: Dict[str, Any] = field(default_factory=dict)
    failed_buckets: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def failure_count(self) -> int:
        return len(self.failed_buckets)


def technology_url(base_url: str, bucket: str) -> str:
    return f"{base_url}/technologies/{bucket}.json"


async def fetch_all_technologies(config: ScraperConfig, retry_delay: float = RETRY_DELAY) -> AggregationResult:
    """
    Fetch every technology bucket concurrently and merge them into one mapping.

    A bucket that exhausts its retries contributes nothing; the other
    buckets are unaffected. On a name collision the later bucket wins.
    """
    logger.info("Fetching all technology files...")
    completed = 0

    async def fetch_bucket(bucket: str) -> Tuple[str, Dict[str, Any], bool]:
        nonlocal completed
        try:
            data = await fetch_json(
                technology_url(config.base_url, bucket),
                max_retries=config.retries,
                timeout=config.timeout_seconds,
                headers=config.headers,
                retry_delay=retry_delay,
            )
        except FetchError as e:
            completed += 1
            logger.warning(f"[{round(completed / len(BUCKETS) * 100)}%] Failed to fetch {bucket}.json: {e}")
            return bucket, {}, False
        completed += 1
        logger.info(f"[{round(completed / len(BUCKETS) * 100)}%] Loaded {len(data)} technologies from {bucket}.json")
        return bucket, data, True

    results = await asyncio.gather(*(fetch_bucket(bucket) for bucket in BUCKETS))

    technologies: Dict[str, Any] = {}
    failed = []
    for bucket, data, ok in results:
        technologies.update(data)
        if not ok:
            failed.append(bucket)

    if failed:
        logger.warning(f"{len(failed)} technology buckets failed: {', '.join(failed)}")
    logger.info(f"Total technologies loaded: {len(technologies)}")
    return AggregationResult(technologies=technologies, failed_buckets=tuple(failed))
