import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from core.config import ScraperConfig, validate_configuration
from core.datasets import (
    generate_privacy_technologies,
    generate_cookie_patterns,
    generate_javascript_patterns,
    generate_network_patterns,
    generate_extension_database,
    build_complete_database,
    utc_timestamp,
)
from core.persistence import OutputWriter
from core.report import build_summary_report, render_markdown_report
from core.validation import validate_categories, validate_groups, validate_technologies
from fetch.http_client import fetch_json, RETRY_DELAY
from fetch.technologies import fetch_all_technologies
from models.category import index_categories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    output_dir: Path
    total_technologies: int
    privacy_technologies: int
    invalid_technologies: int
    failed_buckets: Tuple[str, ...] = field(default_factory=tuple)


class Pipeline:
    """Fetch the fingerprint database, derive the privacy datasets and write them out."""

    def __init__(self, config: ScraperConfig, retry_delay: float = RETRY_DELAY):
        self.config = config
        self.retry_delay = retry_delay
        self._writer: Optional[OutputWriter] = None

    @property
    def writer(self) -> OutputWriter:
        # Built on first use so a missing outputDir surfaces as a ConfigurationError in run()
        if self._writer is None:
            self._writer = OutputWriter(self.config.output_dir)
        return self._writer

    async def _fetch(self, name: str) -> Dict[str, Any]:
        return await fetch_json(
            f"{self.config.base_url}/{name}",
            max_retries=self.config.retries,
            timeout=self.config.timeout_seconds,
            headers=self.config.headers,
            retry_delay=self.retry_delay,
        )

    async def run(self) -> PipelineResult:
        logger.info("Starting Wappalyzer database scraping...")
        validate_configuration(self.config)
        self.writer.ensure_directory()

        logger.info("Fetching categories and groups...")
        # Both files are required, so either failure aborts the run
        categories, groups = await asyncio.gather(self._fetch("categories.json"), self._fetch("groups.json"))
        validate_categories(categories)
        validate_groups(groups)

        aggregation = await fetch_all_technologies(self.config, retry_delay=self.retry_delay)
        technologies = aggregation.technologies
        validate_technologies(technologies)

        logger.info("Generating datasets...")
        result = self.generate_datasets(categories, groups, technologies)
        logger.info("Database scraping completed successfully!")
        logger.info(f"Output saved to: {self.writer.output_dir.resolve()}")
        return PipelineResult(
            output_dir=self.writer.output_dir,
            total_technologies=len(technologies),
            privacy_technologies=result[0],
            invalid_technologies=result[1],
            failed_buckets=aggregation.failed_buckets,
        )

    def generate_datasets(
        self,
        categories: Dict[str, Any],
        groups: Dict[str, Any],
        technologies: Dict[str, Any],
        generated_at: Optional[str] = None,
    ) -> Tuple[int, int]:
        """Generate and save every dataset; returns (privacy count, invalid count)."""
        profile = self.config.risk_profile()
        index = index_categories(categories)
        generated_at = generated_at or utc_timestamp()

        privacy = generate_privacy_technologies(technologies, index, profile)
        self.writer.save_json("privacy-technologies.json", privacy.entries)
        self.writer.save_json("cookie-patterns.json", generate_cookie_patterns(technologies, profile))
        self.writer.save_json("javascript-patterns.json", generate_javascript_patterns(technologies, profile))
        self.writer.save_json("network-patterns.json", generate_network_patterns(technologies, profile))

        self.writer.save_json(
            "complete-database.json",
            build_complete_database(categories, groups, technologies, len(privacy), generated_at),
        )
        self.writer.save_json(
            "extension-database.json",
            generate_extension_database(categories, technologies, profile, generated_at),
        )

        report = build_summary_report(len(technologies), privacy.entries, index, profile)
        self.writer.save_json("summary-report.json", report)
        self.writer.save_text("REPORT.md", render_markdown_report(report, datetime.now()))
        logger.info("All datasets generated successfully")
        return len(privacy), privacy.invalid_count


async def run_pipeline(config: ScraperConfig) -> PipelineResult:
    return await Pipeline(config).run()
