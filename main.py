import asyncio
import argparse
import logging
import sys
from typing import List, Optional

from core.config import DEFAULT_CONFIG_PATH, ConfigurationError, load_config, validate_configuration
from core.pipeline import run_pipeline

logger = logging.getLogger(__name__)

EPILOG = """
Examples:
  wappalyzer-privacy-scraper
  wappalyzer-privacy-scraper --config custom-config.json
  wappalyzer-privacy-scraper --dry-run
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wappalyzer Privacy Technology Scraper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH, help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--dry-run", action="store_true", help="Validate configuration and exit without scraping")
    parser.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity level (default: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, args.log_level),
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    config = load_config(args.config)

    if args.dry_run:
        logger.info("Dry run mode - validating configuration...")
        try:
            validate_configuration(config)
        except ConfigurationError as e:
            logger.error(f"Configuration validation failed: {e}")
            return 1
        logger.info("Configuration is valid")
        return 0

    try:
        asyncio.run(run_pipeline(config))
    except Exception as e:
        logger.exception(f"Error during scraping: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
