"""Shape checks applied to fetched data before any dataset is generated."""
import logging
from typing import Any

logger = logging.getLogger(__name__)


class DataValidationError(Exception):
    """Raised when fetched data cannot be processed."""


def _require_object(data: Any, label: str) -> None:
    if not isinstance(data, dict):
        raise DataValidationError(f"Invalid {label} data received")


def validate_categories(categories: Any) -> None:
    _require_object(categories, "categories")
    logger.info(f"Categories validated: {len(categories)} categories")


def validate_groups(groups: Any) -> None:
    _require_object(groups, "groups")
    logger.info(f"Groups validated: {len(groups)} groups")


def validate_technologies(technologies: Any) -> None:
    _require_object(technologies, "technologies")
    if not technologies:
        raise DataValidationError("No technologies loaded")
    logger.info(f"Technologies validated: {len(technologies)} technologies")
