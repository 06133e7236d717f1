"""Scraper configuration: loading from a JSON (or YAML) file and validation."""
import json
import logging
import os
import yaml
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple

from models.technology import is_category_id

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config.json"
DEFAULT_RETRIES = 3
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_USER_AGENT = "Wappalyzer-Privacy-Scraper/1.0.0"

DEFAULTS: Dict[str, Any] = {
    "baseUrl": "https://raw.githubusercontent.com/HTTPArchive/wappalyzer/refs/heads/main/src",
    "outputDir": "./wappalyzer-data",
    "retries": DEFAULT_RETRIES,
    "timeout": DEFAULT_TIMEOUT_MS,
    "userAgent": DEFAULT_USER_AGENT,
    "privacyCategories": [10, 36, 67, 71, 77, 83, 97, 32, 76, 86, 42, 78],
    "highRiskCategories": [83, 77, 97],
    "mediumRiskCategories": [10, 36, 42, 32],
}


class ConfigurationError(Exception):
    """Raised when the configuration cannot drive a run."""


@dataclass(frozen=True)
class RiskProfile:
    """Category ID sets used for threat classification, in configured order."""
    privacy: Tuple[int, ...] = field(default_factory=tuple)
    high_risk: Tuple[int, ...] = field(default_factory=tuple)
    medium_risk: Tuple[int, ...] = field(default_factory=tuple)

    def is_privacy(self, cat_id: Any) -> bool:
        return is_category_id(cat_id) and cat_id in self.privacy


def _as_id_collection(value: Any) -> Any:
    # Lists and sets become tuples; anything else is kept for the validator to reject
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return value


def _risk_ids(value: Any, label: str) -> Tuple[int, ...]:
    """Optional risk set; a malformed value is replaced by an empty set."""
    if not value:
        return ()
    if not isinstance(value, (list, tuple, set, frozenset)):
        logger.warning(f"Invalid {label} configuration, using an empty set")
        return ()
    ids = tuple(v for v in value if is_category_id(v))
    if len(ids) != len(value):
        logger.warning(f"Ignoring non-numeric entries in {label} configuration")
    return ids


def _positive_int(value: Any, default: int, label: str) -> int:
    if value is None:
        return default
    try:
        number = int(value) if not isinstance(value, bool) else 0
    except (TypeError, ValueError):
        number = 0
    if number <= 0:
        logger.warning(f"Invalid {label} configuration {value!r}, using {default}")
        return default
    return number


def _unique(ids: Any) -> Tuple[int, ...]:
    # Set semantics, keeping the configured order
    return tuple(dict.fromkeys(ids or ()))


@dataclass(frozen=True)
class ScraperConfig:
    base_url: Any
    output_dir: Any
    retries: int = DEFAULT_RETRIES
    timeout: int = DEFAULT_TIMEOUT_MS # milliseconds
    user_agent: str = DEFAULT_USER_AGENT
    privacy_categories: Any = None
    high_risk_categories: Tuple[int, ...] = field(default_factory=tuple)
    medium_risk_categories: Tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "ScraperConfig":
        """Build a config from a raw mapping using the file's camelCase keys.

        Optional fields fall back to defaults with a warning; the required
        ones are not checked here, see ``validate_configuration``.
        """
        return cls(
            base_url=data.get("baseUrl"),
            output_dir=data.get("outputDir"),
            retries=_positive_int(data.get("retries"), DEFAULT_RETRIES, "retries"),
            timeout=_positive_int(data.get("timeout"), DEFAULT_TIMEOUT_MS, "timeout"),
            user_agent=str(data.get("userAgent") or DEFAULT_USER_AGENT),
            privacy_categories=_as_id_collection(data.get("privacyCategories")),
            high_risk_categories=_risk_ids(data.get("highRiskCategories"), "highRiskCategories"),
            medium_risk_categories=_risk_ids(data.get("mediumRiskCategories"), "mediumRiskCategories"),
        )

    @classmethod
    def defaults(cls) -> "ScraperConfig":
        return cls.from_mapping(DEFAULTS)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent}

    def risk_profile(self) -> RiskProfile:
        return RiskProfile(
            privacy=_unique(self.privacy_categories),
            high_risk=_unique(self.high_risk_categories),
            medium_risk=_unique(self.medium_risk_categories),
        )


YAML_SUFFIXES = (".yaml", ".yml")


def _parse_config_file(f, config_file: str) -> Any:
    # JSON is the config format; YAML is read only for .yaml/.yml files
    if config_file.lower().endswith(YAML_SUFFIXES):
        return yaml.safe_load(f)
    return json.load(f)


def load_config(config_file: str = DEFAULT_CONFIG_PATH) -> ScraperConfig:
    """
    Load the scraper configuration from a JSON (or .yaml/.yml) file.

    Never fails: a missing, unreadable or malformed file logs a warning and
    yields the built-in defaults.

    Args:
        config_file: Path to the configuration file

    Returns:
        ScraperConfig built from the file, or the defaults
    """
    if not os.path.exists(config_file):
        logger.warning(f"Could not load config from {config_file}, using defaults")
        return ScraperConfig.defaults()

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = _parse_config_file(f, config_file)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Could not load config from {config_file} ({e}), using defaults")
        return ScraperConfig.defaults()

    if not isinstance(data, dict):
        logger.warning(f"Config file {config_file} does not contain an object, using defaults")
        return ScraperConfig.defaults()

    logger.debug(f"Loaded configuration from {config_file}")
    return ScraperConfig.from_mapping(data)


def _is_id_set(value: Any) -> bool:
    return isinstance(value, tuple) and all(is_category_id(v) for v in value)


def validate_configuration(config: ScraperConfig) -> None:
    """Raise ConfigurationError unless baseUrl, outputDir and privacyCategories are usable."""
    if not config.base_url or not isinstance(config.base_url, str):
        raise ConfigurationError("Invalid baseUrl configuration")
    if not config.output_dir or not isinstance(config.output_dir, str):
        raise ConfigurationError("Invalid outputDir configuration")
    if not _is_id_set(config.privacy_categories):
        raise ConfigurationError("Invalid privacyCategories configuration")
    logger.info("Configuration validated")
