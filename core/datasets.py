"""
Dataset generators over the merged technology database.

Every generator is a pure function of the raw technology mapping (and the
category index / risk profile where needed); none depends on another's
output or on the order in which they run.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from core.classifier import (
    threat_level,
    risk_level,
    detection_methods,
    extract_cookies,
    signature_keys,
)
from core.config import RiskProfile
from models.category import Category, category_name
from models.patterns import DetectionPattern
from models.technology import (
    TechnologyRecord,
    PrivacyTechnology,
    RecordOutcome,
    NOT_AN_OBJECT,
    MISSING_CATEGORIES,
    is_set,
)

logger = logging.getLogger(__name__)

DATABASE_VERSION = "1.0.0"

NETWORK_SOURCES = ("scriptSrc", "xhr", "dom")


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _records(technologies: Dict[str, Any]):
    for name, raw in technologies.items():
        record = TechnologyRecord.from_raw(name, raw)
        if record is not None:
            yield record


def classify_technology(
    name: str,
    raw: Any,
    categories: Dict[int, Category],
    profile: RiskProfile,
) -> RecordOutcome:
    """Derive the privacy entry for one raw technology, if it has one."""
    record = TechnologyRecord.from_raw(name, raw)
    if record is None:
        return RecordOutcome(name=name, discard_reason=NOT_AN_OBJECT)
    if not record.has_category_list:
        return RecordOutcome(name=name, discard_reason=MISSING_CATEGORIES)

    ids = record.category_ids
    if not any(profile.is_privacy(c) for c in ids):
        return RecordOutcome(name=name)

    level = threat_level(ids, profile)
    entry = PrivacyTechnology(
        name=record.name,
        description=record.description_text,
        categories=ids,
        category_names=tuple(category_name(categories, c) for c in record.category_list),
        threat_level=level,
        risk_level=risk_level(level),
        detection_methods=tuple(detection_methods(record)),
        cookies=tuple(extract_cookies(record)),
        website=str(record.website) if is_set(record.website) else "",
        pricing=tuple(record.pricing) if isinstance(record.pricing, list) else (),
        saas=bool(record.saas),
    )
    return RecordOutcome(name=name, entry=entry)


@dataclass(frozen=True)
class PrivacyTechnologies:
    """Privacy-related technologies, most threatening first."""
    entries: Tuple[PrivacyTechnology, ...] = field(default_factory=tuple)
    invalid_count: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


def generate_privacy_technologies(
    technologies: Dict[str, Any],
    categories: Dict[int, Category],
    profile: RiskProfile,
) -> PrivacyTechnologies:
    outcomes = [classify_technology(name, raw, categories, profile) for name, raw in technologies.items()]
    invalid = sum(1 for o in outcomes if o.discarded)
    # sorted() is stable, so ties keep input order
    entries = sorted((o.entry for o in outcomes if o.entry is not None), key=lambda e: e.threat_level, reverse=True)

    if invalid:
        logger.warning(f"Skipped {invalid} invalid technologies")
    logger.info(f"Generated {len(entries)} privacy-related technologies")
    return PrivacyTechnologies(entries=tuple(entries), invalid_count=invalid)


def _keyed_patterns(technologies: Dict[str, Any], profile: RiskProfile, attr: str) -> Tuple[DetectionPattern, ...]:
    patterns: List[DetectionPattern] = []
    for tech in _records(technologies):
        keys = signature_keys(getattr(tech, attr))
        if not keys:
            continue
        level = threat_level(tech.category_ids, profile)
        for key in keys:
            patterns.append(
                DetectionPattern(
                    technology=tech.name,
                    pattern=key,
                    threat_level=level,
                    categories=tuple(tech.category_list),
                    description=tech.description_text,
                )
            )
    return tuple(patterns)


def generate_cookie_patterns(technologies: Dict[str, Any], profile: RiskProfile) -> Tuple[DetectionPattern, ...]:
    patterns = _keyed_patterns(technologies, profile, "cookies")
    logger.info(f"Generated {len(patterns)} cookie detection patterns")
    return patterns


def generate_javascript_patterns(technologies: Dict[str, Any], profile: RiskProfile) -> Tuple[DetectionPattern, ...]:
    patterns = _keyed_patterns(technologies, profile, "js")
    logger.info(f"Generated {len(patterns)} JavaScript detection patterns")
    return patterns


def stringify_pattern(pattern: Any) -> str:
    """Strings pass through; objects and other scalars become compact JSON."""
    if isinstance(pattern, str):
        return pattern
    return json.dumps(pattern, separators=(",", ":"), ensure_ascii=False)


def _source_values(tech: TechnologyRecord, source: str) -> List[Any]:
    value = {"scriptSrc": tech.script_src, "xhr": tech.xhr, "dom": tech.dom}[source]
    if not is_set(value):
        return []
    return list(value) if isinstance(value, list) else [value]


def generate_network_patterns(technologies: Dict[str, Any], profile: RiskProfile) -> Tuple[DetectionPattern, ...]:
    patterns: List[DetectionPattern] = []
    for tech in _records(technologies):
        level = threat_level(tech.category_ids, profile)
        for source in NETWORK_SOURCES:
            for pattern in _source_values(tech, source):
                # Selector-style DOM strings are not observable on the network.
                # Non-string DOM patterns are kept whatever they contain.
                if source == "dom" and isinstance(pattern, str) and "http" not in pattern:
                    continue
                patterns.append(
                    DetectionPattern(
                        technology=tech.name,
                        pattern=stringify_pattern(pattern),
                        threat_level=level,
                        categories=tuple(tech.category_list),
                        description=tech.description_text,
                        source=source,
                    )
                )

    logger.info(f"Generated {len(patterns)} network detection patterns")
    return tuple(patterns)


def _or_default(value: Any, default: Any) -> Any:
    return value if is_set(value) else default


def generate_extension_database(
    raw_categories: Dict[str, Any],
    technologies: Dict[str, Any],
    profile: RiskProfile,
    generated_at: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the compact database embedded by the browser extension.

    Only privacy categories present in the source and technologies with at
    least one privacy category are kept, each reduced to the fields the
    extension matches against.
    """
    db_categories: Dict[str, Any] = {}
    for cat_id in profile.privacy:
        key = str(cat_id)
        if raw_categories.get(key):
            db_categories[key] = raw_categories[key]

    db_technologies: Dict[str, Any] = {}
    for tech in _records(technologies):
        ids = tech.category_ids
        if not any(profile.is_privacy(c) for c in ids):
            continue
        db_technologies[tech.name] = {
            "cats": tech.category_list,
            "description": tech.description_text,
            "threatLevel": threat_level(ids, profile),
            "cookies": _or_default(tech.cookies, {}),
            "js": _or_default(tech.js, {}),
            "scriptSrc": _or_default(tech.script_src, []),
            "xhr": _or_default(tech.xhr, []),
            "dom": _or_default(tech.dom, []),
            "headers": _or_default(tech.headers, {}),
            "saas": _or_default(tech.saas, False),
            "pricing": _or_default(tech.pricing, []),
        }

    logger.info(f"Generated extension database with {len(db_technologies)} technologies")
    return {
        "version": DATABASE_VERSION,
        "generatedAt": generated_at or utc_timestamp(),
        "categories": db_categories,
        "privacyCategories": list(profile.privacy),
        "technologies": db_technologies,
    }


def build_complete_database(
    raw_categories: Dict[str, Any],
    groups: Dict[str, Any],
    technologies: Dict[str, Any],
    privacy_count: int,
    generated_at: Optional[str] = None,
) -> Dict[str, Any]:
    """The source database passed through, with run metadata attached."""
    return {
        "categories": raw_categories,
        "groups": groups,
        "technologies": technologies,
        "metadata": {
            "totalTechnologies": len(technologies),
            "privacyTechnologies": privacy_count,
            "generatedAt": generated_at or utc_timestamp(),
            "version": DATABASE_VERSION,
        },
    }
