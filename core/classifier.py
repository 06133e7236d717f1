"""Threat classification for technologies based on their category memberships."""
from typing import Iterable, List, Any

from core.config import RiskProfile
from models.technology import TechnologyRecord, is_set, is_category_id

HIGH = "high"
MEDIUM = "medium"
LOW = "low"
NONE = "none"

RISK_LEVELS = (HIGH, MEDIUM, LOW)


def threat_level(category_ids: Iterable[Any], profile: RiskProfile) -> int:
    """
    Score a category list from 0 to 3.

    Precedence is fixed: any high-risk ID gives 3, else any medium-risk ID
    gives 2, else any privacy ID gives 1, else 0. Non-numeric entries never
    match.
    """
    ids = {c for c in category_ids if is_category_id(c)}
    if ids.intersection(profile.high_risk):
        return 3
    if ids.intersection(profile.medium_risk):
        return 2
    if ids.intersection(profile.privacy):
        return 1
    return 0


def risk_level(level: int) -> str:
    if level >= 3:
        return HIGH
    if level >= 2:
        return MEDIUM
    if level >= 1:
        return LOW
    return NONE


def detection_methods(tech: TechnologyRecord) -> List[str]:
    """Signal types that can identify the technology, by field presence."""
    methods = []
    if is_set(tech.cookies):
        methods.append("cookies")
    if is_set(tech.js):
        methods.append("javascript")
    if is_set(tech.script_src) or is_set(tech.xhr):
        methods.append("network")
    if is_set(tech.dom) or is_set(tech.html):
        methods.append("dom")
    if is_set(tech.headers):
        methods.append("headers")
    return methods


def signature_keys(value: Any) -> List[Any]:
    """Keys of a keyed signature field, the items of a list, or the single value."""
    if not is_set(value):
        return []
    if isinstance(value, dict):
        return list(value.keys())
    if isinstance(value, list):
        return list(value)
    return [value]


def extract_cookies(tech: TechnologyRecord) -> List[Any]:
    return signature_keys(tech.cookies)
