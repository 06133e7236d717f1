from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple


def is_set(value: Any) -> bool:
    """Presence test used for optional signature fields.

    Empty containers still count as present; only missing, null, false,
    zero and empty-string values are treated as absent.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0
    return True


def is_category_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class TechnologyRecord:
    """One entry of the fingerprint database, fields kept as fetched."""
    name: str
    cats: Any = None
    description: Any = None
    website: Any = None
    pricing: Any = None
    saas: Any = None
    cookies: Any = None # cookie name -> matcher, or a single matcher
    js: Any = None # JS property -> matcher, or a single matcher
    script_src: Any = None
    xhr: Any = None
    dom: Any = None
    html: Any = None
    headers: Any = None

    @classmethod
    def from_raw(cls, name: str, raw: Any) -> Optional["TechnologyRecord"]:
        """Build a record from a raw mapping; None if the entry is not an object."""
        if not isinstance(raw, dict):
            return None
        return cls(
            name=str(name or ""),
            cats=raw.get("cats"),
            description=raw.get("description"),
            website=raw.get("website"),
            pricing=raw.get("pricing"),
            saas=raw.get("saas"),
            cookies=raw.get("cookies"),
            js=raw.get("js"),
            script_src=raw.get("scriptSrc"),
            xhr=raw.get("xhr"),
            dom=raw.get("dom"),
            html=raw.get("html"),
            headers=raw.get("headers"),
        )

    @property
    def has_category_list(self) -> bool:
        return isinstance(self.cats, list)

    @property
    def category_list(self) -> List[Any]:
        """The raw category list, or an empty list when absent or malformed."""
        return list(self.cats) if self.has_category_list else []

    @property
    def category_ids(self) -> Tuple[int, ...]:
        """Numeric category IDs only."""
        return tuple(c for c in self.category_list if is_category_id(c))

    @property
    def description_text(self) -> str:
        return str(self.description) if is_set(self.description) else ""


@dataclass(frozen=True)
class PrivacyTechnology:
    """A privacy-related technology with its threat assessment."""
    name: str
    description: str
    categories: Tuple[int, ...]
    category_names: Tuple[str, ...]
    threat_level: int
    risk_level: str
    detection_methods: Tuple[str, ...] = field(default_factory=tuple)
    cookies: Tuple[Any, ...] = field(default_factory=tuple)
    website: str = ""
    pricing: Tuple[Any, ...] = field(default_factory=tuple)
    saas: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "categories": list(self.categories),
            "categoryNames": list(self.category_names),
            "threatLevel": self.threat_level,
            "riskLevel": self.risk_level,
            "detectionMethods": list(self.detection_methods),
            "cookies": list(self.cookies),
            "website": self.website,
            "pricing": list(self.pricing),
            "saas": self.saas,
        }


# Discard reasons for records that cannot be classified
NOT_AN_OBJECT = "not an object"
MISSING_CATEGORIES = "missing or malformed category list"


@dataclass(frozen=True)
class RecordOutcome:
    """Result of classifying one record.

    Exactly one of three states: ``entry`` set (privacy-related),
    ``discard_reason`` set (malformed, skipped and counted), or neither
    (well-formed but not privacy-related).
    """
    name: str
    entry: Optional[PrivacyTechnology] = None
    discard_reason: Optional[str] = None

    @property
    def discarded(self) -> bool:
        return self.discard_reason is not None
