from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

@dataclass(frozen=True)
class DetectionPattern:
    """A single detection signal attributed to a technology."""
    technology: str
    pattern: Any # cookie/JS key, or stringified network pattern
    threat_level: int
    categories: Tuple[Any, ...] = field(default_factory=tuple)
    description: str = ""
    source: Optional[str] = None # 'scriptSrc', 'xhr' or 'dom' for network patterns

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"technology": self.technology}
        if self.source is not None:
            data["type"] = self.source
        data.update({
            "pattern": self.pattern,
            "threatLevel": self.threat_level,
            "categories": list(self.categories),
            "description": self.description,
        })
        return data
