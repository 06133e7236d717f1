"""Summary statistics over the privacy technology list and their Markdown rendering."""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from core.classifier import RISK_LEVELS
from core.config import RiskProfile
from models.category import Category, category_name
from models.technology import PrivacyTechnology

logger = logging.getLogger(__name__)

TOP_THREATS = 20
DETECTION_STATS = ("cookies", "javascript", "network", "dom", "headers")


def build_summary_report(
    total_technologies: int,
    privacy_technologies: Iterable[PrivacyTechnology],
    categories: Dict[int, Category],
    profile: RiskProfile,
) -> Dict[str, Any]:
    """
    Aggregate the privacy technology list into the summary report structure.

    Args:
        total_technologies: Number of technologies in the merged database
        privacy_technologies: Entries already sorted by threat level
        categories: Category index used to name the breakdown keys
        profile: Risk profile whose privacy categories are broken down

    Returns:
        JSON-ready report dictionary
    """
    entries = list(privacy_technologies)
    percentage = (len(entries) / total_technologies * 100) if total_technologies else 0.0

    breakdown: Dict[str, int] = {}
    for cat_id in profile.privacy:
        breakdown[category_name(categories, cat_id)] = sum(1 for e in entries if cat_id in e.categories)

    logger.info(f"Generated summary report for {len(entries)} privacy technologies")
    return {
        "summary": {
            "totalTechnologies": total_technologies,
            "privacyRelatedTechnologies": len(entries),
            "privacyPercentage": f"{percentage:.1f}",
        },
        "riskDistribution": {
            level: sum(1 for e in entries if e.risk_level == level) for level in RISK_LEVELS
        },
        "categoryBreakdown": breakdown,
        "topThreats": [
            {
                "name": e.name,
                "threatLevel": e.threat_level,
                "riskLevel": e.risk_level,
                "categories": list(e.category_names),
            }
            for e in entries[:TOP_THREATS]
        ],
        "detectionMethodStats": {
            method: sum(1 for e in entries if method in e.detection_methods) for method in DETECTION_STATS
        },
    }


def render_markdown_report(report: Dict[str, Any], generated_on: Optional[datetime] = None) -> str:
    generated_on = generated_on or datetime.now()
    summary = report["summary"]
    risk = report["riskDistribution"]
    stats = report["detectionMethodStats"]

    lines = [
        "# Wappalyzer Privacy Technology Analysis Report",
        "",
        f"Generated on: {generated_on.strftime('%Y-%m-%d')}",
        "",
        "## Summary",
        f"- **Total Technologies**: {summary['totalTechnologies']:,}",
        f"- **Privacy-Related Technologies**: {summary['privacyRelatedTechnologies']:,} ({summary['privacyPercentage']}%)",
        "",
        "## Risk Distribution",
        f"- 🔴 **High Risk**: {risk['high']} technologies",
        f"- 🟡 **Medium Risk**: {risk['medium']} technologies",
        f"- 🟢 **Low Risk**: {risk['low']} technologies",
        "",
        "## Category Breakdown",
    ]
    by_count = sorted(report["categoryBreakdown"].items(), key=lambda item: item[1], reverse=True)
    lines.extend(f"- **{name}**: {count} technologies" for name, count in by_count)

    lines.extend([
        "",
        "## Detection Method Coverage",
        f"- 🍪 **Cookie Detection**: {stats['cookies']} technologies",
        f"- 🔧 **JavaScript Detection**: {stats['javascript']} technologies",
        f"- 🌐 **Network Detection**: {stats['network']} technologies",
        f"- 📄 **DOM Detection**: {stats['dom']} technologies",
        f"- 📨 **Header Detection**: {stats['headers']} technologies",
        "",
        f"## Top {TOP_THREATS} Privacy Threats",
    ])
    lines.extend(
        f"{i}. **{tech['name']}** ({tech['riskLevel'].upper()}) - {', '.join(tech['categories'])}"
        for i, tech in enumerate(report["topThreats"], start=1)
    )

    lines.extend([
        "",
        "---",
        "*Report generated by Wappalyzer Privacy Technology Scraper*",
        "",
    ])
    return "\n".join(lines)
