from datetime import datetime

import pytest

from core.config import ScraperConfig
from core.datasets import generate_privacy_technologies
from core.report import build_summary_report, render_markdown_report
from models.category import index_categories


@pytest.fixture
def profile():
    return ScraperConfig.defaults().risk_profile()


@pytest.fixture
def report(raw_technologies, raw_categories, profile):
    index = index_categories(raw_categories)
    privacy = generate_privacy_technologies(raw_technologies, index, profile)
    return build_summary_report(len(raw_technologies), privacy.entries, index, profile)


def test_summary_counts(report):
    assert report["summary"] == {
        "totalTechnologies": 5,
        "privacyRelatedTechnologies": 2,
        "privacyPercentage": "40.0",
    }
    assert report["riskDistribution"] == {"high": 1, "medium": 1, "low": 0}


def test_category_breakdown_covers_every_privacy_category(report, profile):
    breakdown = report["categoryBreakdown"]
    assert len(breakdown) == len(profile.privacy)
    assert breakdown["Analytics"] == 1
    assert breakdown["Browser fingerprinting"] == 1
    assert breakdown["Advertising"] == 0
    assert breakdown["Unknown(67)"] == 0


def test_top_threats_and_detection_stats(report):
    assert report["topThreats"] == [
        {"name": "FingerprintJS", "threatLevel": 3, "riskLevel": "high", "categories": ["Browser fingerprinting"]},
        {"name": "Google Analytics", "threatLevel": 2, "riskLevel": "medium", "categories": ["Analytics"]},
    ]
    assert report["detectionMethodStats"] == {
        "cookies": 1,
        "javascript": 2,
        "network": 1,
        "dom": 1,
        "headers": 0,
    }


def test_top_threats_limited_to_twenty(profile):
    technologies = {f"Tech{i}": {"cats": [10]} for i in range(30)}
    privacy = generate_privacy_technologies(technologies, {}, profile)
    report = build_summary_report(30, privacy.entries, {}, profile)
    assert len(report["topThreats"]) == 20
    assert report["topThreats"][0]["name"] == "Tech0"


def test_empty_database_percentage(profile):
    report = build_summary_report(0, [], {}, profile)
    assert report["summary"]["privacyPercentage"] == "0.0"


def test_markdown_report_reflects_numbers(report):
    text = render_markdown_report(report, datetime(2024, 5, 1))

    assert text.startswith("# Wappalyzer Privacy Technology Analysis Report")
    assert "Generated on: 2024-05-01" in text
    assert "- **Total Technologies**: 5" in text
    assert "- **Privacy-Related Technologies**: 2 (40.0%)" in text
    assert "**High Risk**: 1 technologies" in text
    assert "**JavaScript Detection**: 2 technologies" in text
    assert "1. **FingerprintJS** (HIGH) - Browser fingerprinting" in text
    assert "2. **Google Analytics** (MEDIUM) - Analytics" in text


def test_markdown_category_breakdown_sorted_by_count(report):
    text = render_markdown_report(report)
    section = text.split("## Category Breakdown")[1].split("##")[0]
    counts = [int(line.rsplit(": ", 1)[1].split()[0]) for line in section.strip().splitlines()]
    assert counts == sorted(counts, reverse=True)
