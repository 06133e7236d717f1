import os
import sys
import pytest

# Ensure project root is on sys.path for imports like `core.*`
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


@pytest.fixture
def raw_categories():
    return {
        "1": {"name": "CMS", "groups": [3], "priority": 1},
        "10": {"name": "Analytics", "groups": [8], "priority": 1},
        "36": {"name": "Advertising", "groups": [8], "priority": 1},
        "83": {"name": "Browser fingerprinting", "groups": [8], "priority": 1},
    }


@pytest.fixture
def raw_technologies():
    return {
        "Google Analytics": {
            "cats": [10],
            "description": "Web analytics service.",
            "website": "https://marketingplatform.google.com",
            "pricing": ["freemium"],
            "saas": True,
            "cookies": {"_ga": "", "_gid": ""},
            "js": {"gaGlobal": ""},
            "scriptSrc": ["google-analytics\\.com/analytics\\.js"],
        },
        "FingerprintJS": {
            "cats": [83],
            "description": "Browser fingerprinting library.",
            "js": {"FingerprintJS": ""},
            "dom": "https://fpjs.io/agent",
        },
        "WordPress": {
            "cats": [1],
            "description": "Content management system.",
            "html": ["<link rel=[\"']stylesheet[\"'] [^>]+/wp-(?:content|includes)/"],
            "dom": "link[href*='/wp-content/']",
        },
        "Broken": "not an object",
        "NoCats": {"description": "Missing categories"},
    }
