"""
Pytest configuration and fixtures for lesson scraper tests.
"""
import pytest
from unittest.mock import MagicMock
import requests

import logger
from manifest import parse_manifest


@pytest.fixture(autouse=True)
def quiet_logger():
    """Start every test with a console-only logger at DEBUG."""
    logger.setup_logger(level=logger.DEBUG)
    yield


@pytest.fixture
def mock_session():
    """Create a mock requests session."""
    session = MagicMock(spec=requests.Session)
    session.get.return_value = MagicMock()
    session.get.return_value.status_code = 200
    session.get.return_value.json.return_value = {}
    session.cookies = MagicMock()
    return session


@pytest.fixture
def mock_driver():
    """Create a mock Selenium WebDriver."""
    driver = MagicMock()
    driver.get.return_value = None
    driver.execute_script.return_value = []
    driver.find_element.return_value = MagicMock()
    driver.find_elements.return_value = []
    driver.switch_to = MagicMock()
    return driver


@pytest.fixture
def sample_manifest_data():
    """Course-player JSON as saved to response.json."""
    return {
        "course": {"slug": "ultimate-go", "name": "Ultimate Go"},
        "contents": [
            {"slug": "intro", "name": "Introduction", "display_name": "Video"},
            {"slug": "variables", "name": "Variables", "display_name": "Video"},
            {"slug": "structs", "name": "Struct Types", "display_name": "Video"},
        ]
    }


@pytest.fixture
def sample_manifest(sample_manifest_data):
    """Parsed three-lesson manifest."""
    return parse_manifest(sample_manifest_data)


@pytest.fixture
def sample_script_sources():
    """Script sources as listed inside a player frame."""
    return [
        "https://fast.wistia.com/assets/external/E-v1.js",
        "https://fast.wistia.com/embed/medias/abc123xyz.jsonp",
        "https://cdn.example.com/embed/medias/notthis.jsonp",
        "https://fast.wistia.com/embed/medias/second456.jsonp",
    ]
