"""Share fixtures across the test suite."""

import json

import pytest

from watched_relay.config import Settings

API_HOST = "tautulli.test:8181"
API_KEY = "test-key"
HISTORY_URL = f"http://{API_HOST}/api/v2"


def history_body(*records: dict) -> str:
    """Wrap records in the history API's response envelope."""
    return json.dumps({"response": {"result": "success", "data": {"recordsTotal": len(records), "data": list(records)}}})


@pytest.fixture()
def settings(tmp_path):
    """Create settings pointing at a mock history API and a temp output dir."""
    return Settings(API_HOST=API_HOST, API_KEY=API_KEY, OUTPUT_DIR=tmp_path / "output")


@pytest.fixture()
def watched_record():
    """Create a fully watched history row."""
    return {
        "full_title": "Test Show",
        "parent_media_index": 1,
        "media_index": 2,
        "watched_status": 1.0,
        "percent_complete": 98,
    }
