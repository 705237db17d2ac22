"""
Shared pytest fixtures for license decisions tests.

Remote decision files are served from an in-memory mapping through a
mocked requests session, so no test touches the network.
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from decisioning import Decisions
from ingestion.http_client import HttpClient


@pytest.fixture
def remote_files():
    """
    URL -> body mapping served by the mocked session.

    Unknown URLs answer 404.
    """
    return {}


@pytest.fixture
def http_session(remote_files):
    """
    Mock requests session serving remote_files.

    Returns:
        MagicMock whose get() mimics requests.Session.get
    """
    def get(url, headers=None, timeout=None):
        response = MagicMock()
        if url in remote_files:
            response.status_code = 200
            response.text = remote_files[url]
            response.raise_for_status.return_value = None
        else:
            response.status_code = 404
            response.text = ''
            response.raise_for_status.side_effect = requests.HTTPError(f"404 Client Error for url: {url}")
        return response

    session = MagicMock()
    session.get.side_effect = get
    return session


@pytest.fixture
def http_client(http_session):
    return HttpClient(timeout_seconds=5, session=http_session)


@pytest.fixture
def decisions(http_client):
    """Fresh, empty decisions wired to the mocked session."""
    return Decisions(http_client=http_client)


@pytest.fixture
def write_decisions(tmp_path):
    """
    Write operation records as a YAML decisions file.

    Returns:
        Function (records, name) -> path string
    """
    def write(records, name='inherit.yml'):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(records))
        return str(path)

    return write
