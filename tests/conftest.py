"""
Pytest configuration and fixtures
"""
import os
import xml.etree.ElementTree as ET

import pytest


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove Funlet overrides that the developer's shell or .env may set"""
    for name in list(os.environ):
        if name.startswith('FUNLET_'):
            monkeypatch.delenv(name)


@pytest.fixture
def parse():
    """Parse a Voice response, or TwiML text, into an element tree"""
    def _parse(response):
        return ET.fromstring(str(response).encode('utf-8'))
    return _parse


@pytest.fixture
def client():
    from app import app

    app.config['TESTING'] = True
    with app.test_client() as test_client:
        yield test_client
