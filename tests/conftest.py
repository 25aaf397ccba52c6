"""
Shared pytest fixtures for the roster engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roster.models import Participant


def make_participants(districts):
    """Participants P1..Pn with the given district codes, in order."""
    return [
        Participant(id=f"P{i + 1}", name=f"Player {i + 1}", district=district)
        for i, district in enumerate(districts)
    ]


@pytest.fixture
def participant_factory():
    """Build participants from a list of district codes."""
    return make_participants


@pytest.fixture
def distinct_participants():
    """Ten participants, each from a different district."""
    return make_participants(["TVY", "CBE", "MDU", "TNJ", "CHE", "TVL", "ERO", "DGL", "KPM", "NAM"])


@pytest.fixture
def crowded_district_participants():
    """Six participants from one district and one from another."""
    return make_participants(["CHE"] * 6 + ["MDU"])


@pytest.fixture
def mixed_participants():
    """Uneven district sizes: three from CHE, two from MDU, one each from two more."""
    return make_participants(["CHE", "MDU", "CHE", "TNJ", "MDU", "CHE", "SAL"])


@pytest.fixture
def client():
    """Flask test client."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def payload_participants():
    """Participants as they arrive in a JSON request body."""
    return [
        {'id': '1', 'name': 'Mahesh', 'district': 'TVY'},
        {'id': '2', 'name': 'Kavin', 'district': 'CBE'},
        {'id': '3', 'name': 'Suresh', 'district': 'TVY'},
        {'id': '4', 'name': 'Balaji', 'district': 'TNJ'},
        {'id': '5', 'name': 'Vignesh', 'district': 'CBE'},
    ]
