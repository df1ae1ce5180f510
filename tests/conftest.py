"""
Pytest configuration for Portfolio Recommender tests.

Sets up test environment and global fixtures.
"""
import os

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables (before any portfolio_recommender import)
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault("GOOGLE_GENERATIVE_AI_API_KEY", "test-google-api-key")
os.environ.setdefault("GENERATION_MAX_ATTEMPTS", "2")


def make_position(**overrides):
    """A structurally valid Position payload."""
    position = {
        "symbol": "VTI",
        "name": "Vanguard Total Stock Market ETF",
        "asset_class": "ETF",
        "weight": 100,
        "rationale": "Broad, low-cost exposure to the US equity market.",
    }
    position.update(overrides)
    return position


def make_recommendation(weights=(60, 40), **overrides):
    """A Recommendation payload with one position per weight."""
    payload = {
        "version": "1",
        "objective": "grow savings for a house",
        "risk_tolerance": "high",
        "horizon_years": 10,
        "portfolio": [
            make_position(symbol=f"POS{index}", weight=weight)
            for index, weight in enumerate(weights)
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def valid_request_payload():
    """Request body from the documented example."""
    return {
        "objective": "grow savings for a house",
        "risk_tolerance": "high",
        "horizon_years": 10,
    }


@pytest.fixture
def valid_recommendation_payload():
    """Generated recommendation whose weights sum to exactly 100."""
    return make_recommendation(weights=(60, 30, 10))


@pytest.fixture
def position_factory():
    """Build Position payloads: position_factory(weight=25, symbol="BND")."""
    return make_position


@pytest.fixture
def recommendation_factory():
    """Build Recommendation payloads: recommendation_factory(weights=(50, 50))."""
    return make_recommendation
