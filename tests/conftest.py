"""Test configuration and fixtures for AugmentQL."""

import pytest

from augmentql import AugmentConfig
from tests.schema import augment_schema, build_graph


@pytest.fixture(scope="session")
def model():
    return augment_schema.model()


@pytest.fixture(scope="session")
def graph():
    """Type graph with every legacy alias family enabled."""
    return build_graph()


@pytest.fixture(scope="session")
def lean_graph():
    """Type graph without any deprecated alias fields."""
    return build_graph(AugmentConfig().without_legacy())


@pytest.fixture(scope="session")
def strawberry_schema():
    return augment_schema.to_strawberry()
