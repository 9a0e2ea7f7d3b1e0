"""
Pytest Configuration and Shared Fixtures
========================================

This module configures pytest for the HyperGraphQL test suite.
It provides:
- Path setup for importing hypergraphql modules
- Custom markers for test categorization
- Shared fixtures available to all tests

Test Categories (markers):
- @pytest.mark.unit: Fast, isolated unit tests
- @pytest.mark.integration: Component interaction tests
- @pytest.mark.slow: Tests that take > 5 seconds

Usage:
    # Run only unit tests
    pytest -m unit

    # Run everything except slow tests
    pytest -m "not slow"
"""

import os
import sys

import pytest


# =============================================================================
# PATH SETUP
# =============================================================================

# Ensure the hypergraphql package is importable from any test directory
_repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _repo_root not in sys.path:
    sys.path.insert(0, _repo_root)


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Fast, isolated unit tests (< 1s each)"
    )
    config.addinivalue_line(
        "markers", "integration: Component interaction tests"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take > 5 seconds"
    )


# =============================================================================
# TEST COLLECTION HOOKS
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    Tests in tests/unit/ get @pytest.mark.unit, etc.
    """
    for item in items:
        test_path = str(item.fspath)

        if '/unit/' in test_path or '\\unit\\' in test_path:
            item.add_marker(pytest.mark.unit)
        elif '/integration/' in test_path or '\\integration\\' in test_path:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# HYPERGRAPH FIXTURES
# =============================================================================
# GUIDELINES:
# - Use repository for tests against the in-memory store
# - Use file_repository when the test needs records on disk
# - Use sample_graph for read-mostly navigation tests

@pytest.fixture
def repository():
    """Function-scoped fixture for a fresh, empty in-memory repository."""
    from hypergraphql.graph import Repository
    return Repository()


@pytest.fixture
def file_repository(tmp_path):
    """Function-scoped repository backed by JSON files under tmp_path."""
    from hypergraphql.graph import JsonFileBackend, Repository
    return Repository(JsonFileBackend(tmp_path / "store"))


@pytest.fixture
def manager():
    """Function-scoped HyperGraphManager over an in-memory store."""
    from hypergraphql.graph import HyperGraphManager
    return HyperGraphManager()


@pytest.fixture
def sample_graph(repository):
    """
    Repository pre-populated with a small team graph.

    Provides:
        (repository, ids) where ids maps short names to record ids:
        e1 Developer, e2 Developer, e3 Project, e4 Project (org "other"),
        r1 e1 -WorksOn-> e3, r2 e2 -WorksOn-> e3, r3 e1 -Reviews-> e2,
        r4 e3 -DependsOn-> e4
    """
    from hypergraphql.graph import RecordKind

    def entity(record_type, name, organization="acme"):
        return repository.create(
            RecordKind.ENTITY, record_type, {"name": name}, organization
        ).id

    def relation(record_type, source, target):
        return repository.create(
            RecordKind.RELATION, record_type, {}, "acme", source=source, target=target
        ).id

    ids = {
        "e1": entity("Developer", "Alice"),
        "e2": entity("Developer", "Bob"),
        "e3": entity("Project", "HyperGraphQL"),
        "e4": entity("Project", "Upstream", organization="other"),
    }
    ids["r1"] = relation("WorksOn", ids["e1"], ids["e3"])
    ids["r2"] = relation("WorksOn", ids["e2"], ids["e3"])
    ids["r3"] = relation("Reviews", ids["e1"], ids["e2"])
    ids["r4"] = relation("DependsOn", ids["e3"], ids["e4"])
    return repository, ids
