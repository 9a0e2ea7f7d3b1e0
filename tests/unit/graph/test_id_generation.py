"""
Tests for record ID generation.
"""

import re

from hypergraphql.utils.id_generation import (
    aggregated_id,
    generate_entity_id,
    generate_record_id,
    generate_relation_id,
)

ID_PATTERN = re.compile(r"^(entity|relation)_\d+_[0-9a-f]{8}$")


class TestGenerateIds:
    """Format and uniqueness of generated IDs."""

    def test_entity_id_format(self):
        assert ID_PATTERN.match(generate_entity_id())
        assert generate_entity_id().startswith("entity_")

    def test_relation_id_format(self):
        assert ID_PATTERN.match(generate_relation_id())
        assert generate_relation_id().startswith("relation_")

    def test_custom_prefix(self):
        assert generate_record_id("thing").startswith("thing_")

    def test_ids_are_unique(self):
        ids = {generate_entity_id() for _ in range(1000)}
        assert len(ids) == 1000


class TestAggregatedId:
    """Deterministic IDs for compressed records."""

    def test_aggregated_id(self):
        assert aggregated_id("Developer") == "aggregated_Developer"

    def test_aggregated_id_is_stable(self):
        assert aggregated_id("WorksOn") == aggregated_id("WorksOn")
