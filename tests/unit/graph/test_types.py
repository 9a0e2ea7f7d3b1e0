"""
Tests for hypergraph record and value types.
"""

from datetime import datetime, timedelta, timezone

import pytest

from hypergraphql.graph.errors import ValidationError
from hypergraphql.graph.types import (
    Entity,
    HyperGraph,
    HyperGraphMetadata,
    OrganizationContext,
    OrganizationLevel,
    Projection,
    RecordKind,
    Relation,
    ScaleLevel,
    ScalingConfig,
    ScalingMode,
    format_timestamp,
    parse_timestamp,
    record_from_dict,
)

T0 = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


class TestTimestamps:
    """format_timestamp() and parse_timestamp()."""

    def test_format_millisecond_precision(self):
        assert format_timestamp(T0) == "2025-01-02T03:04:05.678Z"

    def test_format_naive_is_utc(self):
        assert format_timestamp(T0.replace(tzinfo=None)) == "2025-01-02T03:04:05.678Z"

    def test_format_converts_offsets(self):
        local = T0.astimezone(timezone(timedelta(hours=2)))
        assert format_timestamp(local) == "2025-01-02T03:04:05.678Z"

    def test_parse_z_suffix(self):
        assert parse_timestamp("2025-01-02T03:04:05.678Z") == T0

    def test_parse_offset(self):
        assert parse_timestamp("2025-01-02T05:04:05.678+02:00") == T0

    def test_parse_datetime_passthrough(self):
        assert parse_timestamp(T0) is T0

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")
        with pytest.raises(TypeError):
            parse_timestamp(12345)


class TestEntity:
    """Entity construction and serialization."""

    def test_kind_and_folder(self):
        entity = Entity(id="e1", type="Developer")
        assert entity.kind is RecordKind.ENTITY
        assert entity.folder == "entities"

    def test_to_dict_wire_shape(self):
        entity = Entity(
            id="e1", type="Developer", attributes={"name": "Alice"},
            organization="acme", created_at=T0, updated_at=T0,
        )
        assert entity.to_dict() == {
            "id": "e1",
            "type": "Developer",
            "attributes": {"name": "Alice"},
            "organization": "acme",
            "createdAt": "2025-01-02T03:04:05.678Z",
            "updatedAt": "2025-01-02T03:04:05.678Z",
        }

    def test_to_dict_omits_missing_organization(self):
        assert "organization" not in Entity(id="e1", type="Developer").to_dict()

    def test_from_dict(self):
        entity = Entity.from_dict({
            "id": "e1",
            "type": "Developer",
            "attributes": {"name": "Alice"},
            "createdAt": "2025-01-02T03:04:05.678Z",
            "updatedAt": "2025-01-02T03:04:05.678Z",
        })
        assert entity.id == "e1"
        assert entity.organization is None
        assert entity.created_at == T0

    def test_from_dict_missing_field(self):
        with pytest.raises(KeyError):
            Entity.from_dict({"id": "e1", "type": "Developer"})

    def test_from_dict_wrong_types(self):
        with pytest.raises(TypeError):
            Entity.from_dict({
                "id": 1, "type": "Developer",
                "createdAt": "2025-01-02T03:04:05.678Z",
                "updatedAt": "2025-01-02T03:04:05.678Z",
            })

    def test_timestamps_from_strings(self):
        entity = Entity(id="e1", type="X", created_at="2025-01-02T03:04:05.678Z",
                        updated_at="2025-01-02T03:04:05.678Z")
        assert entity.created_at == T0


class TestMerged:
    """Record.merged() semantics."""

    def test_patch_merges_shallowly(self):
        entity = Entity(id="e1", type="X", attributes={"a": 1, "b": {"c": 2}},
                        created_at=T0, updated_at=T0)
        updated = entity.merged({"b": {"d": 3}, "e": 4})
        assert updated.attributes == {"a": 1, "b": {"d": 3}, "e": 4}

    def test_source_record_untouched(self):
        entity = Entity(id="e1", type="X", attributes={"a": 1})
        entity.merged({"a": 2})
        assert entity.attributes == {"a": 1}

    def test_updated_at_never_before_created_at(self):
        entity = Entity(id="e1", type="X", created_at=T0, updated_at=T0)
        updated = entity.merged({}, now=T0 - timedelta(days=1))
        assert updated.updated_at == T0
        assert updated.created_at == T0

    def test_updated_at_refreshed(self):
        entity = Entity(id="e1", type="X", created_at=T0, updated_at=T0)
        later = T0 + timedelta(seconds=5)
        assert entity.merged({}, now=later).updated_at == later


class TestRelation:
    """Relation endpoints and serialization."""

    def test_wire_shape_has_endpoints(self):
        relation = Relation(id="r1", type="WorksOn", source="e1", target="e2")
        data = relation.to_dict()
        assert data["source"] == "e1"
        assert data["target"] == "e2"
        assert relation.folder == "relations"

    def test_other_endpoint(self):
        relation = Relation(id="r1", type="WorksOn", source="e1", target="e2")
        assert relation.other_endpoint("e1") == "e2"
        assert relation.other_endpoint("e2") == "e1"

    def test_self_loop(self):
        relation = Relation(id="r1", type="Self", source="e1", target="e1")
        assert relation.other_endpoint("e1") == "e1"
        assert relation.touches("e1")
        assert not relation.touches("e2")

    def test_record_from_dict_dispatches_on_kind(self):
        data = Relation(id="r1", type="WorksOn", source="e1", target="e2").to_dict()
        restored = record_from_dict(RecordKind.RELATION, data)
        assert isinstance(restored, Relation)
        assert restored.source == "e1"

    def test_from_dict_requires_endpoints(self):
        data = Entity(id="e1", type="X").to_dict()
        with pytest.raises(KeyError):
            Relation.from_dict(data)


class TestHyperGraph:
    """HyperGraph bundle."""

    def test_duplicate_entity_ids_rejected(self):
        with pytest.raises(ValidationError):
            HyperGraph(entities=[Entity(id="e1", type="X"), Entity(id="e1", type="Y")])

    def test_duplicate_relation_ids_rejected(self):
        relation = Relation(id="r1", type="X", source="a", target="b")
        with pytest.raises(ValidationError):
            HyperGraph(relations=[relation, relation])

    def test_same_id_across_kinds_allowed(self):
        graph = HyperGraph(
            entities=[Entity(id="x", type="X")],
            relations=[Relation(id="x", type="X", source="x", target="x")],
        )
        assert graph.entity_ids() == ["x"]
        assert graph.relation_ids() == ["x"]

    def test_metadata_defaults(self):
        metadata = HyperGraphMetadata()
        assert metadata.organization == "default"
        assert metadata.repository == "default"
        assert metadata.branch == "main"
        assert metadata.version == "1.0.0"
        assert metadata.last_sync.tzinfo is not None

    def test_version_suffix(self):
        metadata = HyperGraphMetadata(version="2.0.0")
        assert metadata.with_version_suffix("compressed").version == "2.0.0-compressed"
        assert metadata.version == "2.0.0"

    def test_dict_round_trip(self):
        graph = HyperGraph(
            entities=[Entity(id="e1", type="X", created_at=T0, updated_at=T0)],
            relations=[Relation(id="r1", type="R", source="e1", target="e2",
                                created_at=T0, updated_at=T0)],
            metadata=HyperGraphMetadata(organization="acme", last_sync=T0),
        )
        data = graph.to_dict()
        assert data["metadata"]["lastSync"] == "2025-01-02T03:04:05.678Z"
        assert HyperGraph.from_dict(data) == graph


class TestValueTypes:
    """OrganizationContext, ScalingConfig and Projection."""

    def test_org_context_dedupes_repos(self):
        context = OrganizationContext("1", "acme", repos=["a", "b", "a"])
        assert context.repos == ["a", "b"]

    def test_org_context_coerces_level(self):
        context = OrganizationContext("1", "acme", level="enterprise")
        assert context.level is OrganizationLevel.ENTERPRISE
        assert context.to_dict()["orgName"] == "acme"

    def test_org_context_invalid_level(self):
        with pytest.raises(ValidationError) as ctx:
            OrganizationContext("1", "acme", level="galaxy")
        assert "repo" in ctx.value.context["valid_values"]

    def test_scaling_config_coerces(self):
        config = ScalingConfig(mode="compress", level="folder", target_path="acme/out")
        assert config.mode is ScalingMode.COMPRESS
        assert config.level is ScaleLevel.FOLDER
        assert config.to_dict()["targetPath"] == "acme/out"

    def test_scaling_config_invalid_mode(self):
        with pytest.raises(ValidationError):
            ScalingConfig(mode="shrink", level="folder")

    def test_projection_to_dict(self):
        entity = Entity(id="e1", type="X")
        projection = Projection("acme/default/entities/X/e1.json", RecordKind.ENTITY, entity, "acme")
        data = projection.to_dict()
        assert data["type"] == "entity"
        assert data["content"]["id"] == "e1"
