"""
Hypergraph store, traversal and scaling.

This package holds the core of HyperGraphQL: typed entities connected by
typed, directed relations, scoped by organization.

Key components:
- Repository: organization-scoped CRUD over an injectable StorageBackend
- RecordFilter / filter_records: conjunctive filtering and pagination
- navigate / GraphNavigator: bounded breadth-first navigation
- compress / expand / scale / aggregate: moving between granularities
- project_to_path / parse_from_path: namespace path projection
- HyperGraphManager: facade the wire layer calls into
"""

from .errors import (
    HyperGraphError,
    NotFoundError,
    ValidationError,
    CorruptionError,
    MalformedContentError,
)

from .types import (
    Record,
    Entity,
    Relation,
    RecordKind,
    HyperGraph,
    HyperGraphMetadata,
    OrganizationContext,
    OrganizationLevel,
    ScalingConfig,
    ScalingMode,
    ScaleLevel,
    Projection,
    QueryContext,
    record_from_dict,
    format_timestamp,
    parse_timestamp,
)

from .backends import (
    StorageBackend,
    InMemoryBackend,
    JsonFileBackend,
)

from .filters import (
    RecordFilter,
    filter_records,
    matches,
    paginate,
)

from .repository import Repository

from .traversal import (
    GraphNavigator,
    NavigationPlan,
    TraversalResult,
    expand as expand_from,
    navigate,
)

from .scaling import (
    aggregate,
    compress,
    expand,
    scale,
)

from .projection import (
    generate_org_structure,
    get_projection_content,
    parse_entity_from_path,
    parse_from_path,
    parse_relation_from_path,
    project_entity_to_path,
    project_hypergraph,
    project_relation_to_path,
    project_to_path,
)

from .api import HyperGraphManager

__all__ = [
    # Errors
    'HyperGraphError',
    'NotFoundError',
    'ValidationError',
    'CorruptionError',
    'MalformedContentError',
    # Types
    'Record',
    'Entity',
    'Relation',
    'RecordKind',
    'HyperGraph',
    'HyperGraphMetadata',
    'OrganizationContext',
    'OrganizationLevel',
    'ScalingConfig',
    'ScalingMode',
    'ScaleLevel',
    'Projection',
    'QueryContext',
    'record_from_dict',
    'format_timestamp',
    'parse_timestamp',
    # Storage
    'StorageBackend',
    'InMemoryBackend',
    'JsonFileBackend',
    'Repository',
    # Filtering
    'RecordFilter',
    'filter_records',
    'matches',
    'paginate',
    # Traversal
    'GraphNavigator',
    'NavigationPlan',
    'TraversalResult',
    'expand_from',
    'navigate',
    # Scaling
    'aggregate',
    'compress',
    'expand',
    'scale',
    # Projection
    'generate_org_structure',
    'get_projection_content',
    'parse_entity_from_path',
    'parse_from_path',
    'parse_relation_from_path',
    'project_entity_to_path',
    'project_hypergraph',
    'project_relation_to_path',
    'project_to_path',
    # Facade
    'HyperGraphManager',
]
