"""
HyperGraphQL
============

Multi-tenant hypergraph core: typed entities and typed, directed relations
scoped by organization, with bounded navigation and scaling between
folder, repository, organization and enterprise granularities.

Example:
    from hypergraphql import HyperGraphManager

    manager = HyperGraphManager()
    dev = manager.create_entity("Developer", {"name": "Alice"}, organization="acme")
"""

from .config import HyperGraphQLConfig, get_config
from .graph import (
    HyperGraphManager,
    Repository,
    Entity,
    Relation,
    HyperGraph,
    RecordKind,
)

__version__ = "1.0.0"
__all__ = [
    'HyperGraphQLConfig',
    'get_config',
    'HyperGraphManager',
    'Repository',
    'Entity',
    'Relation',
    'HyperGraph',
    'RecordKind',
]
