"""
High-level API for the hypergraph core.

HyperGraphManager is the single entry point a wire layer (GraphQL or REST
handlers) calls into. Each query, mutation and nested field the wire layer
serves maps onto one plain method here; results are plain values (records,
lists, HyperGraph) or None, and failures are typed exceptions from
hypergraphql.graph.errors for the caller to translate.

Example:
    >>> manager = HyperGraphManager()
    >>> alice = manager.create_entity("Developer", {"name": "Alice"}, organization="acme")
    >>> proj = manager.create_entity("Project", {"name": "HyperGraphQL"}, organization="acme")
    >>> manager.create_relation("WorksOn", alice.id, proj.id, organization="acme")
    >>> graph = manager.navigate(alice.id, depth=1)
    >>> [e.type for e in graph.entities]
    ['Developer', 'Project']
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from hypergraphql.config import HyperGraphQLConfig
from .backends import StorageBackend
from .filters import RecordFilter, apply as apply_filter
from .projection import project_hypergraph
from .repository import Repository
from .scaling import scale as scale_hypergraph
from .traversal import navigate as navigate_graph, normalize_depth
from .types import (
    Entity,
    HyperGraph,
    HyperGraphMetadata,
    OrganizationContext,
    OrganizationLevel,
    Projection,
    QueryContext,
    RecordKind,
    Relation,
    ScalingConfig,
)

logger = logging.getLogger(__name__)

REPOSITORY_ATTRIBUTE = "repository"


class HyperGraphManager:
    """
    Facade over the repository, traversal, scaling and projection.

    Organization and pagination defaults resolve in this order: explicit
    argument, then the QueryContext passed to the call, then configuration.

    QueryContext.filters is a wire-style filter object (see
    RecordFilter.from_dict). List calls use its organization, type and
    attributes for any field the explicit filter leaves unset; a non-empty
    explicit attribute set replaces the context's rather than merging.
    """

    def __init__(
        self,
        backend: Optional[StorageBackend] = None,
        config: Optional[HyperGraphQLConfig] = None,
        repository: Optional[Repository] = None,
    ):
        """
        Initialize manager.

        Args:
            backend: Storage backend for a new repository (default in-memory)
            config: Configuration (defaults to HyperGraphQLConfig())
            repository: Existing repository to share; takes precedence over backend
        """
        self.config = config or HyperGraphQLConfig()
        self.repository = repository if repository is not None else Repository(backend)
        logger.debug(
            f"HyperGraphManager initialized with backend="
            f"{type(self.repository.backend).__name__}, "
            f"max_query_depth={self.config.max_query_depth}"
        )

    # =========================================================================
    # Entities
    # =========================================================================

    def create_entity(
        self,
        entity_type: str,
        attributes: Optional[Dict[str, Any]] = None,
        organization: Optional[str] = None,
        context: Optional[QueryContext] = None,
    ) -> Entity:
        """Create an entity; organization falls back to the context's."""
        return self.repository.create(
            RecordKind.ENTITY,
            entity_type,
            attributes,
            organization=self._organization(organization, context),
        )

    def get_entity(
        self,
        entity_id: str,
        organization: Optional[str] = None,
        context: Optional[QueryContext] = None,
    ) -> Optional[Entity]:
        """Get an entity, hidden (None) when outside the requested organization."""
        return self.repository.get(
            RecordKind.ENTITY, entity_id, self._organization(organization, context)
        )

    def list_entities(
        self,
        record_filter: Optional[RecordFilter] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        context: Optional[QueryContext] = None,
    ) -> List[Entity]:
        """List entities matching a filter, paginated."""
        return self._list(RecordKind.ENTITY, record_filter, limit, offset, context)

    def update_entity(self, entity_id: str, attributes: Dict[str, Any]) -> Entity:
        """Merge attributes into an entity; raises NotFoundError if absent."""
        return self.repository.update(RecordKind.ENTITY, entity_id, attributes)

    def delete_entity(self, entity_id: str) -> bool:
        """Delete an entity; True if one was removed."""
        return self.repository.delete(RecordKind.ENTITY, entity_id)

    # =========================================================================
    # Relations
    # =========================================================================

    def create_relation(
        self,
        relation_type: str,
        source: str,
        target: str,
        attributes: Optional[Dict[str, Any]] = None,
        organization: Optional[str] = None,
        context: Optional[QueryContext] = None,
    ) -> Relation:
        """
        Create a relation between two entity ids.

        The endpoints are not checked against stored entities; relations
        may arrive before the entities they connect.
        """
        return self.repository.create(
            RecordKind.RELATION,
            relation_type,
            attributes,
            organization=self._organization(organization, context),
            source=source,
            target=target,
        )

    def get_relation(
        self,
        relation_id: str,
        organization: Optional[str] = None,
        context: Optional[QueryContext] = None,
    ) -> Optional[Relation]:
        """Get a relation, hidden (None) when outside the requested organization."""
        return self.repository.get(
            RecordKind.RELATION, relation_id, self._organization(organization, context)
        )

    def list_relations(
        self,
        record_filter: Optional[RecordFilter] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        context: Optional[QueryContext] = None,
    ) -> List[Relation]:
        """List relations matching a filter, paginated."""
        return self._list(RecordKind.RELATION, record_filter, limit, offset, context)

    def update_relation(self, relation_id: str, attributes: Dict[str, Any]) -> Relation:
        """Merge attributes into a relation; raises NotFoundError if absent."""
        return self.repository.update(RecordKind.RELATION, relation_id, attributes)

    def delete_relation(self, relation_id: str) -> bool:
        """Delete a relation; True if one was removed."""
        return self.repository.delete(RecordKind.RELATION, relation_id)

    # =========================================================================
    # Nested fields
    # =========================================================================

    def relations_of(self, entity_id: str) -> List[Relation]:
        """Relations with entity_id as source or target, in insertion order."""
        return [
            relation
            for relation in self.repository.all(RecordKind.RELATION)
            if relation.touches(entity_id)
        ]

    def source_entity(self, relation: Relation) -> Optional[Entity]:
        """Entity at the relation's source, or None if it dangles."""
        return self.repository.get(RecordKind.ENTITY, relation.source)

    def target_entity(self, relation: Relation) -> Optional[Entity]:
        """Entity at the relation's target, or None if it dangles."""
        return self.repository.get(RecordKind.ENTITY, relation.target)

    # =========================================================================
    # Hypergraph queries
    # =========================================================================

    def get_hypergraph(self, organization: Optional[str] = None) -> HyperGraph:
        """
        Snapshot every record belonging to an organization.

        Args:
            organization: Organization to snapshot (defaults to config.default_org)

        Returns:
            HyperGraph with that organization's entities and relations
        """
        organization = organization or self.config.default_org
        scope = RecordFilter(organization=organization)
        entities = apply_filter(self.repository.all(RecordKind.ENTITY), scope)
        relations = apply_filter(self.repository.all(RecordKind.RELATION), scope)
        logger.debug(
            f"Snapshot of {organization}: {len(entities)} entities, "
            f"{len(relations)} relations"
        )
        return HyperGraph(
            entities=entities,
            relations=relations,
            metadata=HyperGraphMetadata(organization=organization),
        )

    def navigate(
        self,
        entity_id: str,
        depth: Optional[int] = None,
        relation_types: Optional[Iterable[str]] = None,
    ) -> HyperGraph:
        """
        Navigate from an entity, with depth capped at config.max_query_depth.

        Args:
            entity_id: Start entity id (need not exist)
            depth: Levels to expand (None = 1)
            relation_types: Relation types to follow (None = all)

        Returns:
            Induced sub-hypergraph
        """
        levels = normalize_depth(depth)
        if levels > self.config.max_query_depth:
            logger.debug(
                f"Navigation depth {levels} capped at {self.config.max_query_depth}"
            )
            levels = self.config.max_query_depth
        return navigate_graph(self.repository, entity_id, levels, relation_types)

    def get_organization(self, org_id: str) -> OrganizationContext:
        """
        Describe an organization as an OrganizationContext.

        Repository names come from the "repository" attribute of the
        organization's records, in first-seen order.
        """
        repos: List[str] = []
        for kind in RecordKind:
            for record in self.repository.all(kind):
                if record.organization != org_id:
                    continue
                repo = record.attributes.get(REPOSITORY_ATTRIBUTE)
                if isinstance(repo, str) and repo:
                    repos.append(repo)
        return OrganizationContext(
            org_id=org_id,
            org_name=org_id,
            repos=repos,
            level=OrganizationLevel.ORG,
        )

    # =========================================================================
    # Scaling and projection
    # =========================================================================

    def scale(
        self,
        hypergraph: HyperGraph,
        config: ScalingConfig,
        org_context: OrganizationContext,
    ) -> HyperGraph:
        """Compress or expand a hypergraph; nothing is written back to the store."""
        return scale_hypergraph(hypergraph, config, org_context)

    def projections(self, org_context: OrganizationContext) -> List[Projection]:
        """Namespace projections of every record in the organization."""
        return project_hypergraph(self.get_hypergraph(org_context.org_name), org_context)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _organization(
        self,
        organization: Optional[str],
        context: Optional[QueryContext],
    ) -> Optional[str]:
        if organization:
            return organization
        if context is not None and context.organization:
            return context.organization
        return None

    def _list(
        self,
        kind: RecordKind,
        record_filter: Optional[RecordFilter],
        limit: Optional[int],
        offset: Optional[int],
        context: Optional[QueryContext],
    ) -> list:
        record_filter = record_filter or RecordFilter()
        if context is not None:
            defaults = RecordFilter.from_dict(context.filters)
            record_filter = RecordFilter(
                organization=(
                    record_filter.organization
                    or context.organization
                    or defaults.organization
                ),
                type=record_filter.type or defaults.type,
                attribute_equals=dict(
                    record_filter.attribute_equals or defaults.attribute_equals
                ),
            )
            if limit is None:
                limit = context.limit
            if offset is None:
                offset = context.offset
        if limit is None:
            limit = self.config.default_limit
        return self.repository.list(kind, record_filter, limit=limit, offset=offset or 0)
