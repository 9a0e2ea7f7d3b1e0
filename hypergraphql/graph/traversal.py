"""
Bounded breadth-first navigation over the relation graph.

Navigation starts from an entity id and expands level by level through
relations touching the frontier, in either direction, and returns the
induced sub-hypergraph: every visited entity plus every relation crossed
on the way.

IDENTIFIERS, NOT RECORDS
------------------------
Traversal runs purely on identifiers. A relation endpoint that names no
stored entity is still visited and expanded from, and a start id with no
stored entity still traverses from the relations that reference it. Only
when the result is assembled are ids looked up, and missing entities are
simply left out.

TERMINATION
-----------
A visited set keyed by entity id means each id joins the frontier at most
once, so cycles cannot loop; the depth bound caps the number of levels.

USAGE EXAMPLES
--------------

Direct call:
    >>> graph = navigate(repo, dev_id, depth=2, relation_types=["WorksOn"])

Fluent form:
    >>> graph = (GraphNavigator(repo)
    ...     .starting_from(dev_id)
    ...     .max_depth(2)
    ...     .follow("WorksOn", "Reviews")
    ...     .run())

Inspect a traversal without running it:
    >>> print(GraphNavigator(repo).starting_from(dev_id).explain())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generator, Iterable, List, Optional, Set, Tuple

from .repository import Repository
from .types import (
    Entity,
    HyperGraph,
    HyperGraphMetadata,
    RecordKind,
    Relation,
)

DEFAULT_DEPTH = 1


@dataclass
class TraversalResult:
    """
    Identifiers reached by an expansion.

    Attributes:
        visited: Entity ids in visit order (start first)
        depths: Hop count at which each visited id was first reached
        relations: Relations crossed, each once, in encounter order
    """

    visited: List[str] = field(default_factory=list)
    depths: Dict[str, int] = field(default_factory=dict)
    relations: List[Relation] = field(default_factory=list)


@dataclass
class NavigationPlan:
    """
    Description of a configured navigation, produced without running it.

    Attributes:
        start_id: Entity id traversal starts from
        depth: Number of levels that will be expanded
        relation_types: Relation types followed (None = all)
        relation_count: Relations currently in the store
        entity_count: Entities currently in the store
    """

    start_id: Optional[str] = None
    depth: int = DEFAULT_DEPTH
    relation_types: Optional[List[str]] = None
    relation_count: int = 0
    entity_count: int = 0

    def __str__(self) -> str:
        """Human-readable visualization of the plan."""
        lines = ["Navigation Plan", "=" * 40]
        lines.append(f"Start: {self.start_id or 'Not configured'}")
        lines.append(f"Depth: {self.depth}")
        if self.relation_types is None:
            lines.append("Relation types: All")
        else:
            lines.append(f"Relation types: {', '.join(self.relation_types) or 'None'}")
        lines.append("")
        lines.append(f"Store: {self.entity_count} entities, {self.relation_count} relations")
        return "\n".join(lines)


def normalize_depth(depth: Optional[int]) -> int:
    """Depth to expand: None means 1, negatives mean 0."""
    if depth is None:
        return DEFAULT_DEPTH
    return max(depth, 0)


def build_adjacency(
    relations: Iterable[Relation],
    relation_types: Optional[Set[str]] = None,
) -> Dict[str, List[Relation]]:
    """
    Index eligible relations by each of their endpoints.

    A self-loop is indexed once. Relation order within each list follows
    the input order.

    Args:
        relations: Relations to index
        relation_types: Allowed types (None = all types eligible)

    Returns:
        Mapping from entity id to the relations touching it
    """
    adjacency: Dict[str, List[Relation]] = {}
    for relation in relations:
        if relation_types is not None and relation.type not in relation_types:
            continue
        adjacency.setdefault(relation.source, []).append(relation)
        if relation.target != relation.source:
            adjacency.setdefault(relation.target, []).append(relation)
    return adjacency


def expand(
    relations: Iterable[Relation],
    start_id: str,
    depth: Optional[int] = None,
    relation_types: Optional[Iterable[str]] = None,
) -> TraversalResult:
    """
    Breadth-first expansion from start_id over identifiers only.

    Args:
        relations: Every relation in the graph
        start_id: Entity id to start from (need not exist)
        depth: Levels to expand (None = 1, <= 0 = start only)
        relation_types: Eligible relation types (None = all; empty = none)

    Returns:
        TraversalResult with visited ids and crossed relations
    """
    allowed = set(relation_types) if relation_types is not None else None
    adjacency = build_adjacency(relations, allowed)
    levels = normalize_depth(depth)

    result = TraversalResult(visited=[start_id], depths={start_id: 0})
    crossed: Set[str] = set()
    frontier = [start_id]
    level = 0

    while frontier and level < levels:
        next_frontier: List[str] = []
        for node_id in frontier:
            for relation in adjacency.get(node_id, []):
                if relation.id not in crossed:
                    crossed.add(relation.id)
                    result.relations.append(relation)
                neighbor_id = relation.other_endpoint(node_id)
                if neighbor_id not in result.depths:
                    result.depths[neighbor_id] = level + 1
                    result.visited.append(neighbor_id)
                    next_frontier.append(neighbor_id)
        frontier = next_frontier
        level += 1

    return result


def navigate(
    repository: Repository,
    start_id: str,
    depth: Optional[int] = None,
    relation_types: Optional[Iterable[str]] = None,
    metadata: Optional[HyperGraphMetadata] = None,
) -> HyperGraph:
    """
    Navigate the stored graph from an entity and return the sub-hypergraph.

    Args:
        repository: Store to read relations and entities from
        start_id: Entity id to start from
        depth: Levels to expand (None = 1, 0 = start entity only)
        relation_types: Eligible relation types (None = all)
        metadata: Metadata for the result (defaults to the start entity's
            organization, or "default")

    Returns:
        HyperGraph of visited entities present in the store and crossed relations
    """
    relations = repository.all(RecordKind.RELATION)
    result = expand(relations, start_id, depth, relation_types)

    entities: List[Entity] = []
    for entity_id in result.visited:
        entity = repository.get(RecordKind.ENTITY, entity_id)
        if entity is not None:
            entities.append(entity)

    if metadata is None:
        start = entities[0] if entities and entities[0].id == start_id else None
        metadata = HyperGraphMetadata(
            organization=(start.organization if start else None) or "default"
        )

    return HyperGraph(entities=entities, relations=result.relations, metadata=metadata)


class GraphNavigator:
    """
    Fluent builder over navigate().

    Configuration methods return self for chaining; run() performs the
    traversal against the repository's current contents.
    """

    def __init__(self, repository: Repository):
        """Initialize navigator with the repository to traverse."""
        self._repository = repository
        self._start_id: Optional[str] = None
        self._depth: Optional[int] = None
        self._relation_types: Optional[List[str]] = None
        self._metadata: Optional[HyperGraphMetadata] = None

    def starting_from(self, entity_id: str) -> "GraphNavigator":
        """
        Set the entity id traversal starts from.

        Returns:
            Self for chaining
        """
        self._start_id = entity_id
        return self

    def max_depth(self, depth: int) -> "GraphNavigator":
        """
        Limit traversal depth.

        Args:
            depth: Maximum hops from the start (0 = start entity only)

        Returns:
            Self for chaining
        """
        self._depth = depth
        return self

    def follow(self, *relation_types: str) -> "GraphNavigator":
        """
        Only cross relations of the given types.

        Returns:
            Self for chaining
        """
        self._relation_types = list(relation_types)
        return self

    def with_metadata(self, metadata: HyperGraphMetadata) -> "GraphNavigator":
        """
        Use explicit metadata for the resulting hypergraph.

        Returns:
            Self for chaining
        """
        self._metadata = metadata
        return self

    def explain(self) -> NavigationPlan:
        """Describe the configured traversal without executing it."""
        return NavigationPlan(
            start_id=self._start_id,
            depth=normalize_depth(self._depth),
            relation_types=self._relation_types,
            relation_count=self._repository.count(RecordKind.RELATION),
            entity_count=self._repository.count(RecordKind.ENTITY),
        )

    def run(self) -> HyperGraph:
        """
        Execute the traversal.

        Returns:
            Induced sub-hypergraph; empty if no start id is configured
        """
        if self._start_id is None:
            return HyperGraph(metadata=self._metadata or HyperGraphMetadata())
        return navigate(
            self._repository,
            self._start_id,
            depth=self._depth,
            relation_types=self._relation_types,
            metadata=self._metadata,
        )

    def iter(self) -> Generator[Tuple[str, int], None, None]:
        """
        Iterate over visited entity ids with their hop distance.

        Yields:
            (entity_id, depth) pairs in BFS order, dangling ids included
        """
        if self._start_id is None:
            return
        result = expand(
            self._repository.all(RecordKind.RELATION),
            self._start_id,
            self._depth,
            self._relation_types,
        )
        for entity_id in result.visited:
            yield entity_id, result.depths[entity_id]
