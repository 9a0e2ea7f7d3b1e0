"""
Scaling of hypergraphs between organizational granularities.

Levels, narrowest first: folder < repo < org < enterprise.

COMPRESS
--------
- folder: records are grouped by type; each group collapses into one
  synthetic record with id "aggregated_<type>". It copies the first
  member's fields and attributes and adds attributes["count"], the number
  of members in the group. Instance identity is lost.
- repo: only records whose organization equals the context's org_name
  are kept. Nothing is aggregated.
- org, enterprise: records pass through unchanged.

The result's metadata version gets a "-compressed" suffix.

EXPAND
------
The core holds no detail beyond what is passed in, so expand passes
records through and suffixes the version with "-expanded". It cannot
bring back what a folder-level compress aggregated away:
expand(compress(g)) is not g.

Input graphs are never modified, and synthetic records are never written
back to a repository.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import Dict, Iterable, List, Sequence, TypeVar

from .types import (
    HyperGraph,
    HyperGraphMetadata,
    OrganizationContext,
    Record,
    ScaleLevel,
    ScalingConfig,
    ScalingMode,
)
from hypergraphql.utils.id_generation import aggregated_id

R = TypeVar("R", bound=Record)

COMPRESSED_SUFFIX = "compressed"
EXPANDED_SUFFIX = "expanded"
AGGREGATED_REPOSITORY = "aggregated"


def aggregate_by_type(records: Iterable[R]) -> List[R]:
    """
    Collapse records into one synthetic record per type.

    Groups appear in the order their first member appears. The first
    member supplies every field except id and attributes["count"].

    Args:
        records: Entities or relations (not both)

    Returns:
        One "aggregated_<type>" record per distinct type
    """
    aggregated: Dict[str, R] = {}
    for record in records:
        existing = aggregated.get(record.type)
        if existing is None:
            attributes = copy.deepcopy(record.attributes)
            attributes["count"] = 1
            aggregated[record.type] = replace(
                record,
                id=aggregated_id(record.type),
                attributes=attributes,
            )
        else:
            existing.attributes["count"] += 1
    return list(aggregated.values())


def filter_by_organization(records: Iterable[R], organization: str) -> List[R]:
    """Records whose organization equals the given name."""
    return [record for record in records if record.organization == organization]


def compress(
    hypergraph: HyperGraph,
    config: ScalingConfig,
    org_context: OrganizationContext,
) -> HyperGraph:
    """
    Compress a hypergraph to the configured level.

    Args:
        hypergraph: Graph to compress (not modified)
        config: Scaling configuration; config.level selects the behaviour
        org_context: Scope used by repo-level filtering

    Returns:
        New HyperGraph with "-compressed" appended to the metadata version
    """
    level = config.level
    if level is ScaleLevel.FOLDER:
        entities = aggregate_by_type(hypergraph.entities)
        relations = aggregate_by_type(hypergraph.relations)
    elif level is ScaleLevel.REPO:
        entities = filter_by_organization(hypergraph.entities, org_context.org_name)
        relations = filter_by_organization(hypergraph.relations, org_context.org_name)
    else:
        entities = list(hypergraph.entities)
        relations = list(hypergraph.relations)

    return HyperGraph(
        entities=entities,
        relations=relations,
        metadata=hypergraph.metadata.with_version_suffix(COMPRESSED_SUFFIX),
    )


def expand(
    hypergraph: HyperGraph,
    config: ScalingConfig,
    org_context: OrganizationContext,
) -> HyperGraph:
    """
    Expand a hypergraph to a wider scope.

    Records pass through at every level; only the metadata version changes.

    Returns:
        New HyperGraph with "-expanded" appended to the metadata version
    """
    return HyperGraph(
        entities=list(hypergraph.entities),
        relations=list(hypergraph.relations),
        metadata=hypergraph.metadata.with_version_suffix(EXPANDED_SUFFIX),
    )


def scale(
    hypergraph: HyperGraph,
    config: ScalingConfig,
    org_context: OrganizationContext,
) -> HyperGraph:
    """Dispatch to compress() or expand() according to config.mode."""
    if config.mode is ScalingMode.COMPRESS:
        return compress(hypergraph, config, org_context)
    return expand(hypergraph, config, org_context)


def aggregate(
    hypergraphs: Sequence[HyperGraph],
    org_context: OrganizationContext,
) -> HyperGraph:
    """
    Merge several hypergraphs (e.g. one per repository) into one org-level graph.

    When an id appears in more than one input, the first occurrence wins.

    Args:
        hypergraphs: Graphs to merge, in priority order
        org_context: Organization the merged graph belongs to

    Returns:
        HyperGraph with repository "aggregated" and organization org_name
    """
    entities: Dict[str, Record] = {}
    relations: Dict[str, Record] = {}
    for graph in hypergraphs:
        for entity in graph.entities:
            entities.setdefault(entity.id, entity)
        for relation in graph.relations:
            relations.setdefault(relation.id, relation)

    return HyperGraph(
        entities=list(entities.values()),
        relations=list(relations.values()),
        metadata=HyperGraphMetadata(
            organization=org_context.org_name,
            repository=AGGREGATED_REPOSITORY,
        ),
    )
