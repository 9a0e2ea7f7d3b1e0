"""
Projection of records onto namespace paths, and parsing them back.

Layout (one JSON document per record):
    {org_name}/{record.organization or "default"}/entities/{type}/{id}.json
    {org_name}/{record.organization or "default"}/relations/{type}/{id}.json

The document is the record's wire shape with ISO-8601 timestamps,
indented by two spaces.

Parsing is forgiving about structure and strict about syntax: a path
without the expected segment, or JSON that does not describe a record,
gives None; text that is not JSON at all raises MalformedContentError.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from .errors import MalformedContentError, ValidationError
from .types import (
    Entity,
    HyperGraph,
    OrganizationContext,
    Projection,
    Record,
    RecordKind,
    Relation,
    record_from_dict,
)

logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "default"


def project_to_path(record: Record, org_context: OrganizationContext) -> Projection:
    """
    Map an entity or relation to its namespace path.

    Args:
        record: Entity or Relation
        org_context: Organization whose name is the first path segment

    Returns:
        Projection carrying the path, kind and record
    """
    scope = record.organization or DEFAULT_SCOPE
    path = f"{org_context.org_name}/{scope}/{record.folder}/{record.type}/{record.id}.json"
    return Projection(
        path=path,
        type=record.kind,
        content=record,
        organization=org_context.org_name,
    )


def project_entity_to_path(entity: Entity, org_context: OrganizationContext) -> Projection:
    """Project an entity; raises ValidationError for any other kind."""
    _require_kind(entity, RecordKind.ENTITY)
    return project_to_path(entity, org_context)


def project_relation_to_path(relation: Relation, org_context: OrganizationContext) -> Projection:
    """Project a relation; raises ValidationError for any other kind."""
    _require_kind(relation, RecordKind.RELATION)
    return project_to_path(relation, org_context)


def project_hypergraph(hypergraph: HyperGraph, org_context: OrganizationContext) -> List[Projection]:
    """Projections for every entity, then every relation, of a hypergraph."""
    projections = [project_to_path(entity, org_context) for entity in hypergraph.entities]
    projections.extend(project_to_path(relation, org_context) for relation in hypergraph.relations)
    return projections


def generate_org_structure(org_context: OrganizationContext) -> List[str]:
    """
    Folder skeleton for an organization.

    Returns:
        Org-level entities/relations folders, then the same pair per repo
    """
    org = org_context.org_name
    folders = [f"{org}/entities", f"{org}/relations"]
    for repo in org_context.repos:
        folders.append(f"{org}/{repo}/entities")
        folders.append(f"{org}/{repo}/relations")
    return folders


def get_projection_content(projection: Projection) -> str:
    """Serialized document for a projection (JSON, 2-space indent)."""
    return json.dumps(projection.content.to_dict(), indent=2)


def parse_from_path(path: str, content: str) -> Optional[Record]:
    """
    Parse a projected document, inferring the kind from its path.

    Args:
        path: Namespace path of the document
        content: Document text

    Returns:
        Entity or Relation, or None if the path names neither folder or the
        JSON does not describe a record

    Raises:
        MalformedContentError: If content is not valid JSON
    """
    segments = path.split("/")
    if RecordKind.ENTITY.folder in segments:
        return _parse(path, content, RecordKind.ENTITY)
    if RecordKind.RELATION.folder in segments:
        return _parse(path, content, RecordKind.RELATION)
    logger.debug(f"Path {path} names neither entities nor relations")
    return None


def parse_entity_from_path(path: str, content: str) -> Optional[Entity]:
    """Parse an entity document; None unless the path has an 'entities' segment."""
    if RecordKind.ENTITY.folder not in path.split("/"):
        return None
    return _parse(path, content, RecordKind.ENTITY)


def parse_relation_from_path(path: str, content: str) -> Optional[Relation]:
    """Parse a relation document; None unless the path has a 'relations' segment."""
    if RecordKind.RELATION.folder not in path.split("/"):
        return None
    return _parse(path, content, RecordKind.RELATION)


def _parse(path: str, content: str, kind: RecordKind) -> Optional[Record]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedContentError(
            f"Failed to parse {kind.value} from path {path}: {e.msg}",
            path=path,
            line=e.lineno,
            column=e.colno,
        ) from e

    if not isinstance(data, dict):
        logger.debug(f"Content at {path} is not a JSON object")
        return None
    try:
        return record_from_dict(kind, data)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"Content at {path} is not a {kind.value}: {e!r}")
        return None


def _require_kind(record: Record, kind: RecordKind) -> None:
    if record.kind is not kind:
        raise ValidationError(
            f"Expected {kind.value}, got {record.kind.value}",
            record_id=record.id,
        )
