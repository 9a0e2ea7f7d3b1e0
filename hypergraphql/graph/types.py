"""
Record and hypergraph types for the HyperGraphQL core.

Provides the Record base class with its two concrete kinds (Entity and
Relation), the HyperGraph snapshot bundle with provenance metadata, and the
value types that drive scaling and projection (OrganizationContext,
ScalingConfig, Projection, QueryContext).

Serialized records use the wire shape shared with external storage:
camelCase timestamp keys and ISO-8601 UTC timestamps with millisecond
precision, e.g. "2025-01-01T12:00:00.000Z".
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type

from .errors import ValidationError


# =============================================================================
# TIMESTAMPS
# =============================================================================

def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Naive datetimes are taken to be UTC.

    Example:
        >>> format_timestamp(datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc))
        '2025-01-02T03:04:05.678Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    Accepts datetimes unchanged (naive ones are taken to be UTC) and strings
    with either a trailing "Z" or an explicit offset.

    Raises:
        ValueError: If the string is not ISO-8601
        TypeError: If value is neither a string nor a datetime
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise TypeError(f"timestamp must be str or datetime, got {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# ENUMERATIONS
# =============================================================================

class RecordKind(str, Enum):
    """The two kinds of record the store holds."""

    ENTITY = "entity"
    RELATION = "relation"

    @property
    def folder(self) -> str:
        """Namespace segment used for this kind in projected paths."""
        return "entities" if self is RecordKind.ENTITY else "relations"


class OrganizationLevel(str, Enum):
    """Scope an OrganizationContext describes."""

    REPO = "repo"
    ORG = "org"
    ENTERPRISE = "enterprise"


class ScalingMode(str, Enum):
    """Direction of a scaling transform."""

    COMPRESS = "compress"
    EXPAND = "expand"


class ScaleLevel(str, Enum):
    """Organizational granularity, narrowest first."""

    FOLDER = "folder"
    REPO = "repo"
    ORG = "org"
    ENTERPRISE = "enterprise"


def _coerce_enum(enum_cls: Type[Enum], value: Any, field_name: str) -> Any:
    """Convert a raw value into enum_cls, raising ValidationError if unknown."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(
            f"Invalid {field_name}: {value!r}",
            field=field_name,
            valid_values=[member.value for member in enum_cls],
        ) from None


# =============================================================================
# RECORDS
# =============================================================================

@dataclass
class Record:
    """
    Base class for entities and relations.

    Records are replaced, never mutated in place, once they are stored:
    updates build a new record via merged() and hand it to the backend
    in one write, so readers only ever see whole records.
    """

    kind: ClassVar[RecordKind]

    id: str
    type: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    organization: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        """Normalize timestamps given as strings."""
        self.created_at = parse_timestamp(self.created_at)
        self.updated_at = parse_timestamp(self.updated_at)

    @property
    def folder(self) -> str:
        """Namespace segment for this record's kind."""
        return self.kind.folder

    def merged(self, patch: Dict[str, Any], now: Optional[datetime] = None) -> "Record":
        """
        Return a copy with patch shallow-merged into attributes.

        Keys absent from the patch are kept. updated_at is refreshed but
        never set earlier than created_at.

        Args:
            patch: Attribute keys to overwrite
            now: Timestamp to use (defaults to the current time)

        Returns:
            New record of the same kind
        """
        now = now or utc_now()
        attributes = dict(self.attributes)
        attributes.update(patch)
        return replace(
            self,
            attributes=attributes,
            updated_at=max(now, self.created_at),
        )

    def _base_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
        }

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the wire shape.

        Returns:
            Dictionary with camelCase timestamp keys and ISO-8601 strings;
            organization is omitted when unset
        """
        result = self._base_dict()
        result["attributes"] = copy.deepcopy(self.attributes)
        if self.organization is not None:
            result["organization"] = self.organization
        result["createdAt"] = format_timestamp(self.created_at)
        result["updatedAt"] = format_timestamp(self.updated_at)
        return result

    @classmethod
    def _common_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        for key in ("id", "type"):
            if not isinstance(data[key], str):
                raise TypeError(f"{key} must be a string")
        attributes = data.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise TypeError("attributes must be an object")
        return {
            "id": data["id"],
            "type": data["type"],
            "attributes": dict(attributes),
            "organization": data.get("organization"),
            "created_at": parse_timestamp(data["createdAt"]),
            "updated_at": parse_timestamp(data["updatedAt"]),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Record":
        """
        Deserialize from the wire shape.

        Raises:
            KeyError: If a required field is missing
            TypeError, ValueError: If a field has the wrong shape
        """
        return cls(**cls._common_fields(data))


@dataclass
class Entity(Record):
    """Typed node in the hypergraph with open attributes."""

    kind: ClassVar[RecordKind] = RecordKind.ENTITY


@dataclass
class Relation(Record):
    """
    Typed, directed edge between two entity identifiers.

    Endpoints are plain identifiers: nothing requires them to name
    entities present in the store.
    """

    kind: ClassVar[RecordKind] = RecordKind.RELATION

    source: str = ""
    target: str = ""

    def other_endpoint(self, entity_id: str) -> str:
        """Endpoint opposite entity_id (entity_id itself for a self-loop)."""
        return self.target if self.source == entity_id else self.source

    def touches(self, entity_id: str) -> bool:
        """True if entity_id is the source or the target."""
        return self.source == entity_id or self.target == entity_id

    def _base_dict(self) -> Dict[str, Any]:
        result = super()._base_dict()
        result["source"] = self.source
        result["target"] = self.target
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relation":
        """Deserialize relation from the wire shape."""
        for key in ("source", "target"):
            if not isinstance(data[key], str):
                raise TypeError(f"{key} must be a string")
        return cls(
            source=data["source"],
            target=data["target"],
            **cls._common_fields(data),
        )


RECORD_CLASSES: Dict[RecordKind, Type[Record]] = {
    RecordKind.ENTITY: Entity,
    RecordKind.RELATION: Relation,
}


def record_from_dict(kind: RecordKind, data: Dict[str, Any]) -> Record:
    """
    Factory creating the right record class for kind.

    Args:
        kind: Record kind to build
        data: Serialized record

    Returns:
        Entity or Relation instance
    """
    return RECORD_CLASSES[RecordKind(kind)].from_dict(data)


# =============================================================================
# HYPERGRAPH
# =============================================================================

@dataclass
class HyperGraphMetadata:
    """
    Provenance of a hypergraph snapshot.

    Describes where a snapshot came from, not what it contains; two graphs
    with equal records but different metadata hold the same data.
    """

    organization: str = "default"
    repository: str = "default"
    branch: str = "main"
    version: str = "1.0.0"
    last_sync: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.last_sync = parse_timestamp(self.last_sync)

    def with_version_suffix(self, suffix: str) -> "HyperGraphMetadata":
        """Copy with version relabelled as '<version>-<suffix>'."""
        return replace(self, version=f"{self.version}-{suffix}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "organization": self.organization,
            "repository": self.repository,
            "branch": self.branch,
            "version": self.version,
            "lastSync": format_timestamp(self.last_sync),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HyperGraphMetadata":
        return cls(
            organization=data.get("organization", "default"),
            repository=data.get("repository", "default"),
            branch=data.get("branch", "main"),
            version=data.get("version", "1.0.0"),
            last_sync=data.get("lastSync") or utc_now(),
        )


def _check_unique(records: List[Record], label: str) -> None:
    seen = set()
    for record in records:
        if record.id in seen:
            raise ValidationError(
                f"Duplicate {label} id '{record.id}' in hypergraph",
                record_id=record.id,
            )
        seen.add(record.id)


@dataclass
class HyperGraph:
    """
    Snapshot bundle of entities, relations and provenance metadata.

    Neither sequence may contain the same identifier twice.
    """

    entities: List[Entity] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    metadata: HyperGraphMetadata = field(default_factory=HyperGraphMetadata)

    def __post_init__(self):
        self.entities = list(self.entities)
        self.relations = list(self.relations)
        _check_unique(self.entities, "entity")
        _check_unique(self.relations, "relation")

    def entity_ids(self) -> List[str]:
        """Entity identifiers in sequence order."""
        return [entity.id for entity in self.entities]

    def relation_ids(self) -> List[str]:
        """Relation identifiers in sequence order."""
        return [relation.id for relation in self.relations]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": [entity.to_dict() for entity in self.entities],
            "relations": [relation.to_dict() for relation in self.relations],
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HyperGraph":
        return cls(
            entities=[Entity.from_dict(item) for item in data.get("entities", [])],
            relations=[Relation.from_dict(item) for item in data.get("relations", [])],
            metadata=HyperGraphMetadata.from_dict(data.get("metadata", {})),
        )


# =============================================================================
# SCOPING AND PROJECTION VALUES
# =============================================================================

@dataclass
class OrganizationContext:
    """
    Namespace scope under which scaling and projection operate.

    Attributes:
        org_id: Stable organization identifier
        org_name: Name used as the first path segment and for repo-level filtering
        repos: Repository names in the organization (duplicates dropped, order kept)
        level: Scope this context describes
    """

    org_id: str
    org_name: str
    repos: List[str] = field(default_factory=list)
    level: OrganizationLevel = OrganizationLevel.ORG

    def __post_init__(self):
        self.level = _coerce_enum(OrganizationLevel, self.level, "level")
        self.repos = list(dict.fromkeys(self.repos))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orgId": self.org_id,
            "orgName": self.org_name,
            "repos": list(self.repos),
            "level": self.level.value,
        }


@dataclass
class ScalingConfig:
    """
    Parameters of a scaling transform.

    Attributes:
        mode: compress or expand
        level: granularity to scale to
        target_path: Namespace path the caller intends to write the result
            under; carried for the caller, not interpreted by the transforms
    """

    mode: ScalingMode
    level: ScaleLevel
    target_path: Optional[str] = None

    def __post_init__(self):
        self.mode = _coerce_enum(ScalingMode, self.mode, "mode")
        self.level = _coerce_enum(ScaleLevel, self.level, "level")

    def to_dict(self) -> Dict[str, Any]:
        result = {"mode": self.mode.value, "level": self.level.value}
        if self.target_path is not None:
            result["targetPath"] = self.target_path
        return result


@dataclass
class Projection:
    """A record mapped onto its namespace path."""

    path: str
    type: RecordKind
    content: Record
    organization: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "type": self.type.value,
            "content": self.content.to_dict(),
            "organization": self.organization,
        }


@dataclass
class QueryContext:
    """
    Caller-supplied defaults for manager operations.

    Explicit arguments always win; the context fills in what the caller
    left out before configuration defaults apply.
    filters uses the wire filter keys accepted by RecordFilter.from_dict.
    """

    organization: Optional[str] = None
    repository: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    limit: Optional[int] = None
    offset: Optional[int] = None
