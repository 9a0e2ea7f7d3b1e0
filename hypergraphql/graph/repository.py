"""
Entity/Relation repository: the single source of truth for the core.

The repository owns record lifecycle (create, get, list, update, delete)
on top of an injectable StorageBackend. Filtering, traversal and scaling
all read through it; nothing caches between them and the backend, so
every mutation is visible to the next read.

CONCURRENCY
-----------
Mutations are serialized by one re-entrant lock, which makes the
read-modify-write in update() atomic per record. Reads skip the lock
entirely: backends publish whole records, so a reader observes either the
record before a write or after it, never a half-merged one. A list()
running alongside writes is not a point-in-time snapshot.

ORGANIZATION SCOPING
--------------------
Scoping is a filter, not access control. get() with an organization that
does not match returns None, exactly as if the record did not exist.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from .backends import InMemoryBackend, StorageBackend
from .errors import NotFoundError, ValidationError
from .filters import RecordFilter, filter_records
from .types import Entity, Record, RecordKind, Relation, utc_now
from hypergraphql.utils.id_generation import generate_entity_id, generate_relation_id

DEFAULT_LIMIT = 100

ID_GENERATORS = {
    RecordKind.ENTITY: generate_entity_id,
    RecordKind.RELATION: generate_relation_id,
}


class Repository:
    """
    Organization-scoped CRUD over entities and relations.

    Example:
        >>> repo = Repository()
        >>> dev = repo.create(RecordKind.ENTITY, "Developer", {"name": "Alice"}, "acme")
        >>> repo.get(RecordKind.ENTITY, dev.id, organization="acme") is not None
        True
        >>> repo.get(RecordKind.ENTITY, dev.id, organization="other") is None
        True
    """

    def __init__(self, backend: Optional[StorageBackend] = None):
        """
        Initialize repository.

        Args:
            backend: Storage backend (defaults to a fresh InMemoryBackend)
        """
        self._backend = backend if backend is not None else InMemoryBackend()
        self._write_lock = threading.RLock()

    @property
    def backend(self) -> StorageBackend:
        """The storage backend records are kept in."""
        return self._backend

    def create(
        self,
        kind: RecordKind,
        record_type: str,
        attributes: Optional[Dict[str, Any]] = None,
        organization: Optional[str] = None,
        source: Optional[str] = None,
        target: Optional[str] = None,
    ) -> Record:
        """
        Create and store a new record with a freshly generated id.

        Creating twice with identical arguments yields two records with
        different ids; there is no natural-key deduplication.

        Args:
            kind: ENTITY or RELATION
            record_type: The record's type label
            attributes: Initial attributes (copied)
            organization: Optional owning organization
            source: Relation source id (relations only, may dangle)
            target: Relation target id (relations only, may dangle)

        Returns:
            The stored record

        Raises:
            ValidationError: If source/target are given for an entity
        """
        kind = RecordKind(kind)
        now = utc_now()
        fields = {
            "type": record_type,
            "attributes": dict(attributes or {}),
            "organization": organization,
            "created_at": now,
            "updated_at": now,
        }

        with self._write_lock:
            record_id = self._allocate_id(kind)
            if kind is RecordKind.RELATION:
                record: Record = Relation(
                    id=record_id,
                    source=source or "",
                    target=target or "",
                    **fields,
                )
            else:
                if source is not None or target is not None:
                    raise ValidationError(
                        "Entities do not have source/target endpoints",
                        record_type=record_type,
                    )
                record = Entity(id=record_id, **fields)
            self._backend.put(record)

        return record

    def get(
        self,
        kind: RecordKind,
        record_id: str,
        organization: Optional[str] = None,
    ) -> Optional[Record]:
        """
        Get a record by id, optionally scoped to an organization.

        Args:
            kind: ENTITY or RELATION
            record_id: Record identifier
            organization: If given, the record's organization must equal it

        Returns:
            The record, or None if absent or outside the organization
        """
        record = self._backend.get(RecordKind(kind), record_id)
        if record is None:
            return None
        if organization and record.organization != organization:
            return None
        return record

    def list(
        self,
        kind: RecordKind,
        record_filter: Optional[RecordFilter] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> List[Record]:
        """
        List records matching a filter, in insertion order, paginated.

        Args:
            kind: ENTITY or RELATION
            record_filter: Conjunctive filter (None matches everything)
            limit: Maximum records to return (<= 0 returns nothing)
            offset: Records to skip before the page starts

        Returns:
            Matching records; empty rather than an error when nothing matches
        """
        return filter_records(
            self._backend.values(RecordKind(kind)),
            record_filter,
            limit=limit,
            offset=offset,
        )

    def all(self, kind: RecordKind) -> List[Record]:
        """Every record of a kind, in insertion order."""
        return self._backend.values(RecordKind(kind))

    def update(
        self,
        kind: RecordKind,
        record_id: str,
        attribute_patch: Dict[str, Any],
    ) -> Record:
        """
        Merge an attribute patch into an existing record.

        Keys not named in the patch are kept. updated_at is refreshed and
        created_at is left alone.

        Args:
            kind: ENTITY or RELATION
            record_id: Record identifier
            attribute_patch: Attribute keys to overwrite

        Returns:
            The updated record

        Raises:
            NotFoundError: If no record has this id
        """
        kind = RecordKind(kind)
        with self._write_lock:
            current = self._backend.get(kind, record_id)
            if current is None:
                raise NotFoundError(
                    f"{kind.value.capitalize()} with id {record_id} not found",
                    kind=kind.value,
                    record_id=record_id,
                )
            updated = current.merged(attribute_patch)
            self._backend.put(updated)
        return updated

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        """
        Delete a record.

        Returns:
            True if a record was removed, False if none existed
        """
        with self._write_lock:
            return self._backend.delete(RecordKind(kind), record_id)

    def count(self, kind: RecordKind) -> int:
        """Number of stored records of a kind."""
        return self._backend.count(RecordKind(kind))

    def _allocate_id(self, kind: RecordKind) -> str:
        """Generate an id not yet used by this kind. Caller holds the write lock."""
        while True:
            record_id = ID_GENERATORS[kind]()
            if not self._backend.contains(kind, record_id):
                return record_id
