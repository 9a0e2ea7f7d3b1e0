"""
Storage backends for the hypergraph repository.

The repository talks to storage only through the StorageBackend Protocol,
so the traversal, filtering and scaling logic never depends on where the
records live. Two implementations ship with the package:

- InMemoryBackend: insertion-ordered dictionaries, the default.
- JsonFileBackend: one JSON file per record with an integrity checksum,
  for keeping a store between process runs.

Every backend must keep insertion order: values() lists records in the
order they were first put, and re-putting an existing id keeps its place.
Pagination is only deterministic because of this.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from .errors import CorruptionError
from .types import Record, RecordKind, record_from_dict
from hypergraphql.utils.checksums import compute_checksum, verify_checksum

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """
    Protocol defining the storage interface the repository relies on.

    Implementations must publish records atomically: a reader either sees
    the previous record for an id or the new one, never a mix.
    Records handed out by get() and values() belong to the caller:
    mutating them never changes what is stored.
    """

    def get(self, kind: RecordKind, record_id: str) -> Optional[Record]:
        """
        Get a record by id.

        Returns:
            The stored record, or None if absent
        """
        ...

    def put(self, record: Record) -> None:
        """
        Insert or replace a record, keyed by (record.kind, record.id).
        """
        ...

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        """
        Remove a record.

        Returns:
            True if a record was removed, False if none existed
        """
        ...

    def contains(self, kind: RecordKind, record_id: str) -> bool:
        """Check whether a record exists."""
        ...

    def values(self, kind: RecordKind) -> List[Record]:
        """
        List every record of a kind in insertion order.

        Returns:
            A new list; mutating it does not affect the store
        """
        ...

    def count(self, kind: RecordKind) -> int:
        """Number of stored records of a kind."""
        ...


def _detached(record: Record) -> Record:
    """Copy of a record sharing no mutable state with the original."""
    return replace(record, attributes=copy.deepcopy(record.attributes))


class InMemoryBackend:
    """
    In-memory storage keyed by record id.

    Python dicts preserve insertion order and keep a key's position when
    its value is replaced, which gives exactly the ordering contract the
    repository needs.

    Records are copied on the way in and on the way out, so callers never
    hold the stored object and changes only reach the store through put().
    """

    def __init__(self):
        self._tables: Dict[RecordKind, Dict[str, Record]] = {
            kind: {} for kind in RecordKind
        }
        self._lock = threading.Lock()

    def get(self, kind: RecordKind, record_id: str) -> Optional[Record]:
        record = self._tables[kind].get(record_id)
        return _detached(record) if record is not None else None

    def put(self, record: Record) -> None:
        with self._lock:
            self._tables[record.kind][record.id] = _detached(record)

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        with self._lock:
            return self._tables[kind].pop(record_id, None) is not None

    def contains(self, kind: RecordKind, record_id: str) -> bool:
        return record_id in self._tables[kind]

    def values(self, kind: RecordKind) -> List[Record]:
        # Copy under the lock: iterating a dict while another thread inserts raises
        with self._lock:
            stored = list(self._tables[kind].values())
        return [_detached(record) for record in stored]

    def count(self, kind: RecordKind) -> int:
        return len(self._tables[kind])


class JsonFileBackend:
    """
    File-based storage with checksums and stable ordering.

    Each record is stored as a JSON envelope:
    - _checksum: SHA256 of the record payload (first 16 hex chars)
    - _sequence: insertion number, kept when the record is replaced
    - _written_at: write timestamp
    - data: the record in its wire shape

    Storage layout:
        {root}/
            entities/{record_id}.json
            relations/{record_id}.json

    Writes go to a temp file first and are renamed into place, so a
    concurrent reader sees either the old file or the new one.
    """

    def __init__(self, root: Path):
        """
        Initialize store, creating directory structure if needed.

        Args:
            root: Directory holding the entities/ and relations/ folders
        """
        self.root = Path(root)
        for kind in RecordKind:
            (self.root / kind.folder).mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._next_sequence = self._load_next_sequence()
        logger.debug(
            f"JsonFileBackend opened at {self.root} (next sequence {self._next_sequence})"
        )

    def get(self, kind: RecordKind, record_id: str) -> Optional[Record]:
        path = self._record_path(kind, record_id)
        if not path.exists():
            return None
        try:
            envelope = self._read_and_verify(path)
        except FileNotFoundError:
            # Deleted between the exists() check and the read
            return None
        return record_from_dict(kind, envelope["data"])

    def put(self, record: Record) -> None:
        path = self._record_path(record.kind, record.id)
        with self._lock:
            sequence = self._existing_sequence(path)
            if sequence is None:
                sequence = self._next_sequence
                self._next_sequence += 1
            self._write_envelope(path, record.to_dict(), sequence)
        logger.debug(f"Wrote {record.kind.value} {record.id} (sequence {sequence})")

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        path = self._record_path(kind, record_id)
        with self._lock:
            if not path.exists():
                return False
            path.unlink()
        return True

    def contains(self, kind: RecordKind, record_id: str) -> bool:
        return self._record_path(kind, record_id).exists()

    def values(self, kind: RecordKind) -> List[Record]:
        entries: List[Tuple[int, Record]] = []
        for path in (self.root / kind.folder).glob("*.json"):
            try:
                envelope = self._read_and_verify(path)
            except FileNotFoundError:
                continue
            entries.append((envelope["_sequence"], record_from_dict(kind, envelope["data"])))
        entries.sort(key=lambda entry: entry[0])
        return [record for _, record in entries]

    def count(self, kind: RecordKind) -> int:
        return sum(1 for _ in (self.root / kind.folder).glob("*.json"))

    # ========================================================================
    # PRIVATE METHODS
    # ========================================================================

    def _record_path(self, kind: RecordKind, record_id: str) -> Path:
        """Get path for a record's JSON file."""
        return self.root / kind.folder / f"{record_id}.json"

    def _write_envelope(self, path: Path, data: dict, sequence: int) -> None:
        """Write data wrapped with checksum and sequence, via temp + rename."""
        envelope = {
            "_checksum": compute_checksum(data),
            "_sequence": sequence,
            "_written_at": datetime.now(timezone.utc).isoformat(),
            "data": data,
        }
        temp_path = path.with_suffix(".json.tmp")
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(envelope, f, indent=2, sort_keys=True)
            os.replace(temp_path, path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def _read_and_verify(self, path: Path) -> dict:
        """
        Read an envelope and verify its checksum.

        Raises:
            CorruptionError: If the checksum does not match the payload
        """
        with open(path, 'r', encoding='utf-8') as f:
            envelope = json.load(f)

        expected = envelope.get("_checksum")
        data = envelope.get("data", {})
        if not verify_checksum(data, expected):
            raise CorruptionError(
                f"Checksum mismatch for {path.name}",
                expected=expected,
                actual=compute_checksum(data),
                path=str(path)
            )
        return envelope

    def _existing_sequence(self, path: Path) -> Optional[int]:
        """Sequence number of an existing file, or None if it does not exist."""
        if not path.exists():
            return None
        return self._read_and_verify(path)["_sequence"]

    def _load_next_sequence(self) -> int:
        """Scan stored envelopes for the highest sequence number."""
        highest = -1
        for kind in RecordKind:
            for path in (self.root / kind.folder).glob("*.json"):
                highest = max(highest, self._read_and_verify(path)["_sequence"])
        return highest + 1
