"""
Share Recovery :: Append-Only Audit Trail
==========================================

Each recovery run records its stages in an append-only ledger: record
loaded, points decoded, points selected, secret recovered (or the
failure that stopped the run).

- Every entry is hash-chained to its predecessor with SHA-256, so any
  edit to a past entry breaks ``verify_integrity()``.
- Share values and the recovered secret are never written in clear.
  The secret is recorded as a SHA-256 fingerprint only.
"""

import hashlib
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


GENESIS_HASH = hashlib.sha256(b"SHARE-RECOVERY-GENESIS").hexdigest()


def fingerprint(value: int) -> str:
    """SHA-256 of an integer's decimal form, for logging without revealing it."""
    return hashlib.sha256(str(value).encode()).hexdigest()


@dataclass
class AuditEntry:
    """One stage of a recovery run, chained to the previous entry."""
    index: int
    timestamp: float
    stage: str
    event: str
    data: Dict[str, Any]
    prev_hash: str
    entry_hash: str = ""

    def compute_hash(self) -> str:
        content = json.dumps({
            "index": self.index,
            "timestamp": self.timestamp,
            "stage": self.stage,
            "event": self.event,
            "data": self.data,
            "prev_hash": self.prev_hash,
        }, sort_keys=True, default=str)
        return hashlib.sha256(content.encode()).hexdigest()


class AuditLog:
    """Hash-chained, append-only list of recovery events."""

    def __init__(self):
        self._entries: List[AuditEntry] = []

    def append_entry(self, stage: str, event: str, **data: Any) -> AuditEntry:
        """Append an event; the timestamp is taken at write time."""
        prev_hash = self._entries[-1].entry_hash if self._entries else GENESIS_HASH
        entry = AuditEntry(
            index=len(self._entries),
            timestamp=time.time(),
            stage=stage,
            event=event,
            data=data,
            prev_hash=prev_hash,
        )
        entry.entry_hash = entry.compute_hash()
        self._entries.append(entry)
        return entry

    def verify_integrity(self) -> bool:
        """Recompute every hash and check the chain linkage."""
        prev_hash = GENESIS_HASH
        for entry in self._entries:
            if entry.prev_hash != prev_hash:
                return False
            if entry.entry_hash != entry.compute_hash():
                return False
            prev_hash = entry.entry_hash
        return True

    def get_entries(
        self,
        stage: Optional[str] = None,
        event: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[AuditEntry]:
        results = self._entries
        if stage:
            results = [e for e in results if e.stage == stage]
        if event:
            results = [e for e in results if e.event == event]
        if limit:
            results = results[-limit:]
        return list(results)

    def __len__(self):
        return len(self._entries)

    def dump(self) -> List[Dict[str, Any]]:
        """Export the trail as plain dictionaries."""
        return [
            {
                "index": e.index,
                "timestamp": e.timestamp,
                "stage": e.stage,
                "event": e.event,
                "data": e.data,
                "prev_hash": e.prev_hash,
                "entry_hash": e.entry_hash,
            }
            for e in self._entries
        ]

    def write_json(self, path: str) -> None:
        """Write the dump plus its integrity flag to *path*."""
        with open(path, "w", encoding="utf-8") as fh:
            json.dump({
                "integrity": self.verify_integrity(),
                "entries": self.dump(),
            }, fh, indent=2, default=str)
