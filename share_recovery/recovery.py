"""
Share Recovery :: Selection and Reconstruction
===============================================

  decode_points   every share of the record -> Point, in declared order
  select_points   the first K points, in declared order (never sorted)
  recover_secret  decode -> select -> interpolate, with an optional
                  audit trail entry per stage

Selection order is part of the contract: the same record always
yields the same K points, namely the first K the document declares,
whatever their x or y values are.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .audit_log import AuditLog, fingerprint
from .base_decoder import decode
from .errors import InsufficientShares, RecoveryError
from .interpolator import Point, interpolate
from .record import ShareRecord


@dataclass(frozen=True)
class RecoveryResult:
    """The points used and the secret they determine."""
    threshold: int
    points: Tuple[Point, ...]
    secret: int


def decode_points(record: ShareRecord) -> List[Point]:
    """Decode every share value; errors name the offending share."""
    points = []
    for x, identifier, share in record.entries():
        points.append(Point(x, decode(share.value, share.base, identifier)))
    return points


def select_points(points: Sequence[Point], k: int) -> List[Point]:
    """The first *k* points in the order given."""
    if len(points) < k:
        raise InsufficientShares(len(points), k)
    return list(points[:k])


def recover_secret(record: ShareRecord, audit_log: Optional[AuditLog] = None) -> RecoveryResult:
    """
    Reconstruct f(0) from the first K shares of *record*.

    Raises InvalidBase / InvalidDigit (decode), InsufficientShares
    (select), DuplicateAbscissa / InexactDivision (interpolate).
    """
    def audit(stage: str, event: str, **data) -> None:
        if audit_log is not None:
            audit_log.append_entry(stage, event, **data)

    try:
        points = decode_points(record)
        identifiers = list(record.shares)
        audit("decode", "points_decoded", count=len(points), identifiers=identifiers)

        selected = select_points(points, record.threshold)
        audit("select", "points_selected", threshold=record.threshold,
              identifiers=identifiers[:len(selected)])

        secret = interpolate(selected)
    except RecoveryError as e:
        audit(e.stage, "recovery_failed", error=type(e).__name__, message=str(e))
        raise

    audit("interpolate", "secret_recovered", fingerprint=fingerprint(secret))
    return RecoveryResult(threshold=record.threshold, points=tuple(selected), secret=secret)
