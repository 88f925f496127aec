"""
Share Recovery :: Command Line
===============================

Usage::

    share-recovery RECORD.json [--audit-out TRAIL.json]
    python -m share_recovery.cli RECORD.json

Prints the K points used and the recovered secret in decimal.  Any
failure is reported on stderr as ``error: [<stage>] <message>`` and the
process exits with status 1 without printing a secret.
"""

import argparse
import sys
from typing import List, Optional, TextIO

from .audit_log import AuditLog
from .config import load_config
from .errors import RecoveryError
from .record import load_record
from .recovery import RecoveryResult, recover_secret


SEPARATOR = "-" * 20


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="share-recovery",
        description="Recover a Shamir secret from base-encoded shares",
    )
    parser.add_argument("record", help="path to the JSON share record")
    parser.add_argument("--audit-out", default=None,
                        help="write the audit trail to this JSON file")
    return parser


def print_report(result: RecoveryResult, out: TextIO) -> None:
    print(f"Using {result.threshold} points for interpolation:", file=out)
    for point in result.points:
        print(f"  (x={point.x}, y={point.y})", file=out)
    print(f"\n{SEPARATOR}", file=out)
    print("Secret (c) Found:", file=out)
    print(str(result.secret), file=out)
    print(SEPARATOR, file=out)


def run(path: str, audit_log: AuditLog) -> RecoveryResult:
    try:
        record = load_record(path)
    except RecoveryError as e:
        audit_log.append_entry(e.stage, "recovery_failed", path=path,
                               error=type(e).__name__, message=str(e))
        raise
    audit_log.append_entry("parse", "record_loaded", path=path,
                           n=record.keys.n, k=record.keys.k, shares=len(record.shares))
    return recover_secret(record, audit_log)


def main(argv: Optional[List[str]] = None, out: TextIO = None, err: TextIO = None) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    args = build_parser().parse_args(argv)
    config = load_config()
    audit_path = args.audit_out or config.audit_path

    audit_log = AuditLog()
    result = None
    status = 0
    try:
        result = run(args.record, audit_log)
    except RecoveryError as e:
        print(f"error: [{e.stage}] {e}", file=err)
        status = 1

    # the trail is written before any secret reaches stdout
    if audit_path:
        try:
            audit_log.write_json(audit_path)
        except OSError as e:
            print(f"error: [audit] Cannot write audit trail '{audit_path}': {e.strerror or e}", file=err)
            return 1

    if result is not None:
        print_report(result, out)
    return status


if __name__ == "__main__":
    sys.exit(main())
