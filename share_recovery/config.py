"""
Share Recovery :: Configuration
================================

Settings come from the environment:

  SHARE_RECOVERY_AUDIT_PATH    default file for the CLI audit dump (unset = none)
  SHARE_RECOVERY_SERVICE_NAME  name reported by the HTTP health probe
  PORT                         HTTP port for ``python -m share_recovery.service``
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class RecoveryConfig:
    audit_path: Optional[str] = None
    service_name: str = "share-recovery"
    port: int = 8080


def load_config(environ: Optional[Mapping[str, str]] = None) -> RecoveryConfig:
    """Build a RecoveryConfig from *environ* (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    return RecoveryConfig(
        audit_path=env.get("SHARE_RECOVERY_AUDIT_PATH") or None,
        service_name=env.get("SHARE_RECOVERY_SERVICE_NAME", "share-recovery"),
        port=int(env.get("PORT", "8080")),
    )
