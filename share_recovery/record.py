"""
Share Recovery :: Record Schema
================================

The input record, validated with pydantic.

Two layouts are accepted and normalised into the same ``ShareRecord``:

  Flat (hackathon) layout::

      {"keys": {"n": 4, "k": 3},
       "1": {"base": "10", "value": "4"},
       "2": {"base": "2",  "value": "111"}, ...}

  Explicit layout::

      {"keys": {"n": 4, "k": 3},
       "shares": {"1": {"base": "10", "value": "4"}, ...}}

In the flat layout the reserved ``keys`` field is split from the share
entries structurally before validation, so share identifiers never need
to be compared against reserved names afterwards.

In the explicit layout nothing but ``keys`` may sit next to ``shares``;
a stray top-level entry is a schema error, not a silently dropped share.

Share order is the declaration order of the source document; nothing
here sorts the shares.
"""

import json
import re
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .errors import FileReadError, MalformedRecord


_IDENTIFIER = re.compile(r"-?[0-9]+")


class ThresholdKeys(BaseModel):
    """Threshold descriptor: N shares issued, K needed."""
    model_config = ConfigDict(frozen=True)

    n: int
    k: int

    @model_validator(mode="after")
    def _check_threshold(self) -> "ThresholdKeys":
        if self.k < 1:
            raise ValueError("threshold k must be >= 1")
        if self.k > self.n:
            raise ValueError(f"threshold k={self.k} cannot exceed n={self.n}")
        return self


class EncodedShare(BaseModel):
    """
    One share before decoding.

    ``base`` may arrive as a JSON string ("16") or integer (16); its
    range is checked by the decoder, not here, so that a radix of 37
    surfaces as InvalidBase rather than a schema error.
    """
    model_config = ConfigDict(frozen=True)

    base: int
    value: str


class ShareRecord(BaseModel):
    """Threshold descriptor plus the ordered share entries."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    keys: ThresholdKeys
    shares: Dict[str, EncodedShare]

    @model_validator(mode="before")
    @classmethod
    def _partition_flat_layout(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("record must be a JSON object")
        if "shares" in data:
            return data
        return {
            "keys": data.get("keys"),
            "shares": {name: entry for name, entry in data.items() if name != "keys"},
        }

    @field_validator("shares")
    @classmethod
    def _check_identifiers(cls, shares: Dict[str, EncodedShare]) -> Dict[str, EncodedShare]:
        for identifier in shares:
            if not _IDENTIFIER.fullmatch(identifier):
                raise ValueError(f"share identifier '{identifier}' is not an integer")
        return shares

    @property
    def threshold(self) -> int:
        return self.keys.k

    def entries(self) -> List[Tuple[int, str, EncodedShare]]:
        """(x, identifier, share) triples in declaration order."""
        return [(int(name), name, share) for name, share in self.shares.items()]


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"]) or "record"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def parse_record(data: Any) -> ShareRecord:
    """Validate an already-decoded JSON document; raises MalformedRecord."""
    try:
        return ShareRecord.model_validate(data)
    except ValidationError as e:
        raise MalformedRecord(f"Malformed share record: {_describe(e)}") from e


def parse_record_text(text: str) -> ShareRecord:
    """Parse JSON text into a ShareRecord."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedRecord(f"Record is not valid JSON: {e}") from e
    return parse_record(data)


def load_record(path: str) -> ShareRecord:
    """Read and validate the record file at *path*."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
        raise FileReadError(path, reason) from e
    return parse_record_text(text)
