"""
Share Recovery :: Error Taxonomy
=================================

Every failure raised while recovering a secret derives from
``RecoveryError`` and carries the *stage* that detected it, so the CLI
and the HTTP service can report where a run stopped.

Each class also derives from the closest builtin exception, so callers
that only know ``ValueError`` / ``PermissionError`` / ``ArithmeticError`` keep
working:

  FileReadError       -                read
  MalformedRecord     ValueError       parse
  InvalidBase         ValueError       decode
  InvalidDigit        ValueError       decode
  InsufficientShares  PermissionError  select
  DuplicateAbscissa   ValueError       interpolate
  InexactDivision     ArithmeticError  interpolate

There is no retry policy: a recovery is a single-shot computation, so
every error is reported once and the run stops.
"""

from typing import Optional


class RecoveryError(Exception):
    """Base class for all recovery failures."""
    stage = "recover"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FileReadError(RecoveryError):
    """The input record file is missing or unreadable."""
    stage = "read"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read record file '{path}': {reason}")
        self.path = path
        self.reason = reason


class MalformedRecord(RecoveryError, ValueError):
    """The record does not match the share schema."""
    stage = "parse"


class InvalidBase(RecoveryError, ValueError):
    """Radix outside [2, 36]."""
    stage = "decode"

    def __init__(self, base: int, identifier: Optional[str] = None):
        where = f" (share '{identifier}')" if identifier is not None else ""
        super().__init__(f"Invalid base {base}{where}: must be between 2 and 36")
        self.base = base
        self.identifier = identifier


class InvalidDigit(RecoveryError, ValueError):
    """A numeral character has no digit value below the base."""
    stage = "decode"

    def __init__(self, character: str, base: int, identifier: Optional[str] = None):
        where = f" (share '{identifier}')" if identifier is not None else ""
        if character:
            text = f"Invalid character '{character}' for base {base}{where}"
        else:
            text = f"Empty numeral for base {base}{where}"
        super().__init__(text)
        self.character = character
        self.base = base
        self.identifier = identifier


class InsufficientShares(RecoveryError, PermissionError):
    """Fewer shares than the threshold requires."""
    stage = "select"

    def __init__(self, available: int, required: int):
        super().__init__(
            f"Insufficient shares: {available} provided, {required} required"
        )
        self.available = available
        self.required = required


class DuplicateAbscissa(RecoveryError, ValueError):
    """Two points share an x-coordinate; their basis terms are undefined."""
    stage = "interpolate"

    def __init__(self, x: int, first_index: int, second_index: int):
        super().__init__(
            f"Duplicate x-coordinate {x} at positions {first_index} and {second_index}"
        )
        self.x = x
        self.first_index = first_index
        self.second_index = second_index


class InexactDivision(RecoveryError, ArithmeticError):
    """The interpolated value at x=0 is not an integer: the shares are inconsistent."""
    stage = "interpolate"

    def __init__(self, numerator: int, denominator: int):
        super().__init__(
            f"Interpolated secret {numerator}/{denominator} is not an integer; "
            "shares are inconsistent or below threshold"
        )
        self.numerator = numerator
        self.denominator = denominator
